"""Newline-or-pause framing."""

from typing import Optional

from serial_frame_debugger.framing.base import Framer, logger

NEWLINE = 0x0A
LINE_ENDINGS = b"\r\n"


class HybridFramer(Framer):
    """
    Emit one frame per ``\\n``-terminated line, or whatever is pending when
    the line goes quiet.

    Line frames have their trailing CR/LF run stripped, lines that are empty
    after stripping are dropped. A frame flushed by a timeout is emitted
    as-is. `_scanned` marks how much of the buffer is known to hold no
    newline so each byte is searched once.
    """

    def __init__(self, source):
        super().__init__(source)
        self._scanned = 0

    def next_frame(self) -> bytes:
        while True:
            line = self._extract_line()
            if line is not None:
                return self._emit(line)

            chunk = self.source.read_available()
            if chunk is not None:
                self.buffer.extend(chunk)
                continue

            if self.buffer:
                frame = self.buffer
                self.buffer = bytearray()
                self._scanned = 0
                return self._emit(frame)
            logger.debug("Idle timeout, nothing pending")

    def _extract_line(self) -> Optional[bytes]:
        """Remove and return the first non-empty complete line, if any."""
        while True:
            idx = self.buffer.find(NEWLINE, self._scanned)
            if idx < 0:
                self._scanned = len(self.buffer)
                return None
            line = bytes(self.buffer[: idx + 1])
            del self.buffer[: idx + 1]
            self._scanned = 0
            line = line.rstrip(LINE_ENDINGS)
            if line:
                return line
