"""Fixed-length framing."""

from typing import Optional

from rich.console import Console

from serial_frame_debugger.framing.base import Framer, SPACE, logger

console = Console(stderr=True, soft_wrap=True)


class FixedLengthFramer(Framer):
    """
    Cut the stream into frames of exactly `frame_length` bytes.

    Two states: seeking a start byte (skip bytes are idle padding and dropped)
    and filling the rest of the frame with one blocking read. A frame cut
    short by a timeout is discarded and seeking starts over.
    """

    def __init__(self, source, frame_length: int, skip_byte: Optional[int] = SPACE):
        if frame_length < 1:
            raise ValueError(f"Frame length must be at least 1, not {frame_length}")
        super().__init__(source)
        self.frame_length = frame_length
        self.skip_byte = skip_byte

    def next_frame(self) -> bytes:
        while True:
            start = self._seek_start()
            if self.frame_length == 1:
                return self._emit(start)

            self.buffer = bytearray(start)
            rest = self.source.read(self.frame_length - 1)
            if rest:
                self.buffer.extend(rest)

            if len(self.buffer) == self.frame_length:
                frame = self.buffer
                self.buffer = bytearray()
                return self._emit(frame)

            partial = bytes(self.buffer)
            self.buffer = bytearray()
            self.frames_discarded += 1
            console.print(
                f"[yellow]⚠️  Timed out mid-frame: discarded {len(partial)} of {self.frame_length} bytes[/yellow]"
            )
            logger.debug("Discarded partial frame: %r", partial)

    def _seek_start(self) -> bytes:
        """Read single bytes until one that is not the skip byte."""
        while True:
            byte = self.source.read(1)
            if byte is None:
                continue
            if self.skip_byte is not None and byte[0] == self.skip_byte:
                self.bytes_skipped += 1
                continue
            return byte[:1]
