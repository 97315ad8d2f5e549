"""Timeout-delimited framing: a pause on the line ends the frame."""

from serial_frame_debugger.framing.base import Framer, SPACE, logger


class TimeoutFramer(Framer):
    """Accumulate bytes until a read times out, then emit them minus trailing spaces."""

    def next_frame(self) -> bytes:
        while True:
            chunk = self.source.read_available()
            if chunk is not None:
                self.buffer.extend(chunk)
                continue

            frame = bytes(self.buffer).rstrip(bytes([SPACE]))
            self.buffer.clear()
            if frame:
                return self._emit(frame)
            logger.debug("Idle timeout, nothing pending")
