"""Driver loop: pull frames from a framer and route them to the sinks."""

import time
import logging
from dataclasses import dataclass, field
from typing import Optional

from rich.console import Console
from rich.markup import escape

from serial_frame_debugger.framing import Framer, iter_frames
from serial_frame_debugger.output import OutputRouter
from serial_frame_debugger.serial_transport import SerialTransportError

console = Console(stderr=True, soft_wrap=True)
logger = logging.getLogger("serial_frame_debugger.monitor")


@dataclass
class SessionStats:
    """Counters for one capture session."""

    frames: int = 0
    bytes: int = 0
    discarded: int = 0
    skipped: int = 0
    write_errors: int = 0
    started: float = field(default_factory=time.monotonic)
    ended: Optional[float] = None
    error: Optional[str] = None

    @property
    def duration(self) -> float:
        end = self.ended if self.ended is not None else time.monotonic()
        return end - self.started

    def summary(self) -> str:
        text = (
            f"{self.frames} frame(s), {self.bytes} byte(s) in {self.duration:.1f}s; "
            f"{self.discarded} partial frame(s) discarded, {self.write_errors} write error(s)"
        )
        if self.skipped:
            text += f", {self.skipped} padding byte(s) skipped"
        return text


class FrameMonitor:
    """Owns one framer and one router for the life of a session."""

    def __init__(self, framer: Framer, router: OutputRouter):
        self.framer = framer
        self.router = router
        self.stats = SessionStats()

    def run(self, max_frames: Optional[int] = None) -> SessionStats:
        """
        Route frames until the transport fails or `max_frames` is reached.

        A transport failure is reported once on stderr and ends the run
        normally; KeyboardInterrupt propagates to the caller.

        Args:
            max_frames: Stop after this many frames (None runs forever).

        Returns:
            Statistics for the session.
        """
        try:
            if max_frames is not None and max_frames <= 0:
                return self.stats
            for frame in iter_frames(self.framer):
                self.stats.frames += 1
                self.stats.bytes += len(frame)
                self.router.route(frame)
                self._sync_counters()
                if max_frames is not None and self.stats.frames >= max_frames:
                    break
        except SerialTransportError as e:
            self.stats.error = str(e)
            console.print(f"\n[red]A serial port error occurred: {escape(str(e))}[/red]")
        finally:
            self._sync_counters()
            self.stats.ended = time.monotonic()
        logger.info("Session ended: %s", self.stats.summary())
        return self.stats

    def _sync_counters(self) -> None:
        self.stats.discarded = self.framer.frames_discarded
        self.stats.skipped = self.framer.bytes_skipped
        self.stats.write_errors = self.router.write_errors
