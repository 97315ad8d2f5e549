"""Framing policy description and the common framer contract."""

import logging
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger("serial_frame_debugger.framing")

SPACE = 0x20

MODE_FIXED = "fixed"
MODE_TIMEOUT = "timeout"
MODE_HYBRID = "hybrid"
MODES = (MODE_FIXED, MODE_TIMEOUT, MODE_HYBRID)

# Per-read timeouts (ms): fixed frames tolerate a slow line, the
# pause-delimited modes need a short timeout to notice the pause.
FIXED_READ_TIMEOUT_MS = 1000
PAUSE_READ_TIMEOUT_MS = 100


@dataclass(frozen=True)
class FramingPolicy:
    """How the byte stream is cut into frames. Chosen once at startup."""

    kind: str
    frame_length: int = 0
    skip_byte: Optional[int] = SPACE

    def __post_init__(self):
        if self.kind not in MODES:
            raise ValueError(f"Unknown framing mode: {self.kind!r}")
        if self.kind == MODE_FIXED and self.frame_length < 1:
            raise ValueError("Fixed-length framing needs a frame length of at least 1")
        if self.kind != MODE_FIXED and self.frame_length != 0:
            raise ValueError(f"{self.kind} framing takes no frame length")
        if self.skip_byte is not None and not 0 <= self.skip_byte <= 0xFF:
            raise ValueError(f"Skip byte out of range: {self.skip_byte}")

    @classmethod
    def from_frame_length(
        cls,
        frame_length: int,
        mode: str = MODE_HYBRID,
        skip_byte: Optional[int] = SPACE,
    ) -> "FramingPolicy":
        """
        Build a policy from the command line frame length.

        Args:
            frame_length: >0 selects fixed-length framing, 0 selects `mode`.
            mode: Pause-delimited mode used when frame_length is 0.
            skip_byte: Idle padding byte ignored before a fixed-length frame.
        """
        if frame_length < 0:
            raise ValueError(f"Frame length must not be negative: {frame_length}")
        if frame_length > 0:
            return cls(MODE_FIXED, frame_length, skip_byte)
        if mode not in (MODE_TIMEOUT, MODE_HYBRID):
            raise ValueError(f"Frame length 0 needs mode 'timeout' or 'hybrid', not {mode!r}")
        return cls(mode)

    @property
    def default_timeout_ms(self) -> int:
        """Read timeout suited to this policy."""
        return FIXED_READ_TIMEOUT_MS if self.kind == MODE_FIXED else PAUSE_READ_TIMEOUT_MS

    def describe(self) -> str:
        if self.kind == MODE_FIXED:
            return f"fixed-length ({self.frame_length} bytes)"
        if self.kind == MODE_TIMEOUT:
            return "timeout-delimited"
        return "newline/timeout hybrid"


class Framer:
    """
    Base class for the framing policies.

    A framer reads from a byte source (anything with ``read(size)`` and
    ``read_available()`` returning bytes, or None on timeout) and owns the
    pending buffer of bytes that are not yet part of an emitted frame.
    """

    def __init__(self, source):
        self.source = source
        self.buffer = bytearray()
        self.frames_emitted = 0
        self.frames_discarded = 0
        self.bytes_skipped = 0

    @property
    def pending(self) -> bytes:
        """Copy of the bytes received but not yet emitted."""
        return bytes(self.buffer)

    def next_frame(self) -> bytes:
        """
        Block until the next complete frame is available.

        Returns:
            A non-empty frame.

        Raises:
            SerialTransportError: The byte source failed.
        """
        raise NotImplementedError

    def _emit(self, frame) -> bytes:
        self.frames_emitted += 1
        return bytes(frame)
