"""Frame segmentation: turn a byte stream into frames under a framing policy."""

from typing import Iterator

from serial_frame_debugger.framing.base import (
    FramingPolicy,
    Framer,
    MODE_FIXED,
    MODE_TIMEOUT,
    MODE_HYBRID,
    MODES,
    SPACE,
)
from serial_frame_debugger.framing.fixed_length import FixedLengthFramer
from serial_frame_debugger.framing.timeout import TimeoutFramer
from serial_frame_debugger.framing.hybrid import HybridFramer

__all__ = [
    "FramingPolicy",
    "Framer",
    "FixedLengthFramer",
    "TimeoutFramer",
    "HybridFramer",
    "MODE_FIXED",
    "MODE_TIMEOUT",
    "MODE_HYBRID",
    "MODES",
    "SPACE",
    "create_framer",
    "iter_frames",
]


def create_framer(policy: FramingPolicy, source) -> Framer:
    """
    Build the framer for `policy` reading from `source`.

    Args:
        policy: Framing policy selected at startup.
        source: Byte source (e.g. an open SerialPort).
    """
    if policy.kind == MODE_FIXED:
        return FixedLengthFramer(source, policy.frame_length, policy.skip_byte)
    if policy.kind == MODE_TIMEOUT:
        return TimeoutFramer(source)
    return HybridFramer(source)


def iter_frames(framer: Framer) -> Iterator[bytes]:
    """
    Yield frames from `framer` until its source fails.

    The SerialTransportError that ends the stream propagates to the caller.
    """
    while True:
        yield framer.next_frame()
