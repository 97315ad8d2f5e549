"""Shared test helpers: a scripted byte source standing in for the serial port."""

import logging
from collections import deque

import pytest

from serial_frame_debugger.framing import iter_frames
from serial_frame_debugger.serial_transport import SerialTransportError
from serial_frame_debugger.shared import LOGGER_NAME

# Script marker: the next read times out.
TIMEOUT = object()


class ScriptedSource:
    """
    Byte source that replays a script.

    Script items are byte chunks, TIMEOUT markers and exceptions (raised when
    reached). `read(size)` behaves like pyserial: it gathers bytes across
    chunks until `size` is reached or a TIMEOUT marker is hit.
    `read_available()` returns one chunk per call. Once the script is used up
    every read raises SerialTransportError, like an unplugged device.
    """

    def __init__(self, *script):
        self.script = deque(script)
        self.reads = []

    def _exhausted(self):
        return SerialTransportError("script exhausted")

    def read(self, size=1):
        self.reads.append(("read", size))
        data = bytearray()
        while len(data) < size:
            if not self.script:
                raise self._exhausted()
            item = self.script[0]
            if item is TIMEOUT:
                self.script.popleft()
                return bytes(data) if data else None
            if isinstance(item, BaseException):
                self.script.popleft()
                raise item
            take = item[: size - len(data)]
            data += take
            if len(take) < len(item):
                self.script[0] = item[len(take):]
            else:
                self.script.popleft()
        return bytes(data)

    def read_available(self, limit=4096):
        self.reads.append(("read_available", limit))
        if not self.script:
            raise self._exhausted()
        item = self.script.popleft()
        if item is TIMEOUT:
            return None
        if isinstance(item, BaseException):
            raise item
        if len(item) > limit:
            self.script.appendleft(item[limit:])
            item = item[:limit]
        return bytes(item)


def drain(framer):
    """Collect frames until the scripted source runs dry."""
    frames = []
    try:
        for frame in iter_frames(framer):
            frames.append(frame)
    except SerialTransportError:
        pass
    return frames


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drop handlers installed by LogManager so they do not outlive a test."""
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
