#!/usr/bin/env python3
"""Test the pyserial wrapper used as the byte source."""

import pytest
import serial

from serial_frame_debugger import serial_transport
from serial_frame_debugger.serial_transport import SerialPort, SerialTransportError


class FakeSerial:
    """Stand-in for serial.Serial serving bytes from a buffer."""

    def __init__(self, data=b"", fail=None):
        self.data = bytearray(data)
        self.fail = fail
        self.is_open = True

    @property
    def in_waiting(self):
        return len(self.data)

    def read(self, size=1):
        if self.fail:
            raise self.fail
        chunk = bytes(self.data[:size])
        del self.data[:size]
        return chunk

    def close(self):
        self.is_open = False


def test_open_failure_message_is_printed_verbatim(monkeypatch, capsys):
    """Port names and errors with brackets are not treated as markup."""

    def refuse(*args, **kwargs):
        raise serial.SerialException("[bold]device busy[/bold]")

    monkeypatch.setattr(serial_transport.serial, "Serial", refuse)
    port = SerialPort("[red]/dev/ttyUSB0", 9600)
    assert port.open() is False
    err = capsys.readouterr().err
    assert "[red]/dev/ttyUSB0" in err
    assert "[bold]device busy[/bold]" in err


def test_read_returns_none_on_timeout():
    port = SerialPort("/dev/ttyUSB0")
    port.serial = FakeSerial()
    assert port.read(4) is None


def test_read_available_drains_waiting_bytes():
    port = SerialPort("/dev/ttyUSB0")
    port.serial = FakeSerial(b"hello")
    assert port.read_available() == b"hello"
    port.serial = FakeSerial(b"hello")
    assert port.read_available(limit=3) == b"hel"


def test_device_failure_is_fatal():
    port = SerialPort("/dev/ttyUSB0")
    port.serial = FakeSerial(fail=serial.SerialException("device disconnected"))
    with pytest.raises(SerialTransportError, match="device disconnected"):
        port.read(1)


def test_reading_closed_port_is_fatal():
    port = SerialPort("/dev/ttyUSB0")
    with pytest.raises(SerialTransportError):
        port.read(1)
    port.serial = FakeSerial(b"x")
    with port:
        assert port.is_open()
    assert not port.is_open()


if __name__ == "__main__":
    test_read_returns_none_on_timeout()
    test_read_available_drains_waiting_bytes()
    print("\n✅ Serial transport tests passed!")
