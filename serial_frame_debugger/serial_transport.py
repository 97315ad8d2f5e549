"""Serial port communication for the frame debugger."""

import serial
from serial.tools import list_ports
from typing import Optional, List, Dict
from rich.console import Console
from rich.markup import escape

console = Console(stderr=True, soft_wrap=True)


class SerialTransportError(Exception):
    """Fatal (non-timeout) failure of the serial transport."""


class SerialPort:
    """Low-level serial port communication."""

    def __init__(self, port: str, baudrate: int = 115200, timeout: float = 1.0):
        """
        Initialize serial port.

        Args:
            port: Serial device path (e.g., "/dev/ttyUSB0" or "COM3").
            baudrate: Serial communication speed.
            timeout: Per-read timeout in seconds.
        """
        self.port = port
        self.baudrate = baudrate
        self.timeout = timeout
        self.serial = None

    def open(self) -> bool:
        """
        Open serial port.

        Returns:
            True if successful, False otherwise.
        """
        try:
            self.serial = serial.Serial(
                self.port,
                baudrate=self.baudrate,
                timeout=self.timeout,
                bytesize=serial.EIGHTBITS,
                parity=serial.PARITY_NONE,
                stopbits=serial.STOPBITS_ONE,
            )
            return True
        except (serial.SerialException, ValueError, OSError) as e:
            console.print(f"[red]✗ Failed to open port '{escape(self.port)}': {escape(str(e))}[/red]")
            return False

    def close(self) -> None:
        """Close serial port."""
        if self.serial:
            self.serial.close()
            self.serial = None

    def is_open(self) -> bool:
        """Check if port is open."""
        return self.serial is not None and self.serial.is_open

    def read(self, size: int = 1) -> Optional[bytes]:
        """
        Issue one blocking read for up to `size` bytes.

        Args:
            size: Number of bytes requested.

        Returns:
            Bytes read (fewer than `size` if the timeout expired part way),
            or None if the timeout expired before any byte arrived.

        Raises:
            SerialTransportError: The port is closed or the device failed.
        """
        if not self.is_open():
            raise SerialTransportError(f"{self.port} is not open")
        try:
            data = self.serial.read(size)
        except (serial.SerialException, OSError) as e:
            raise SerialTransportError(str(e)) from e
        return data if data else None

    def read_available(self, limit: int = 4096) -> Optional[bytes]:
        """
        Wait for one byte, then drain whatever is already buffered.

        Args:
            limit: Maximum number of bytes returned.

        Returns:
            A chunk of one or more bytes, or None on timeout.

        Raises:
            SerialTransportError: The port is closed or the device failed.
        """
        first = self.read(1)
        if first is None:
            return None
        try:
            waiting = self.serial.in_waiting
            if waiting and limit > 1:
                first += self.serial.read(min(waiting, limit - 1))
        except (serial.SerialException, OSError) as e:
            raise SerialTransportError(str(e)) from e
        return first

    def __enter__(self) -> "SerialPort":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def list_serial_ports() -> List[Dict[str, str]]:
    """
    Enumerate the serial ports visible to the host.

    Returns:
        One dictionary per port with 'device', 'description' and 'hwid' keys,
        sorted by device name.
    """
    ports = []
    for info in sorted(list_ports.comports(), key=lambda p: p.device):
        ports.append(
            {
                "device": info.device,
                "description": info.description or "",
                "hwid": info.hwid or "",
            }
        )
    return ports
