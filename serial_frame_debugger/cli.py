"""CLI entry point for the serial frame debugger."""

import sys
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from serial_frame_debugger.framing import (
    FramingPolicy,
    MODE_HYBRID,
    MODE_TIMEOUT,
    SPACE,
    create_framer,
)
from serial_frame_debugger.monitor import FrameMonitor
from serial_frame_debugger.output import OutputRouter
from serial_frame_debugger.rendering import FORMAT_HEX, FORMATS
from serial_frame_debugger.serial_transport import SerialPort, list_serial_ports
from serial_frame_debugger.shared import ConfigManager, ConfigError, LogManager

__version__ = "0.1.0"

console = Console(stderr=True, soft_wrap=True)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]
NO_SKIP = ("none", "off", "")


def parse_skip_byte(value: Optional[str]) -> Optional[int]:
    """Parse a skip byte given as an integer literal ("32", "0x20") or "none"."""
    if value is None or value.strip().lower() in NO_SKIP:
        return None
    try:
        byte = int(value.strip(), 0)
    except ValueError:
        raise click.BadParameter(f"{value!r} is not a byte value or 'none'", param_hint="--skip-byte")
    if not 0 <= byte <= 0xFF:
        raise click.BadParameter(f"{value!r} is outside 0-255", param_hint="--skip-byte")
    return byte


def _pick(cli_value, config_value, default):
    if cli_value is not None:
        return cli_value
    if config_value is not None:
        return config_value
    return default


@click.group()
@click.version_option(version=__version__)
def cli():
    """Serial frame debugger - segment a serial byte stream into frames and log them."""
    pass


@cli.command()
@click.argument("port")
@click.argument("baud", type=click.IntRange(min=1))
@click.option(
    "--format",
    "-f",
    "console_format",
    type=click.Choice(FORMATS),
    default=None,
    help="Console format: hex bytes or escaped text [default: hex]",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False),
    default=None,
    help="Append frames in the console format to this file",
)
@click.option(
    "--hex-output",
    type=click.Path(dir_okay=False),
    default=None,
    help="Append frames as hex to this file",
)
@click.option(
    "--raw-output",
    type=click.Path(dir_okay=False),
    default=None,
    help="Append frames as escaped text to this file",
)
@click.option(
    "--frame-length",
    "-n",
    type=click.IntRange(min=0),
    default=None,
    help="Fixed frame length in bytes; 0 uses newline/timeout framing [default: 0]",
)
@click.option(
    "--mode",
    type=click.Choice([MODE_HYBRID, MODE_TIMEOUT]),
    default=None,
    help="Framing used when frame length is 0 [default: hybrid]",
)
@click.option(
    "--skip-byte",
    default=None,
    help="Idle padding byte dropped before a fixed-length frame, or 'none' [default: 0x20]",
)
@click.option(
    "--timeout-ms",
    type=click.IntRange(min=1),
    default=None,
    help="Per-read timeout [default: 1000 fixed-length, 100 otherwise]",
)
@click.option(
    "--max-frames",
    type=click.IntRange(min=1),
    default=None,
    help="Stop after this many frames",
)
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="INI file with default settings",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Diagnostic log level [default: WARNING]",
)
def listen(
    port,
    baud,
    console_format,
    output,
    hex_output,
    raw_output,
    frame_length,
    mode,
    skip_byte,
    timeout_ms,
    max_frames,
    config_path,
    log_level,
):
    """Listen on PORT at BAUD and print every received frame."""
    config = ConfigManager(config_path)
    try:
        config.load()
        console_format = _pick(console_format, config.get("output", "format"), FORMAT_HEX)
        output = _pick(output, config.get("output", "output"), None)
        hex_output = _pick(hex_output, config.get("output", "hex_output"), None)
        raw_output = _pick(raw_output, config.get("output", "raw_output"), None)
        frame_length = _pick(frame_length, config.getint("framing", "frame_length"), 0)
        mode = _pick(mode, config.get("framing", "mode"), MODE_HYBRID)
        skip_text = _pick(skip_byte, config.get("framing", "skip_byte"), hex(SPACE))
        timeout_ms = _pick(timeout_ms, config.getint("serial", "timeout_ms"), None)
        log_level = _pick(log_level, config.get("logging", "level"), "WARNING")
    except ConfigError as e:
        raise click.ClickException(str(e))

    if console_format not in FORMATS:
        raise click.BadParameter(f"{console_format!r} is not one of {', '.join(FORMATS)}", param_hint="--format")
    if log_level.upper() not in LOG_LEVELS:
        raise click.BadParameter(f"{log_level!r} is not a log level", param_hint="--log-level")

    logger = LogManager(log_level).get_logger()

    try:
        policy = FramingPolicy.from_frame_length(frame_length, mode, parse_skip_byte(skip_text))
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--frame-length/--mode")
    if timeout_ms is None:
        timeout_ms = policy.default_timeout_ms
    if timeout_ms < 1:
        raise click.BadParameter("timeout must be at least 1 ms", param_hint="--timeout-ms")

    try:
        router = OutputRouter.from_paths(console_format, output, hex_output, raw_output)
    except OSError as e:
        raise click.ClickException(f"Failed to open output file '{e.filename}': {e.strerror or e}")

    for sink in router.file_sinks:
        console.print(f"📝 Logging {sink.label} to: {escape(str(sink.path))}")

    serial_port = SerialPort(port, baudrate=baud, timeout=timeout_ms / 1000.0)
    if not serial_port.open():
        router.close()
        sys.exit(1)

    console.print(
        f"Listening on {escape(port)} at {baud} baud ({policy.describe()}, "
        f"{timeout_ms} ms read timeout). Press Ctrl+C to exit."
    )
    logger.debug("Policy %s, console format %s", policy, console_format)

    monitor = FrameMonitor(create_framer(policy, serial_port), router)
    try:
        stats = monitor.run(max_frames=max_frames)
    except KeyboardInterrupt:
        stats = monitor.stats
        console.print("\n[yellow]Interrupted[/yellow]")
    finally:
        serial_port.close()
        router.close()

    console.print(f"[dim]{stats.summary()}[/dim]")


@cli.command()
def ports():
    """List the serial ports on this machine."""
    found = list_serial_ports()
    if not found:
        console.print("[yellow]⚠️  No serial ports found[/yellow]")
        return

    table = Table(title="Serial ports")
    table.add_column("Device", style="cyan")
    table.add_column("Description")
    table.add_column("Hardware ID", style="dim")
    for info in found:
        table.add_row(info["device"], info["description"], info["hwid"])
    Console().print(table)


def main():
    """Entry point."""
    cli()


if __name__ == "__main__":
    main()
