"""Frame sinks (console and append-only files) and the router feeding them."""

from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.markup import escape

from serial_frame_debugger.rendering import FORMAT_HEX, FORMAT_ESCAPED, FORMATS, render

console = Console(stderr=True, soft_wrap=True)


class ConsoleSink:
    """Print frame lines verbatim to the terminal."""

    def __init__(self, out: Optional[Console] = None):
        self.out = out or Console(soft_wrap=True)

    def write(self, line: str) -> bool:
        try:
            self.out.out(line, highlight=False)
            return True
        except OSError as e:
            console.print(f"[red]✗ Error writing to console: {escape(str(e))}[/red]")
            return False

    def close(self) -> None:
        pass


class FileSink:
    """Append frame lines to a text file, one line per frame."""

    def __init__(self, path, label: str = "output"):
        """
        Initialize file sink.

        Args:
            path: File to append to; created if missing, never truncated.
            label: Name used in error messages (e.g. "hex").
        """
        self.path = Path(path)
        self.label = label
        self.file = None

    def open(self) -> None:
        """
        Open the file in append mode.

        Raises:
            OSError: The file cannot be created or opened.
        """
        self.file = open(self.path, "a", encoding="utf-8")

    def write(self, line: str) -> bool:
        """
        Append one line and flush it.

        Returns:
            True if written, False if the write failed (already reported).
        """
        if self.file is None:
            console.print(f"[red]✗ {self.label} file '{escape(str(self.path))}' is not open[/red]")
            return False
        try:
            self.file.write(line + "\n")
            self.file.flush()
            return True
        except (OSError, ValueError) as e:
            console.print(
                f"[red]✗ Error writing to {self.label} file "
                f"'{escape(str(self.path))}': {escape(str(e))}[/red]"
            )
            return False

    def close(self) -> None:
        if self.file:
            try:
                self.file.close()
            except OSError as e:
                console.print(
                    f"[yellow]⚠️  Could not close '{escape(str(self.path))}': {escape(str(e))}[/yellow]"
                )
            self.file = None


class OutputRouter:
    """
    Render each frame once and fan the text out to every configured sink.

    The console gets the selected format, the generic file gets the same
    text, the hex file always gets hex and the raw file always gets the
    escaped text. A failing sink never stops the others.
    """

    def __init__(
        self,
        console_format: str = FORMAT_HEX,
        console_sink: Optional[ConsoleSink] = None,
        output: Optional[FileSink] = None,
        hex_output: Optional[FileSink] = None,
        raw_output: Optional[FileSink] = None,
    ):
        if console_format not in FORMATS:
            raise ValueError(f"Unknown console format: {console_format!r}")
        self.console_format = console_format
        self.console_sink = console_sink or ConsoleSink()
        self.output = output
        self.hex_output = hex_output
        self.raw_output = raw_output
        self.write_errors = 0

    @classmethod
    def from_paths(
        cls,
        console_format: str = FORMAT_HEX,
        output=None,
        hex_output=None,
        raw_output=None,
        console_sink: Optional[ConsoleSink] = None,
    ) -> "OutputRouter":
        """
        Open the file sinks for the given paths (None skips a sink).

        Raises:
            OSError: A file could not be opened; files opened so far are closed.
        """
        opened = {}
        try:
            for key, path in (("output", output), ("hex", hex_output), ("raw", raw_output)):
                if path is None:
                    continue
                sink = FileSink(path, label=key)
                sink.open()
                opened[key] = sink
        except OSError:
            for sink in opened.values():
                sink.close()
            raise
        return cls(
            console_format,
            console_sink=console_sink,
            output=opened.get("output"),
            hex_output=opened.get("hex"),
            raw_output=opened.get("raw"),
        )

    @property
    def file_sinks(self) -> List[FileSink]:
        return [s for s in (self.output, self.hex_output, self.raw_output) if s is not None]

    def route(self, frame: bytes) -> bool:
        """
        Write one frame to every sink.

        Returns:
            True if every write succeeded.
        """
        rendered = {fmt: render(frame, fmt) for fmt in FORMATS}
        hex_line = rendered[FORMAT_HEX]
        escaped_line = rendered[FORMAT_ESCAPED]
        console_line = rendered[self.console_format]

        writes = [(self.console_sink, console_line)]
        if self.output:
            writes.append((self.output, console_line))
        if self.hex_output:
            writes.append((self.hex_output, hex_line))
        if self.raw_output:
            writes.append((self.raw_output, escaped_line))

        ok = True
        for sink, line in writes:
            if not sink.write(line):
                self.write_errors += 1
                ok = False
        return ok

    def close(self) -> None:
        """Close all file sinks. Safe to call more than once."""
        for sink in self.file_sinks:
            sink.close()

    def __enter__(self) -> "OutputRouter":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
