"""Text renderings of a received frame."""

import re

FORMAT_HEX = "hex"
FORMAT_ESCAPED = "escaped"
FORMATS = (FORMAT_HEX, FORMAT_ESCAPED)

PRINTABLE_MIN = 0x20
PRINTABLE_MAX = 0x7E
BACKSLASH = 0x5C

_ESCAPE_TOKEN = re.compile(r"\\(?:x([0-9A-F]{2})|(\\))")


def to_hex(data: bytes) -> str:
    """Render bytes as space separated uppercase pairs, e.g. ``"0A 1B FF"``."""
    return " ".join(f"{b:02X}" for b in data)


def to_escaped(data: bytes) -> str:
    """
    Render bytes as printable ASCII with backslash escapes.

    Bytes 0x20-0x7E are written literally, a backslash is doubled and every
    other byte becomes ``\\xNN``. The output never contains a control
    character and maps back to exactly one byte sequence.
    """
    out = []
    for b in data:
        if b == BACKSLASH:
            out.append("\\\\")
        elif PRINTABLE_MIN <= b <= PRINTABLE_MAX:
            out.append(chr(b))
        else:
            out.append(f"\\x{b:02X}")
    return "".join(out)


def render(data: bytes, fmt: str) -> str:
    """Render `data` in the named format."""
    if fmt == FORMAT_HEX:
        return to_hex(data)
    if fmt == FORMAT_ESCAPED:
        return to_escaped(data)
    raise ValueError(f"Unknown format: {fmt!r}")


def parse_hex(text: str) -> bytes:
    """Inverse of :func:`to_hex`."""
    if not text:
        return b""
    out = bytearray()
    for token in text.split(" "):
        if len(token) != 2:
            raise ValueError(f"Bad hex byte: {token!r}")
        out.append(int(token, 16))
    return bytes(out)


def unescape(text: str) -> bytes:
    """Inverse of :func:`to_escaped`."""
    out = bytearray()
    i = 0
    while i < len(text):
        ch = text[i]
        if ch == "\\":
            m = _ESCAPE_TOKEN.match(text, i)
            if not m:
                raise ValueError(f"Bad escape at offset {i}: {text[i:i + 4]!r}")
            out.append(int(m.group(1), 16) if m.group(1) else BACKSLASH)
            i = m.end()
            continue
        code = ord(ch)
        if not PRINTABLE_MIN <= code <= PRINTABLE_MAX:
            raise ValueError(f"Unescaped character {ch!r} at offset {i}")
        out.append(code)
        i += 1
    return bytes(out)
