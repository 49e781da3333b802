"""Formatting and parsing of ``##teamcity[...]`` service message lines."""

from __future__ import annotations

from dataclasses import dataclass, field

from tc_progress.errors import MessageParseError
from tc_progress.messages.escape import escape_value, unescape_value


PREFIX = "##teamcity["
SUFFIX = "]"


@dataclass(frozen=True, slots=True)
class ServiceMessage:
    """A parsed service message.

    ``attrs`` keeps the order attributes appeared in. Single-value messages
    (``##teamcity[name 'value']``) carry ``value`` instead of attributes.
    """

    name: str
    attrs: dict[str, str] = field(default_factory=dict)
    value: str | None = None


def format_message(name: str, /, **attrs: object) -> str:
    """Render one service message line (without trailing newline).

    Attributes are written in argument order; ``None`` values are skipped.
    """
    parts = [name]
    for key, value in attrs.items():
        if value is None:
            continue
        parts.append(f"{key}='{escape_value(str(value))}'")
    return f"{PREFIX}{' '.join(parts)}{SUFFIX}"


def parse_message(line: str) -> ServiceMessage | None:
    """Parse a line into a :class:`ServiceMessage`.

    Returns ``None`` for lines that are not service messages at all.
    Raises :class:`MessageParseError` for service messages that are malformed.
    """
    text = line.strip()
    if not text.startswith(PREFIX):
        return None
    if not text.endswith(SUFFIX):
        raise MessageParseError(line, "missing closing bracket")

    body = text[len(PREFIX) : -len(SUFFIX)]
    pos = _skip_spaces(body, 0)
    start = pos
    while pos < len(body) and not body[pos].isspace():
        pos += 1
    name = body[start:pos]
    if not name:
        raise MessageParseError(line, "missing message name")

    pos = _skip_spaces(body, pos)
    if pos < len(body) and body[pos] == "'":
        value, pos = _read_quoted(line, body, pos)
        if _skip_spaces(body, pos) != len(body):
            raise MessageParseError(line, "trailing text after value")
        return ServiceMessage(name=name, value=value)

    attrs: dict[str, str] = {}
    while pos < len(body):
        eq = body.find("=", pos)
        if eq == -1:
            raise MessageParseError(line, "attribute without value")
        key = body[pos:eq].strip()
        if not key or any(ch.isspace() for ch in key):
            raise MessageParseError(line, f"bad attribute name {key!r}")
        if eq + 1 >= len(body) or body[eq + 1] != "'":
            raise MessageParseError(line, f"unquoted value for {key}")
        attrs[key], pos = _read_quoted(line, body, eq + 1)
        pos = _skip_spaces(body, pos)
    return ServiceMessage(name=name, attrs=attrs)


def _skip_spaces(text: str, pos: int) -> int:
    while pos < len(text) and text[pos].isspace():
        pos += 1
    return pos


def _read_quoted(line: str, body: str, pos: int) -> tuple[str, int]:
    """Read a quoted value starting at the opening quote at ``pos``."""
    i = pos + 1
    while i < len(body):
        ch = body[i]
        if ch == "|":
            i += 2
            continue
        if ch == "'":
            return unescape_value(body[pos + 1 : i]), i + 1
        i += 1
    raise MessageParseError(line, "unterminated value")


__all__ = ["PREFIX", "ServiceMessage", "format_message", "parse_message"]
