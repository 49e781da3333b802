"""Value escaping for TeamCity service messages.

Inside a service message attribute value the characters ``|``, ``'``,
``[``, ``]`` and line breaks are written as two-character ``|`` escapes so a
single-pass line parser never sees structure inside a value.
"""

from __future__ import annotations

from tc_progress.errors import MessageParseError


_ESCAPES: dict[str, str] = {
    "|": "||",
    "'": "|'",
    "\n": "|n",
    "\r": "|r",
    "[": "|[",
    "]": "|]",
    "\u0085": "|x",
    "\u2028": "|l",
    "\u2029": "|p",
}

_ESCAPE_TABLE = str.maketrans(_ESCAPES)
_UNESCAPES: dict[str, str] = {escaped[1]: raw for raw, escaped in _ESCAPES.items()}


def escape_value(value: str) -> str:
    """Escape ``value`` for use inside ``key='...'``."""
    return value.translate(_ESCAPE_TABLE)


def unescape_value(value: str) -> str:
    """Reverse :func:`escape_value`.

    Also accepts ``|0xNNNN`` code point escapes.
    """
    out: list[str] = []
    i = 0
    n = len(value)
    while i < n:
        ch = value[i]
        if ch != "|":
            out.append(ch)
            i += 1
            continue
        if i + 1 >= n:
            raise MessageParseError(value, "dangling escape")
        code = value[i + 1]
        if code in _UNESCAPES:
            out.append(_UNESCAPES[code])
            i += 2
        elif code == "0" and value[i + 2 : i + 3] == "x" and i + 7 <= n:
            try:
                out.append(chr(int(value[i + 3 : i + 7], 16)))
            except ValueError:
                raise MessageParseError(value, "bad code point escape") from None
            i += 7
        else:
            raise MessageParseError(value, f"unknown escape |{code}")
    return "".join(out)


__all__ = ["escape_value", "unescape_value"]
