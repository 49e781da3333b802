"""TeamCity service message codec."""

from .escape import escape_value, unescape_value
from .service import ServiceMessage, format_message, parse_message


__all__ = [
    "ServiceMessage",
    "escape_value",
    "format_message",
    "parse_message",
    "unescape_value",
]
