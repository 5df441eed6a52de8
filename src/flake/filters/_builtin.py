"""Built-in sanitize filters.

Every filter takes the value first, followed by the string arguments parsed
from the rule. Numeric arguments are converted by the filter itself.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from ._escape import escape

if TYPE_CHECKING:
    from ._registry import Filter

_TAG_PATTERN = re.compile(r"<[^>]*>")
_NEWLINE_PATTERN = re.compile(r"(\r\n|\n\r|\n|\r)")


def trim(value: object, chars: str | None = None) -> str:
    return str(value).strip(chars)


def ltrim(value: object, chars: str | None = None) -> str:
    return str(value).lstrip(chars)


def rtrim(value: object, chars: str | None = None) -> str:
    return str(value).rstrip(chars)


def lower(value: object) -> str:
    return str(value).lower()


def upper(value: object) -> str:
    return str(value).upper()


def ucfirst(value: object) -> str:
    text = str(value)
    return text[:1].upper() + text[1:]


def title(value: object) -> str:
    """Uppercase the first character of every whitespace-separated word."""
    return re.sub(r"(^|\s)(\S)", lambda m: m.group(1) + m.group(2).upper(), str(value))


def substr(value: object, start: str = "0", length: str | None = None) -> str:
    """Return part of a string.

    A negative `start` counts from the end. A negative `length` leaves that
    many characters off the end; an omitted length runs to the end.

    Example:
        >>> substr("Hello World", "0", "5")
        'Hello'
        >>> substr("Hello World", "-5")
        'World'
        >>> substr("Hello World", "1", "-1")
        'ello Worl'
    """
    text = str(value)
    begin = int(start)
    if begin < 0:
        begin = max(len(text) + begin, 0)
    if length is None or length == "":
        return text[begin:]

    count = int(length)
    if count < 0:
        return text[begin : len(text) + count]
    return text[begin : begin + count]


def replace(value: object, old: str, new: str = "") -> str:
    return str(value).replace(old, new)


def strip_tags(value: object) -> str:
    return _TAG_PATTERN.sub("", str(value))


def nl2br(value: object) -> str:
    """Insert `<br />` before every line break."""
    return _NEWLINE_PATTERN.sub(r"<br />\1", str(value))


def escape_filter(value: object, double_encode: str = "true") -> str:
    encode = double_encode.strip().lower() not in {"false", "0", "no"}
    return escape(value, double_encode=encode)


def to_int(value: object) -> int:
    """Convert to int the lenient way: leading digits count, anything else is 0."""
    if isinstance(value, (int, float)):
        return int(value)
    match = re.match(r"\s*([+-]?\d+)", str(value))
    return int(match.group(1)) if match else 0


def to_float(value: object) -> float:
    if isinstance(value, (int, float)):
        return float(value)
    match = re.match(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)", str(value))
    return float(match.group(1)) if match else 0.0


def default(value: object, fallback: str = "") -> object:
    """Replace None and empty strings with `fallback`."""
    if value is None or value == "":
        return fallback
    return value


BUILTIN_FILTERS: dict[str, Filter] = {
    "trim": trim,
    "ltrim": ltrim,
    "rtrim": rtrim,
    "lower": lower,
    "upper": upper,
    "ucfirst": ucfirst,
    "title": title,
    "substr": substr,
    "replace": replace,
    "strip_tags": strip_tags,
    "nl2br": nl2br,
    "escape": escape_filter,
    "int": to_int,
    "float": to_float,
    "default": default,
}
