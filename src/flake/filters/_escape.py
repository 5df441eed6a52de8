"""HTML entity escaping."""

import re

from markupsafe import escape as _markup_escape

# Named (&amp;), decimal (&#039;) and hexadecimal (&#x27;) entities.
_ENTITY_PATTERN = re.compile(r"&(?:[A-Za-z][A-Za-z0-9]*|#[0-9]+|#[xX][0-9A-Fa-f]+);")


def escape(value: object, double_encode: bool = True) -> str:  # noqa: FBT001, FBT002
    """Encode `&`, `<`, `>`, `"` and `'` as HTML entities.

    Args:
        value: The value to escape. Non-strings are converted with str().
        double_encode: When False, entities already present in the value are
            left as they are instead of having their `&` encoded again.

    Returns:
        The escaped text as a plain string.

    Example:
        >>> escape('<a href="x">Tom & Jerry</a>')
        '&lt;a href=&#34;x&#34;&gt;Tom &amp; Jerry&lt;/a&gt;'
        >>> escape("&amp; &copy;", double_encode=False)
        '&amp; &copy;'
    """
    text = str(value)
    if double_encode:
        return str(_markup_escape(text))

    parts: list[str] = []
    position = 0
    for match in _ENTITY_PATTERN.finditer(text):
        parts.append(str(_markup_escape(text[position : match.start()])))
        parts.append(match.group(0))
        position = match.end()
    parts.append(str(_markup_escape(text[position:])))
    return "".join(parts)
