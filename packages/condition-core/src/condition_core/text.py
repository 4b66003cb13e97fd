"""Plain-text helpers."""

from __future__ import annotations

import re

# Comments, processing instructions, tags (a ">" inside a quoted attribute
# does not close the tag), empty tags, and an unclosed tag running to the end.
_TAG_RE = re.compile(
    r"""<!--.*?-->"""
    r"""|<\?.*?\?>"""
    r"""|<[!?/]?[a-zA-Z](?:"[^"]*"|'[^']*'|[^'"<>])*>"""
    r"""|</?>"""
    r"""|<[a-zA-Z/!?][^>]*$""",
    re.DOTALL,
)


def strip_tags(text: str) -> str:
    """Remove markup tags from *text*, leaving everything else untouched.

    Entities are not decoded and whitespace is not normalised.
    """
    if "<" not in text:
        return text
    return _TAG_RE.sub("", text)
