from __future__ import annotations

import re

_TAG_PATTERN = re.compile(r"<[^>]*>?", re.MULTILINE)


def strip_html(markup: str) -> str:
    """Remove HTML tags from lesson markup, leaving the text between them."""
    return _TAG_PATTERN.sub("", markup)
