"""Sanitisation helpers.

Template names and descriptions are free text typed by providers and
shown to other providers when a template is shared. Strip HTML tags
and surrounding whitespace before storing them.
"""
import re

TAG_RE = re.compile(r"<[^>]+>")


def strip_tags(text: str) -> str:
    """Remove HTML tags from the given string and trim whitespace."""
    if not text:
        return ""
    return TAG_RE.sub("", text).strip()
