"""Input sanitization for rich-text and plain-text fields."""
from typing import Optional

import nh3

# Tags editors may use in descriptions, template bodies and announcements
RICH_TEXT_TAGS = {
    "a", "b", "blockquote", "br", "code", "em", "h1", "h2", "h3", "h4",
    "i", "li", "ol", "p", "pre", "span", "strong", "sub", "sup", "u", "ul",
}
RICH_TEXT_ATTRIBUTES = {"a": {"href", "title"}, "span": {"class"}}


def sanitize_html(value: Optional[str]) -> Optional[str]:
    """Drop scripts, event handlers and unknown tags, keep basic formatting"""
    if not value:
        return value
    return nh3.clean(value, tags=RICH_TEXT_TAGS, attributes=RICH_TEXT_ATTRIBUTES)


def strip_tags(value: Optional[str]) -> Optional[str]:
    """Remove every tag; used for titles and alt text"""
    if not value:
        return value
    return nh3.clean(value, tags=set(), attributes={}).strip()
