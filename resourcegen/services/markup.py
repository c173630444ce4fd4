"""HTML escaping helpers for text inserted outside the rich-text renderer."""

from html import escape
from typing import Any


def escape_html(value: Any) -> str:
    """Escape text for an element body (``& < > "``)."""
    if value is None:
        return ""
    return escape(str(value), quote=False).replace('"', "&quot;")


def escape_attr(value: Any) -> str:
    """Escape text for a quoted attribute value (also escapes single quotes)."""
    if value is None:
        return ""
    return escape(str(value), quote=True)


def img_tag(src: str, alt: str = "", css_class: str = "") -> str:
    class_attr = f' class="{escape_attr(css_class)}"' if css_class else ""
    return f'<img src="{escape_attr(src)}" alt="{escape_attr(alt)}"{class_attr} loading="lazy" />'
