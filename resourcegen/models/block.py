from typing import Any, Dict, Literal, Optional, Union

from pydantic import BaseModel


class RichContentBlock(BaseModel):
    """Body content unit: optional rich text plus an optional captioned image."""

    kind: Literal["rich_content"] = "rich_content"
    id: Optional[str] = None
    rich_text: Optional[Dict[str, Any]] = None
    image: Optional[Any] = None  # link stub or inlined asset
    caption: str = ""
    full_width: bool = False
    style: str = "text"  # already normalized against the style whitelist


class CtaBlock(BaseModel):
    """Call-to-action unit: heading, description and an optional button."""

    kind: Literal["cta"] = "cta"
    id: Optional[str] = None
    heading: str = ""
    description: str = ""
    button_label: str = ""
    button_url: str = ""


class UnknownBlock(BaseModel):
    """Any entity whose content type is not a recognized block archetype."""

    kind: Literal["unknown"] = "unknown"
    id: Optional[str] = None
    content_type: Optional[str] = None


Block = Union[RichContentBlock, CtaBlock, UnknownBlock]
