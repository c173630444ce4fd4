from typing import List, Optional

from pydantic import BaseModel


class SeoMetadata(BaseModel):
    """Projected view of a resolved SEO component entry.

    Every field is optional; an absent SEO entry yields an empty instance.
    """

    title: Optional[str] = None
    description: Optional[str] = None
    canonical_url: Optional[str] = None
    noindex: Optional[bool] = None
    nofollow: Optional[bool] = None
    share_images: List[str] = []


class AuthorProfile(BaseModel):
    name: str
    avatar_url: str = ""
    bio: str = ""
    role_company: str = ""


class FaqPair(BaseModel):
    question: str
    answer: str
