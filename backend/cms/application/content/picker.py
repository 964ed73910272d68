from typing import Dict, List, Optional
from cms.models.page import Page
from cms.models.post import Post
from cms.domain.exceptions import ValidationError

PICKER_KINDS = ("page", "post")


def list_linkable_content(kind: Optional[str] = None) -> List[Dict]:
    """Live pages then live posts, as menu and block pickers list them."""
    if kind is not None and kind not in PICKER_KINDS:
        raise ValidationError(f"type must be one of {', '.join(PICKER_KINDS)}")

    entries = []

    if kind in (None, "page"):
        for page in Page.live().order_by(Page.title, Page.id).all():
            entries.append({"id": page.id, "title": page.title, "type": "page"})

    if kind in (None, "post"):
        for post in Post.live().order_by(Post.title, Post.id).all():
            entries.append({"id": post.id, "title": post.title, "type": "post"})

    return entries
