from typing import Any, Dict, Optional
from flask import current_app
from cms.extensions import cache
from cms.models.page import Page
from cms.normalizers.page import render_page
from cms.utils.cache import rendered_page_key


def get_rendered_by_slug(slug: str) -> Optional[Dict[str, Any]]:
    """
    Public payload of a published page, cached per slug.

    Writers invalidate the entry after every commit that changes what the
    page renders, so a hit is never stale.
    """
    key = rendered_page_key(slug)

    payload = cache.get(key)
    if payload is not None:
        return payload

    page = (
        Page.live()
        .filter(Page.slug == slug, Page.is_published.is_(True))
        .first()
    )
    if page is None:
        return None

    payload = render_page(page)
    cache.set(key, payload, timeout=current_app.config.get("RENDERED_PAGE_TTL", 1800))

    return payload
