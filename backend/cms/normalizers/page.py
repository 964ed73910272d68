from .section import normalize_section, render_section


def _live_section_links(page):
    return [link for link in page.section_links if not link.section.is_deleted]


def normalize_page_for_editor(page):
    """Editable tree of a page: the inverse of composition."""
    return {
        "id": page.id,
        "title": page.title,
        "slug": page.slug,
        "type": page.type,
        "status": page.status,
        "parent_id": page.parent_id,
        "excerpt": page.excerpt,
        "is_published": page.is_published,
        "published_at": page.published_at.isoformat() if page.published_at else None,
        "updated_at": page.updated_at.isoformat() if page.updated_at else None,
        "sections": [
            normalize_section(link) for link in _live_section_links(page)
        ],
    }


def render_page(page):
    settings = page.settings or {}
    seo = settings.get("seo") or {}

    return {
        "page": {
            "id": page.id,
            "title": page.title,
            "slug": page.slug,
            "excerpt": page.excerpt or "",
            "published_at": page.published_at.isoformat() if page.published_at else None,
            "seo": {
                "title": seo.get("title") or page.title,
                "description": seo.get("description") or page.excerpt,
                "image": seo.get("image"),
            },
            "layout": settings.get("layout", "default"),
        },
        "sections": [
            render_section(link) for link in _live_section_links(page)
        ],
    }
