from typing import Any, Dict, Optional
from flask import current_app
from cms.extensions import db
from cms.models.page import Page
from cms.models.user import User
from cms.domain.invariants.page import assert_page
from cms.utils.audit import log_action
from cms.utils.cache import invalidate_pages
from cms.utils.transaction import transactional
from .compose_page import (
    apply_page_fields,
    replace_sections_for_page,
    slugs_sharing_sections,
)


def create_page(
    *,
    data: Dict[str, Any],
    author: Optional[User] = None,
) -> Page:
    """
    Create a page and compose its sections and blocks.

    Responsibilities:
    - Single transaction for the page row and every pivot row
    - Unique slug allocation
    - Composition invariants
    - Audit logging
    - Rendered-page cache invalidation after commit
    """
    page = Page()
    page.author_id = author.id if author is not None else None

    with transactional():
        apply_page_fields(page, data, creating=True)
        db.session.add(page)
        db.session.flush()  # ensures page.id is available

        touched_sections = replace_sections_for_page(page, data.get("sections") or [])

        # Reused sections may have been edited through this page
        affected_slugs = slugs_sharing_sections(touched_sections)

        # 🔒 Composition invariants
        assert_page(page)

        log_action(
            action="page.create",
            entity_type="page",
            entity_id=page.id,
            actor_id=page.author_id,
            payload={
                "title": page.title,
                "slug": page.slug,
                "status": page.status,
                "sections": len(page.section_links),
            },
        )

    invalidate_pages({page.slug} | affected_slugs)
    current_app.logger.info("Created page %s (%s)", page.id, page.slug)

    return page
