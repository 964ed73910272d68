from typing import Any, Dict, Optional, Union
from flask import current_app
from cms.extensions import db
from cms.models.page import Page
from cms.domain.exceptions import NotFoundError
from cms.domain.invariants.page import assert_page
from cms.utils.audit import log_action
from cms.utils.cache import invalidate_menus, invalidate_pages
from cms.application.menus.public_tree import menu_slugs_linking
from cms.utils.transaction import transactional
from .compose_page import (
    apply_page_fields,
    replace_sections_for_page,
    slugs_sharing_sections,
)


def update_page(
    *,
    page: Union[Page, int],
    data: Dict[str, Any],
    prune_orphans: bool = False,
    actor_id: Optional[int] = None,
) -> Page:
    """
    Update a page and fully resync its sections and blocks.

    Design rules:
    - Replace strategy: every pivot row is rebuilt from the payload
    - Sections submitted with their id are updated in place
    - With prune_orphans, sections left without any page are soft-deleted,
      along with the inline html blocks nothing holds anymore
    - All or nothing: any failure rolls the whole write back
    """
    if not isinstance(page, Page):
        page_id = page
        page = db.session.get(Page, page_id)
        if page is None or page.is_deleted:
            raise NotFoundError(f"Page {page_id} not found")

    previous_slug = page.slug

    with transactional():
        apply_page_fields(page, data, creating=False)

        touched_sections = replace_sections_for_page(
            page,
            data.get("sections") or [],
            prune_orphans=prune_orphans,
        )

        # Other pages sharing a touched section render differently now
        affected_slugs = slugs_sharing_sections(touched_sections)

        # 🔒 Composition invariants
        assert_page(page)

        log_action(
            action="page.update",
            entity_type="page",
            entity_id=page.id,
            actor_id=actor_id,
            payload={
                "slug": page.slug,
                "status": page.status,
                "sections": len(page.section_links),
                "prune_orphans": prune_orphans,
            },
        )

    invalidate_pages({previous_slug, page.slug} | affected_slugs)
    if page.slug != previous_slug:
        invalidate_menus(menu_slugs_linking("page", page.id))
    current_app.logger.info("Updated page %s (%s)", page.id, page.slug)

    return page
