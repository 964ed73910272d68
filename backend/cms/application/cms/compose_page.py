# cms/application/cms/compose_page.py
"""
Page composition engine.

A page write replaces the page's section pivots and every attached section's
block pivots from the submitted tree. Orders are rebuilt from array positions
on each write instead of being diffed.
"""
from typing import Any, Dict, Iterable, List, Set

from flask import current_app
from sqlalchemy import select, func

from cms.extensions import db
from cms.models.base import utc_now
from cms.models.page import Page, PageSection
from cms.models.section import Section, BlockSection
from cms.models.block import Block, BlockKind
from cms.domain.exceptions import NotFoundError, ValidationError
from cms.domain.lifecycle.page import apply_publication_status
from cms.utils.slug import make_unique
from .block_resolver import ContentRef, resolve_block
from .section_materializer import materialize_section, write_columns_layout


def apply_page_fields(page: Page, data: Dict[str, Any], *, creating: bool) -> None:
    """
    Upserts the scalar columns of a page.

    The slug is allocated on create and only re-allocated when a different
    slug is submitted on update.
    """
    if creating:
        page.title = str(data["title"])
        page.type = str(data.get("type") or "page")
        page.excerpt = data.get("excerpt")
        page.settings = data.get("settings") or {}
        page.slug = make_unique(Page, data.get("slug"), page.title)
    else:
        for field in ("title", "type"):
            if data.get(field) is not None:
                setattr(page, field, data[field])

        # Present keys are applied as sent, null clears
        if "excerpt" in data:
            page.excerpt = data["excerpt"]
        if "settings" in data:
            page.settings = data["settings"] or {}

        if data.get("slug") and data["slug"] != page.slug:
            page.slug = make_unique(Page, data["slug"], page.title, exclude_id=page.id)

        # Bumped on every write, pivot-only edits included
        page.updated_at = utc_now()

    if "parent_id" in data or creating:
        page.parent_id = _resolve_parent_id(page, data.get("parent_id"))

    apply_publication_status(page, str(data.get("status") or page.status or "draft"))


def _resolve_parent_id(page: Page, parent_id):
    if parent_id in (None, ""):
        return None

    try:
        parent_id = int(parent_id)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid parent_id '{parent_id}'")

    if page.id is not None and parent_id == page.id:
        raise ValidationError("A page cannot be its own parent")

    parent = db.session.get(Page, parent_id)
    if parent is None or parent.is_deleted:
        raise NotFoundError(f"Parent page {parent_id} not found")

    return parent.id


def replace_sections_for_page(
    page: Page,
    sections_payload: Iterable[Dict[str, Any]],
    *,
    prune_orphans: bool = False,
) -> Set[int]:
    """
    Rebuilds the page <-> section pivots in submitted order.

    Returns the ids of every section touched by this write (attached now or
    attached before), so the caller can invalidate the pages sharing them.
    """
    previous_ids = [link.section_id for link in page.section_links]

    # Flush the removals before inserting: (page_id, order) is unique
    page.section_links.clear()
    db.session.flush()

    attached_ids: List[int] = []
    detached_block_ids: Set[int] = set()
    for position, section_payload in enumerate(sections_payload or [], start=1):
        section = materialize_section(section_payload)

        link = PageSection()
        link.section = section
        link.order = position
        page.section_links.append(link)

        detached_block_ids |= sync_section_blocks(section, section_payload.get("layout") or {})
        attached_ids.append(section.id)

    db.session.flush()

    if prune_orphans:
        pruned = prune_orphan_sections(set(previous_ids) - set(attached_ids))
        for section_id in pruned:
            detached_block_ids |= block_ids_in_section(section_id)
        prune_orphan_blocks(detached_block_ids)

    return set(previous_ids) | set(attached_ids)


def sync_section_blocks(section: Section, layout: Dict[str, Any]) -> Set[int]:
    """
    Re-attaches a section's blocks column by column.

    ``order`` is one counter across all columns of the section (reading
    order), ``column_index`` is the declared column (visual placement).
    Returns the ids of the blocks the section no longer holds.
    """
    previous_block_ids = {link.block_id for link in section.block_links}

    section.block_links.clear()
    db.session.flush()

    columns_layout_block_ids: Dict[int, list] = {}
    overall_order = 0

    for position, column in enumerate(layout.get("columns") or []):
        column = column or {}
        column_index = column.get("index", position)
        try:
            column_index = int(column_index)
        except (TypeError, ValueError):
            column_index = position

        column_ids = columns_layout_block_ids.setdefault(column_index, [])

        for block_payload in column.get("blocks") or []:
            block = resolve_block(ContentRef.from_payload(block_payload or {}))

            overall_order += 1
            link = BlockSection()
            link.block = block
            link.order = overall_order
            link.column_index = column_index
            section.block_links.append(link)

            column_ids.append(block.id)

    write_columns_layout(section, columns_layout_block_ids)
    db.session.flush()

    kept = {block_id for ids in columns_layout_block_ids.values() for block_id in ids}
    return previous_block_ids - kept


def attachment_count(section_id: int) -> int:
    """Live pages using the section; soft-deleted pages do not hold it."""
    return db.session.execute(
        select(func.count(PageSection.id))
        .join(Page, Page.id == PageSection.page_id)
        .where(PageSection.section_id == section_id, Page.deleted_at.is_(None))
    ).scalar_one()


def prune_orphan_sections(candidate_ids: Iterable[int]) -> List[int]:
    """
    Soft-deletes sections that no page uses anymore.

    Each candidate is locked and its attachments re-counted right before the
    delete; a section attached to any other page survives.
    """
    pruned: List[int] = []

    for section_id in sorted(candidate_ids):
        section = db.session.execute(
            select(Section)
            .where(Section.id == section_id, Section.deleted_at.is_(None))
            .with_for_update()
        ).scalar_one_or_none()

        if section is None:
            continue

        if attachment_count(section_id) == 0:
            section.soft_delete()
            pruned.append(section_id)

    if pruned:
        current_app.logger.info("Pruned orphan sections: %s", pruned)

    return pruned


def slugs_sharing_sections(section_ids: Iterable[int]) -> Set[str]:
    """Slugs of the live pages that render any of the given sections."""
    section_ids = list(section_ids)
    if not section_ids:
        return set()

    rows = db.session.execute(
        select(Page.slug)
        .join(PageSection, PageSection.page_id == Page.id)
        .where(PageSection.section_id.in_(section_ids), Page.deleted_at.is_(None))
    ).scalars()
    return set(rows)


def slugs_rendering_content(kind: str, target_id: int) -> Set[str]:
    """Slugs of the live pages showing a block that wraps the given content."""
    section_ids = db.session.execute(
        select(BlockSection.section_id)
        .join(Block, Block.id == BlockSection.block_id)
        .where(Block.kind == kind, Block.target_id == target_id)
    ).scalars()
    return slugs_sharing_sections(set(section_ids))


def block_ids_in_section(section_id: int) -> Set[int]:
    return set(db.session.execute(
        select(BlockSection.block_id).where(BlockSection.section_id == section_id)
    ).scalars())


def block_attachment_count(block_id: int) -> int:
    """Live sections holding the block; pruned sections do not."""
    return db.session.execute(
        select(func.count(BlockSection.id))
        .join(Section, Section.id == BlockSection.section_id)
        .where(BlockSection.block_id == block_id, Section.deleted_at.is_(None))
    ).scalar_one()


def prune_orphan_blocks(candidate_ids: Iterable[int]) -> List[int]:
    """
    Soft-deletes inline html wrappers (fallbacks included) that no live
    section holds anymore.

    Post and media wrappers are the canonical handle of their content and are
    never pruned. Candidates are locked and re-counted like sections.
    """
    pruned: List[int] = []

    for block_id in sorted(candidate_ids):
        block = db.session.execute(
            select(Block)
            .where(
                Block.id == block_id,
                Block.kind == BlockKind.HTML.value,
                Block.deleted_at.is_(None),
            )
            .with_for_update()
        ).scalar_one_or_none()

        if block is None:
            continue

        if block_attachment_count(block_id) == 0:
            block.soft_delete()
            pruned.append(block_id)

    if pruned:
        current_app.logger.info("Pruned orphan blocks: %s", pruned)

    return pruned
