# cms/application/cms/block_resolver.py
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from flask import current_app
from sqlalchemy.exc import IntegrityError

from cms.extensions import db
from cms.models.block import Block, BlockKind
from cms.models.html_content import HtmlContent
from cms.domain.block_targets import CONTENT_FINDERS
from cms.domain.exceptions import ConflictError, NotFoundError
from cms.utils.transaction import savepoint

FALLBACK_TITLE = "Untitled block"


@dataclass
class ContentRef:
    """
    What an editor block entry points at.

    Either an existing wrapper (``existing_block_id``) or a source content
    item (``source_type`` + ``source_id`` / ``inline_content``).
    """

    existing_block_id: Optional[int] = None
    source_type: Optional[str] = None
    source_id: Optional[int] = None
    inline_content: Optional[str] = None
    title: Optional[str] = None
    settings: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "ContentRef":
        content_type = str(payload.get("contentType") or "").strip().lower()
        content_id = payload.get("contentId")
        try:
            content_id = int(content_id) if content_id is not None else None
        except (TypeError, ValueError):
            content_id = None

        ref = cls(title=payload.get("title"), settings=dict(payload.get("settings") or {}))

        if content_type == "block":
            ref.existing_block_id = content_id
        elif content_type == BlockKind.HTML.value:
            ref.source_type = content_type
            ref.inline_content = payload.get("content") or ""
        else:
            ref.source_type = content_type or None
            ref.source_id = content_id

        return ref


def resolve_block(ref: ContentRef) -> Block:
    """
    Find-or-create the canonical Block wrapper for a content reference.

    - existing wrapper id: reused as is, supplied settings merged in
    - post / media: one wrapper per content item, reused across pages
    - html: fresh content row and fresh wrapper, nothing to deduplicate on
    - unknown type: neutral wrapper over empty inline content
    """
    if ref.existing_block_id is not None:
        return _reuse_block(ref)

    if ref.source_type in (BlockKind.POST.value, BlockKind.MEDIA.value):
        kind = BlockKind(ref.source_type)
        if ref.source_id is None:
            raise NotFoundError(f"A {kind.value} block needs a content id")
        CONTENT_FINDERS[kind](ref.source_id)
        return _first_or_create_wrapper(kind, ref.source_id)

    if ref.source_type == BlockKind.HTML.value:
        settings = dict(ref.settings)
        if ref.title:
            settings["title"] = ref.title
        return _create_inline_block(ref.inline_content or "", settings)

    current_app.logger.warning(
        "Unknown block content type %r (id=%r), using a fallback block",
        ref.source_type, ref.source_id,
    )
    return _create_inline_block("", {
        "title": ref.title or FALLBACK_TITLE,
        "fallback": True,
        "source": {"type": ref.source_type, "id": ref.source_id},
    })


def _reuse_block(ref: ContentRef) -> Block:
    block = db.session.get(Block, ref.existing_block_id)
    if block is None or block.is_deleted:
        raise NotFoundError(f"Block {ref.existing_block_id} not found")

    if ref.settings:
        merged = dict(block.settings or {})
        merged.update(ref.settings)
        if merged != (block.settings or {}):
            block.settings = merged

    return block


def _find_wrapper(kind: BlockKind, target_id: int) -> Optional[Block]:
    return Block.query.filter_by(kind=kind.value, target_id=target_id).first()


def _first_or_create_wrapper(kind: BlockKind, target_id: int) -> Block:
    existing = _find_wrapper(kind, target_id)
    if existing is not None:
        if existing.is_deleted:
            # The content is live again, so is its wrapper
            existing.deleted_at = None
        return existing

    block = Block()
    block.kind = kind.value
    block.target_id = target_id
    block.template_hint = None
    block.settings = {}

    # A concurrent composition may insert the same wrapper first; the unique
    # constraint on (kind, target_id) decides and the loser re-selects.
    try:
        with savepoint():
            db.session.add(block)
            db.session.flush()
    except IntegrityError:
        current_app.logger.warning(
            "Block wrapper for %s %s created concurrently, reusing it",
            kind.value, target_id,
        )
        winner = _find_wrapper(kind, target_id)
        if winner is None:
            raise ConflictError(
                f"Could not create or find a block for {kind.value} {target_id}"
            )
        return winner

    return block


def _create_inline_block(content: str, settings: Dict[str, Any]) -> Block:
    html = HtmlContent()
    html.content = content
    db.session.add(html)
    db.session.flush()

    block = Block()
    block.kind = BlockKind.HTML.value
    block.target_id = html.id
    block.settings = settings

    db.session.add(block)
    db.session.flush()

    return block
