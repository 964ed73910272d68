# cms/application/content/publication.py
"""
Status toggles shared by pages and posts: publish, unpublish, archive and
restore. Each runs in its own transaction and clears the caches that render
the entity afterwards.
"""
from typing import Optional, Union

from flask import current_app

from cms.extensions import db
from cms.models.page import Page
from cms.models.post import Post
from cms.domain.exceptions import NotFoundError
from cms.domain.lifecycle.page import PUBLISHED, apply_publication_status
from cms.utils.audit import log_action
from cms.utils.cache import invalidate_menus, invalidate_pages
from cms.utils.transaction import transactional
from cms.application.cms.compose_page import slugs_rendering_content
from cms.application.menus.public_tree import menu_slugs_linking

CONTENT_MODELS = {
    "page": Page,
    "post": Post,
}

DRAFT = "draft"


def find_content(kind: str, content_id: int, *, include_archived: bool = False) -> Union[Page, Post]:
    model = CONTENT_MODELS.get(kind)
    if model is None:
        raise NotFoundError(f"Unknown content type '{kind}'")

    entity = db.session.get(model, content_id)
    if entity is None or (entity.is_deleted and not include_archived):
        raise NotFoundError(f"{kind.capitalize()} {content_id} not found")
    return entity


def _invalidate(kind: str, entity, *, menus: bool = False) -> None:
    if kind == "page":
        invalidate_pages([entity.slug])
    else:
        invalidate_pages(slugs_rendering_content("post", entity.id))

    # Menu hrefs only depend on whether the linked row is live
    if menus:
        invalidate_menus(menu_slugs_linking(kind, entity.id))


def _change(kind, content_id, *, action, apply, actor_id=None, include_archived=False, menus=False):
    entity = find_content(kind, content_id, include_archived=include_archived)

    with transactional():
        apply(entity)

        log_action(
            action=f"{kind}.{action}",
            entity_type=kind,
            entity_id=entity.id,
            actor_id=actor_id,
            payload={"slug": entity.slug, "status": entity.status},
        )

    _invalidate(kind, entity, menus=menus)
    current_app.logger.info("%s %s: %s", action.capitalize(), kind, entity.id)

    return entity


def publish_content(*, kind: str, content_id: int, actor_id: Optional[int] = None):
    """Publishes a page or post; the first publication date is kept."""
    return _change(
        kind, content_id,
        action="publish",
        apply=lambda entity: apply_publication_status(entity, PUBLISHED),
        actor_id=actor_id,
    )


def unpublish_content(*, kind: str, content_id: int, actor_id: Optional[int] = None):
    """Back to draft; is_published and published_at are cleared."""
    return _change(
        kind, content_id,
        action="unpublish",
        apply=lambda entity: apply_publication_status(entity, DRAFT),
        actor_id=actor_id,
    )


def _archive(entity) -> None:
    entity.soft_delete()
    entity.is_published = False


def archive_content(*, kind: str, content_id: int, actor_id: Optional[int] = None):
    """
    Soft-deletes a page or post.

    Pivot rows are kept, so a restored page comes back with its sections and
    blocks pointing at an archived post render as placeholders meanwhile.
    """
    return _change(
        kind, content_id,
        action="archive",
        apply=_archive,
        actor_id=actor_id,
        menus=True,
    )


def _restore(entity) -> None:
    entity.deleted_at = None
    apply_publication_status(entity, DRAFT)


def restore_content(*, kind: str, content_id: int, actor_id: Optional[int] = None):
    """Brings an archived page or post back as an unpublished draft."""
    return _change(
        kind, content_id,
        action="restore",
        apply=_restore,
        actor_id=actor_id,
        include_archived=True,
        menus=True,
    )
