from typing import Any, Dict, List, Optional
from cms.extensions import db
from cms.models.post import Post, Tag
from cms.models.media import Media
from cms.models.user import User
from cms.domain.exceptions import NotFoundError, ValidationError
from cms.domain.lifecycle.page import apply_publication_status
from cms.utils.audit import log_action
from cms.utils.cache import invalidate_menus, invalidate_pages
from cms.utils.slug import make_unique, slugify
from cms.utils.transaction import transactional
from cms.application.cms.compose_page import slugs_rendering_content
from cms.application.menus.public_tree import menu_slugs_linking

ALLOWED_POST_FIELDS = ("title", "excerpt", "content", "type", "image_position", "meta")
IMAGE_POSITIONS = ("left", "right")


def sync_tags(post: Post, names: List[str]) -> None:
    """Replaces the post's tags, creating missing ones by name."""
    tags = []
    for name in names or []:
        name = (name or "").strip()
        if not name:
            continue

        tag = Tag.query.filter_by(name=name).first()
        if tag is None:
            tag = Tag()
            tag.name = name
            tag.slug = make_unique(Tag, slugify(name), name)
            db.session.add(tag)
            db.session.flush()

        if tag not in tags:
            tags.append(tag)

    post.tags = tags


def _apply_post_fields(post: Post, data: Dict[str, Any]) -> None:
    for field in ALLOWED_POST_FIELDS:
        if field in data and data[field] is not None:
            setattr(post, field, data[field])

    if post.image_position is None:
        post.image_position = IMAGE_POSITIONS[0]

    if post.image_position not in IMAGE_POSITIONS:
        raise ValidationError(f"image_position must be one of {', '.join(IMAGE_POSITIONS)}")

    if "cover_media_id" in data:
        cover_id = data["cover_media_id"]
        if cover_id is not None:
            media = db.session.get(Media, cover_id)
            if media is None or media.is_deleted:
                raise NotFoundError(f"Media {cover_id} not found")
        post.cover_media_id = cover_id


def create_post(
    *,
    data: Dict[str, Any],
    author: Optional[User] = None,
) -> Post:
    """
    Create a post with a unique slug and its tags.
    """
    if not data.get("title"):
        raise ValidationError("Post title is required")

    post = Post()
    post.author_id = author.id if author is not None else None
    post.title = data["title"]
    post.content = data.get("content") or ""

    with transactional():
        _apply_post_fields(post, data)
        post.slug = make_unique(Post, data.get("slug"), post.title)
        apply_publication_status(post, data.get("status") or "draft")

        db.session.add(post)
        db.session.flush()

        sync_tags(post, data.get("tags") or [])

        log_action(
            action="post.create",
            entity_type="post",
            entity_id=post.id,
            actor_id=post.author_id,
            payload={"slug": post.slug, "status": post.status},
        )

    return post


def update_post(
    *,
    post_id: int,
    data: Dict[str, Any],
    actor_id: Optional[int] = None,
) -> Post:
    """
    Update a post; pages and menus showing it leave the cache.
    """
    post = db.session.get(Post, post_id)
    if post is None or post.is_deleted:
        raise NotFoundError(f"Post {post_id} not found")

    previous_slug = post.slug

    with transactional():
        _apply_post_fields(post, data)

        if data.get("slug") and data["slug"] != post.slug:
            post.slug = make_unique(Post, data["slug"], post.title, exclude_id=post.id)

        apply_publication_status(post, data.get("status") or post.status)

        if "tags" in data:
            sync_tags(post, data["tags"] or [])

        affected_pages = slugs_rendering_content("post", post.id)

        log_action(
            action="post.update",
            entity_type="post",
            entity_id=post.id,
            actor_id=actor_id,
            payload={"slug": post.slug, "status": post.status},
        )

    invalidate_pages(affected_pages)
    if post.slug != previous_slug:
        invalidate_menus(menu_slugs_linking("post", post.id))

    return post
