"""
Dispatch table from block kind to the content it wraps.

Blocks carry an explicit ``kind`` + ``target_id`` pair; loading the target is
a table lookup, never class reflection.
"""
from typing import Callable, Dict, Optional

from cms.extensions import db
from cms.domain.exceptions import NotFoundError
from cms.models.block import Block, BlockKind
from cms.models.html_content import HtmlContent
from cms.models.media import Media
from cms.models.post import Post


def _live(model):
    def loader(target_id: int):
        row = db.session.get(model, target_id)
        if row is None or row.is_deleted:
            return None
        return row
    return loader


def _html(target_id: int):
    return db.session.get(HtmlContent, target_id)


TARGET_LOADERS: Dict[BlockKind, Callable[[int], Optional[object]]] = {
    BlockKind.POST: _live(Post),
    BlockKind.MEDIA: _live(Media),
    BlockKind.HTML: _html,
}


def load_target(block: Block):
    """Returns the wrapped content row, or None when it is gone."""
    try:
        kind = BlockKind(block.kind)
    except ValueError:
        return None
    return TARGET_LOADERS[kind](block.target_id)


def find_post(post_id: int) -> Post:
    post = TARGET_LOADERS[BlockKind.POST](post_id)
    if post is None:
        raise NotFoundError(f"Post {post_id} not found")
    return post


def find_media(media_id: int) -> Media:
    media = TARGET_LOADERS[BlockKind.MEDIA](media_id)
    if media is None:
        raise NotFoundError(f"Media {media_id} not found")
    return media


CONTENT_FINDERS = {
    BlockKind.POST: find_post,
    BlockKind.MEDIA: find_media,
}
