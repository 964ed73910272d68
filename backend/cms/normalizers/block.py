from cms.models.block import BlockKind
from cms.domain.block_targets import load_target

UNTITLED = "Untitled"
UNTITLED_BLOCK = "Untitled block"


def content_type_for(block):
    """Editor content type: post and media keep their kind, anything else is a plain block."""
    if block.kind in (BlockKind.POST.value, BlockKind.MEDIA.value):
        return block.kind
    return "block"


def block_title(block, target):
    if content_type_for(block) == "block":
        return (block.settings or {}).get("title") or UNTITLED_BLOCK

    if target is None:
        return UNTITLED
    for attr in ("title", "name", "original_name", "filename", "label"):
        value = getattr(target, attr, None)
        if value:
            return str(value)
    return UNTITLED


def normalize_block(link):
    """Editor entry for one block pivot row of a section."""
    block = link.block
    content_type = content_type_for(block)

    # post/media expose the content id, other blocks their own wrapper id
    content_id = block.target_id if content_type != "block" else block.id

    return {
        "id": block.id,
        "contentId": content_id,
        "contentType": content_type,
        "title": block_title(block, load_target(block)),
        "order": link.order,
    }


def render_block(link):
    """Public payload for one block; missing content becomes a placeholder."""
    block = link.block
    target = None if block.is_deleted else load_target(block)

    if target is None or (block.settings or {}).get("fallback"):
        return {
            "id": block.id,
            "type": "placeholder",
            "order": link.order,
            "data": {},
        }

    return {
        "id": block.id,
        "type": block.kind,
        "template_hint": block.template_hint,
        "order": link.order,
        "settings": block.settings or {},
        "data": _render_target(block.kind, target),
    }


def _render_target(kind, target):
    if kind == BlockKind.POST.value:
        return {
            "title": target.title,
            "slug": target.slug,
            "excerpt": target.excerpt or "",
            "image_position": target.image_position,
            "cover_url": target.cover_media.url if target.cover_media else None,
            "href": f"/posts/{target.slug}",
        }

    if kind == BlockKind.MEDIA.value:
        meta = target.meta or {}
        return {
            "url": target.url,
            "alt": meta.get("alt") or target.title,
            "caption": meta.get("caption"),
            "mime_type": target.mime_type,
        }

    return {"html": target.content}
