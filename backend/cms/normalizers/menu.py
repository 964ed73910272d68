from cms.extensions import db
from cms.models.page import Page
from cms.models.post import Post

LINKABLE_MODELS = {
    "page": Page,
    "post": Post,
}

LINKABLE_HREFS = {
    "page": "/{slug}",
    "post": "/posts/{slug}",
}


def resolve_linkable(item):
    model = LINKABLE_MODELS.get(item.linkable_type)
    if model is None or item.linkable_id is None:
        return None

    target = db.session.get(model, item.linkable_id)
    if target is None or target.is_deleted:
        return None
    return target


def item_href(item):
    """Linked page/post wins over the stored url."""
    target = resolve_linkable(item)
    if target is not None:
        return LINKABLE_HREFS[item.linkable_type].format(slug=target.slug)
    return item.url


def normalize_menu_item(item, children_by_parent, visible_only=False):
    children = [
        child for child in children_by_parent.get(item.id, [])
        if child.is_visible or not visible_only
    ]
    target = resolve_linkable(item)

    return {
        "id": item.id,
        "label": item.label,
        "url": item.url,
        "href": item_href(item),
        "slug": target.slug if target is not None else None,
        "is_visible": item.is_visible,
        "position": item.position,
        "linkable_type": item.linkable_type,
        "linkable_id": item.linkable_id,
        "meta": item.meta or {},
        "children": [
            normalize_menu_item(child, children_by_parent, visible_only=visible_only)
            for child in children
        ],
    }


def normalize_menu(menu, items, visible_only=False):
    """Nested tree of a menu from its flat item rows."""
    children_by_parent = {}
    for item in sorted(items, key=lambda i: (i.position, i.id)):
        children_by_parent.setdefault(item.parent_id, []).append(item)

    roots = [
        item for item in children_by_parent.get(None, [])
        if item.is_visible or not visible_only
    ]

    return {
        "id": menu.id,
        "name": menu.name,
        "slug": menu.slug,
        "tree": [
            normalize_menu_item(item, children_by_parent, visible_only=visible_only)
            for item in roots
        ],
    }
