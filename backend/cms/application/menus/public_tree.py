from typing import Any, Dict
from flask import current_app
from cms.extensions import cache
from cms.models.menu import Menu, MenuItem
from cms.domain.exceptions import NotFoundError
from cms.normalizers.menu import normalize_menu
from cms.utils.cache import menu_tree_key


def get_menu_tree(menu: Menu, *, visible_only: bool = False) -> Dict[str, Any]:
    items = MenuItem.query.filter_by(menu_id=menu.id).all()
    return normalize_menu(menu, items, visible_only=visible_only)


def get_public_tree(slug: str) -> Dict[str, Any]:
    """Visible items of a menu, nested, cached until the next sync."""
    key = menu_tree_key(slug)

    tree = cache.get(key)
    if tree is not None:
        return tree

    menu = Menu.query.filter_by(slug=slug).first()
    if menu is None:
        raise NotFoundError(f"Menu '{slug}' not found")

    tree = get_menu_tree(menu, visible_only=True)
    cache.set(key, tree, timeout=current_app.config.get("MENU_TREE_TTL", 3600))

    return tree


def menu_slugs_linking(linkable_type: str, linkable_id: int) -> set:
    """Slugs of the menus holding an item linked to the given page or post."""
    rows = (
        Menu.query
        .join(MenuItem, MenuItem.menu_id == Menu.id)
        .filter(MenuItem.linkable_type == linkable_type, MenuItem.linkable_id == linkable_id)
        .with_entities(Menu.slug)
        .distinct()
        .all()
    )
    return {row.slug for row in rows}
