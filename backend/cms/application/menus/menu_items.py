# cms/application/menus/menu_items.py
"""
Single-item edits and menu deletion, for clients that do not resubmit the
whole tree.
"""
from typing import Any, Dict, List, Optional

from flask import current_app
from sqlalchemy import func

from cms.extensions import db
from cms.models.menu import Menu, MenuItem
from cms.domain.exceptions import NotFoundError, ValidationError
from cms.utils.audit import log_action
from cms.utils.cache import invalidate_menus
from cms.utils.transaction import transactional

ITEM_FIELDS = ("label", "url", "is_visible", "meta", "linkable_type", "linkable_id")


def get_menu_or_404(menu_id: int) -> Menu:
    menu = db.session.get(Menu, menu_id)
    if menu is None:
        raise NotFoundError(f"Menu {menu_id} not found")
    return menu


def get_item_or_404(menu: Menu, item_id: int) -> MenuItem:
    item = MenuItem.query.filter_by(id=item_id, menu_id=menu.id).first()
    if item is None:
        raise NotFoundError(f"Menu item {item_id} not found in menu {menu.slug}")
    return item


def _check_parent(menu: Menu, parent_id: Optional[int], item: Optional[MenuItem] = None) -> None:
    if parent_id is None:
        return

    parent = get_item_or_404(menu, parent_id)

    if item is None:
        return

    # Walk up from the new parent; meeting the item means a cycle
    node = parent
    while node is not None:
        if node.id == item.id:
            raise ValidationError("A menu item cannot be moved under itself or its children")
        node = db.session.get(MenuItem, node.parent_id) if node.parent_id else None


def _check_label(menu: Menu, parent_id, label: str, exclude_id: Optional[int] = None) -> None:
    query = MenuItem.query.filter(
        MenuItem.menu_id == menu.id,
        MenuItem.label == label,
    )
    if parent_id is None:
        query = query.filter(MenuItem.parent_id.is_(None))
    else:
        query = query.filter(MenuItem.parent_id == parent_id)
    if exclude_id is not None:
        query = query.filter(MenuItem.id != exclude_id)

    if query.first() is not None:
        raise ValidationError(f"Duplicate label '{label}' among siblings")


def _next_position(menu: Menu, parent_id) -> int:
    query = db.session.query(func.max(MenuItem.position)).filter(MenuItem.menu_id == menu.id)
    if parent_id is None:
        query = query.filter(MenuItem.parent_id.is_(None))
    else:
        query = query.filter(MenuItem.parent_id == parent_id)

    highest = query.scalar()
    return 0 if highest is None else highest + 1


def add_menu_item(*, menu_id: int, data: Dict[str, Any], actor_id: Optional[int] = None) -> MenuItem:
    """Appends an item under ``parent_id`` unless a position is given."""
    menu = get_menu_or_404(menu_id)
    parent_id = data.get("parent_id")

    _check_parent(menu, parent_id)
    _check_label(menu, parent_id, data["label"])

    item = MenuItem()
    item.menu_id = menu.id
    item.parent_id = parent_id
    item.label = data["label"]
    item.url = data.get("url")
    item.is_visible = True if data.get("is_visible") is None else bool(data["is_visible"])
    item.meta = data.get("meta") or {}
    item.linkable_type = data.get("linkable_type")
    item.linkable_id = data.get("linkable_id")

    with transactional():
        item.position = (
            data["position"] if data.get("position") is not None
            else _next_position(menu, parent_id)
        )
        db.session.add(item)
        db.session.flush()

        log_action(
            action="menu.item.create",
            entity_type="menu_item",
            entity_id=item.id,
            actor_id=actor_id,
            payload={"menu": menu.slug, "label": item.label},
        )

    invalidate_menus([menu.slug])
    return item


def update_menu_item(
    *,
    menu_id: int,
    item_id: int,
    data: Dict[str, Any],
    actor_id: Optional[int] = None,
) -> MenuItem:
    """Partial update; only keys present in ``data`` change."""
    menu = get_menu_or_404(menu_id)
    item = get_item_or_404(menu, item_id)

    parent_id = data["parent_id"] if "parent_id" in data else item.parent_id
    label = data.get("label") or item.label

    _check_parent(menu, parent_id, item)
    _check_label(menu, parent_id, label, exclude_id=item.id)

    with transactional():
        for field in ITEM_FIELDS:
            if field in data:
                setattr(item, field, data[field])

        if item.is_visible is None:
            item.is_visible = True
        if item.meta is None:
            item.meta = {}

        item.label = label
        item.parent_id = parent_id
        if data.get("position") is not None:
            item.position = data["position"]

        log_action(
            action="menu.item.update",
            entity_type="menu_item",
            entity_id=item.id,
            actor_id=actor_id,
            payload={"menu": menu.slug, "fields": sorted(data)},
        )

    invalidate_menus([menu.slug])
    return item


def descendant_ids(item: MenuItem) -> List[int]:
    ids = [item.id]
    frontier = [item.id]

    while frontier:
        children = [
            row.id for row in
            MenuItem.query.filter(MenuItem.parent_id.in_(frontier)).with_entities(MenuItem.id)
        ]
        ids.extend(children)
        frontier = children

    return ids


def delete_menu_item(*, menu_id: int, item_id: int, actor_id: Optional[int] = None) -> int:
    """Deletes an item together with its children. Returns the row count."""
    menu = get_menu_or_404(menu_id)
    item = get_item_or_404(menu, item_id)

    ids = descendant_ids(item)

    with transactional():
        deleted = (
            MenuItem.query
            .filter(MenuItem.id.in_(ids))
            .delete(synchronize_session="fetch")
        )
        db.session.expire(menu, ["items"])

        log_action(
            action="menu.item.delete",
            entity_type="menu_item",
            entity_id=item_id,
            actor_id=actor_id,
            payload={"menu": menu.slug, "deleted": deleted},
        )

    invalidate_menus([menu.slug])
    return deleted


def delete_menu(*, menu_id: int, actor_id: Optional[int] = None) -> None:
    menu = get_menu_or_404(menu_id)
    slug = menu.slug

    with transactional():
        MenuItem.query.filter(MenuItem.menu_id == menu.id).delete(synchronize_session="fetch")
        db.session.expire(menu, ["items"])
        db.session.delete(menu)

        log_action(
            action="menu.delete",
            entity_type="menu",
            entity_id=menu_id,
            actor_id=actor_id,
            payload={"slug": slug},
        )

    invalidate_menus([slug])
    current_app.logger.info("Deleted menu %s", slug)
