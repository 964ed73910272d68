# cms/application/menus/sync_menu.py
"""
Menu tree synchronization.

The submitted tree is upserted into the adjacency-list table; ids present in
the tree keep their rows, positions are re-derived from array order on every
sync and every other item of the menu is deleted.
"""
from typing import Any, Dict, Iterable, List, Optional, Set

from flask import current_app

from cms.extensions import db
from cms.models.menu import Menu, MenuItem
from cms.domain.exceptions import NotFoundError, ValidationError
from cms.utils.audit import log_action
from cms.utils.cache import invalidate_menus
from cms.utils.slug import make_unique
from cms.utils.transaction import transactional

# Held by rows while they are renamed, moved or about to be pruned
RELEASED_LABEL = "__released__:{id}"


def node_item_id(node: Dict[str, Any]) -> Optional[int]:
    """Numeric ids point at existing rows; anything else is a client-side id."""
    raw = node.get("id")
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str) and raw.strip().isdigit():
        return int(raw.strip())
    return None


def flatten_tree_ids(nodes: Iterable[Dict[str, Any]], ids: Optional[List[int]] = None) -> List[int]:
    ids = [] if ids is None else ids
    for node in nodes or []:
        item_id = node_item_id(node)
        if item_id is not None:
            ids.append(item_id)
        flatten_tree_ids(node.get("children") or [], ids)
    return ids


def sync_tree(
    menu: Menu,
    nodes: List[Dict[str, Any]],
    parent_id: Optional[int] = None,
    kept_ids: Optional[List[int]] = None,
) -> List[int]:
    """
    Recursively upserts ``nodes`` under ``parent_id``.

    Returns the accumulated ids of every row written, children included.
    """
    kept_ids = [] if kept_ids is None else kept_ids

    for index, node in enumerate(nodes or []):
        item = None
        item_id = node_item_id(node)
        if item_id is not None:
            item = MenuItem.query.filter_by(id=item_id, menu_id=menu.id).first()

        if item is None:
            item = MenuItem()
            item.menu_id = menu.id
            db.session.add(item)

        item.label = node["label"]
        item.url = node.get("url")
        is_visible = node.get("is_visible")
        item.is_visible = True if is_visible is None else bool(is_visible)
        item.meta = node.get("meta") or item.meta or {}
        item.parent_id = parent_id
        item.position = index
        item.linkable_type = node.get("linkable_type")
        item.linkable_id = node.get("linkable_id")

        db.session.flush()  # ensures item.id for the children

        kept_ids.append(item.id)

        children = node.get("children")
        if children and isinstance(children, list):
            sync_tree(menu, children, item.id, kept_ids)

    return kept_ids


def _incoming_placement(nodes, parent_id=None, placement=None):
    placement = {} if placement is None else placement
    for node in nodes or []:
        item_id = node_item_id(node)
        if item_id is not None:
            placement[item_id] = (parent_id, node.get("label"))
        # Children of new nodes have no known parent id yet
        _incoming_placement(node.get("children") or [], item_id if item_id is not None else -1, placement)
    return placement


def release_labels(menu: Menu, nodes: List[Dict[str, Any]]) -> None:
    """
    Moves rows whose (parent, label) changes out of the way first.

    Sibling labels are unique, so renaming A to B while B is renamed to A, or
    reusing the label of a row being pruned, must not collide mid-sync.
    """
    placement = _incoming_placement(nodes)
    released = False

    for item in MenuItem.query.filter_by(menu_id=menu.id).all():
        incoming = placement.get(item.id)
        if incoming is None or incoming != (item.parent_id, item.label):
            item.label = RELEASED_LABEL.format(id=item.id)
            released = True

    if released:
        db.session.flush()


def prune_items(menu: Menu, kept_ids: Iterable[int]) -> int:
    kept: Set[int] = set(kept_ids)

    query = MenuItem.query.filter(MenuItem.menu_id == menu.id)
    if kept:
        query = query.filter(MenuItem.id.notin_(kept))

    # One statement, so parent/child rows of a pruned branch go together
    pruned = query.delete(synchronize_session="fetch")
    db.session.expire(menu, ["items"])

    return pruned


def create_menu(*, data: Dict[str, Any], actor_id: Optional[int] = None) -> Menu:
    name = data.get("name")
    if not name:
        raise ValidationError("Menu name is required")

    menu = Menu()
    menu.name = name
    menu.slug = make_unique(Menu, data.get("slug"), name)
    menu.settings = data.get("settings") or {}

    with transactional():
        db.session.add(menu)
        db.session.flush()

        log_action(
            action="menu.create",
            entity_type="menu",
            entity_id=menu.id,
            actor_id=actor_id,
            payload={"slug": menu.slug},
        )

    return menu


def sync_menu(
    *,
    menu_id: int,
    data: Dict[str, Any],
    actor_id: Optional[int] = None,
) -> Menu:
    """
    Update a menu and synchronize its item tree.

    Responsibilities:
    - One transaction for labels, upserts and pruning
    - Pruning of items missing from the submitted tree
    - Menu cache invalidation after commit
    """
    menu = db.session.get(Menu, menu_id)
    if menu is None:
        raise NotFoundError(f"Menu {menu_id} not found")

    tree = data.get("tree") or []

    ids = flatten_tree_ids(tree)
    if len(ids) != len(set(ids)):
        raise ValidationError("A menu item id appears more than once in the tree")

    previous_slug = menu.slug

    with transactional():
        if data.get("name"):
            menu.name = data["name"]
        if data.get("slug") and data["slug"] != menu.slug:
            menu.slug = make_unique(Menu, data["slug"], menu.name, exclude_id=menu.id)

        release_labels(menu, tree)
        kept_ids = sync_tree(menu, tree)
        pruned = prune_items(menu, kept_ids)

        log_action(
            action="menu.sync",
            entity_type="menu",
            entity_id=menu.id,
            actor_id=actor_id,
            payload={"kept": len(kept_ids), "pruned": pruned},
        )

    invalidate_menus({previous_slug, menu.slug})
    current_app.logger.info(
        "Synced menu %s: %d items kept, %d pruned", menu.slug, len(kept_ids), pruned
    )

    return menu
