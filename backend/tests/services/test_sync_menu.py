from __future__ import annotations

import pytest

from cms.application.cms.create_page import create_page
from cms.application.menus.public_tree import get_public_tree
from cms.application.menus.sync_menu import create_menu, flatten_tree_ids, sync_menu
from cms.domain.exceptions import NotFoundError, ValidationError
from cms.models import MenuItem
from cms.validators.menu import validate_menu_payload, validate_menu_tree


def _items(menu):
    return {
        item.id: item
        for item in MenuItem.query.filter_by(menu_id=menu.id)
    }


@pytest.fixture()
def menu():
    return create_menu(data={"name": "Main"})


def test_create_menu_allocates_slug(menu):
    assert menu.slug == "main"
    assert create_menu(data={"name": "Main"}).slug == "main-2"


def test_sync_creates_nested_tree(menu):
    sync_menu(menu_id=menu.id, data={"tree": [
        {"id": "tmp-1", "label": "Home", "url": "/"},
        {"id": "tmp-2", "label": "About", "children": [
            {"id": "tmp-3", "label": "Team"},
            {"id": "tmp-4", "label": "Jobs", "is_visible": False},
        ]},
    ]})

    items = {item.label: item for item in _items(menu).values()}

    assert len(items) == 4
    assert items["Home"].parent_id is None
    assert items["Team"].parent_id == items["About"].id
    assert [items["Team"].position, items["Jobs"].position] == [0, 1]
    assert items["Jobs"].is_visible is False


def test_resync_keeps_three_prunes_two_and_adds_two(menu):
    sync_menu(menu_id=menu.id, data={"tree": [
        {"id": f"new-{index}", "label": f"Item {index}"} for index in range(5)
    ]})
    original = sorted(_items(menu))
    kept = [original[4], original[0], original[2]]

    sync_menu(menu_id=menu.id, data={"tree": [
        {"id": kept[0], "label": "Item 4"},
        {"id": "fresh-1", "label": "Fresh 1"},
        {"id": str(kept[1]), "label": "Item 0"},
        {"id": "fresh-2", "label": "Fresh 2"},
        {"id": kept[2], "label": "Item 2"},
    ]})

    items = _items(menu)

    assert len(items) == 5
    assert set(kept) <= set(items)
    assert original[1] not in items and original[3] not in items
    assert [item.label for item in sorted(items.values(), key=lambda i: i.position)] == [
        "Item 4", "Fresh 1", "Item 0", "Fresh 2", "Item 2",
    ]
    assert sorted(item.position for item in items.values()) == [0, 1, 2, 3, 4]


def test_sibling_labels_can_be_swapped(menu):
    sync_menu(menu_id=menu.id, data={"tree": [
        {"id": "a", "label": "First"},
        {"id": "b", "label": "Second"},
    ]})
    first, second = sorted(_items(menu))

    sync_menu(menu_id=menu.id, data={"tree": [
        {"id": first, "label": "Second"},
        {"id": second, "label": "First"},
    ]})

    items = _items(menu)
    assert items[first].label == "Second"
    assert items[second].label == "First"


def test_label_of_pruned_item_can_be_reused(menu):
    sync_menu(menu_id=menu.id, data={"tree": [
        {"id": "parent", "label": "Parent", "children": [{"id": "child", "label": "Blog"}]},
    ]})
    parent = MenuItem.query.filter_by(menu_id=menu.id, label="Parent").one()

    sync_menu(menu_id=menu.id, data={"tree": [
        {"id": parent.id, "label": "Parent", "children": [{"id": "new", "label": "Blog"}]},
    ]})

    children = MenuItem.query.filter_by(parent_id=parent.id).all()
    assert [child.label for child in children] == ["Blog"]
    assert len(_items(menu)) == 2


def test_item_of_another_menu_is_not_adopted(menu):
    other = create_menu(data={"name": "Footer"})
    sync_menu(menu_id=other.id, data={"tree": [{"id": "x", "label": "Contact"}]})
    foreign_id = next(iter(_items(other)))

    sync_menu(menu_id=menu.id, data={"tree": [{"id": foreign_id, "label": "Contact"}]})

    assert foreign_id not in _items(menu)
    assert foreign_id in _items(other)


def test_missing_menu_raises_not_found():
    with pytest.raises(NotFoundError):
        sync_menu(menu_id=404, data={"tree": []})


def test_duplicate_ids_are_rejected(menu):
    with pytest.raises(ValidationError):
        sync_menu(menu_id=menu.id, data={"tree": [
            {"id": 1, "label": "One"},
            {"id": 1, "label": "Two"},
        ]})


def test_flatten_tree_ids_ignores_client_ids():
    tree = [{"id": 3, "children": [{"id": "tmp"}, {"id": "8"}]}, {"id": True}]
    assert flatten_tree_ids(tree) == [3, 8]


def test_duplicate_sibling_labels_fail_validation():
    with pytest.raises(ValidationError):
        validate_menu_tree([{"id": 1, "label": "Same"}, {"id": 2, "label": "Same"}])

    validate_menu_tree([
        {"id": 1, "label": "Same", "children": [{"id": 2, "label": "Same"}]},
    ])


def test_public_tree_hides_invisible_items_and_links_pages(menu, payloads):
    page = create_page(data=payloads.page([], title="Contact", status="published"))
    sync_menu(menu_id=menu.id, data={"tree": [
        {"id": "a", "label": "Contact", "url": "/old", "linkable_type": "page", "linkable_id": page.id},
        {"id": "b", "label": "Hidden", "is_visible": False},
    ]})

    tree = get_public_tree(menu.slug)["tree"]

    assert [node["label"] for node in tree] == ["Contact"]
    assert tree[0]["href"] == "/contact"


def test_public_tree_of_unknown_menu_raises():
    with pytest.raises(NotFoundError):
        get_public_tree("nope")


def test_null_visibility_means_visible(menu):
    data = validate_menu_payload({
        "name": "Main",
        "tree": [{"id": "a", "label": "Home", "is_visible": None}],
    })

    sync_menu(menu_id=menu.id, data=data)

    (item,) = _items(menu).values()
    assert item.is_visible is True
    assert [node["label"] for node in get_public_tree(menu.slug)["tree"]] == ["Home"]
