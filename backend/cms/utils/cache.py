"""
Cache keys and explicit invalidation.

Writers call these after a successful commit; nothing is invalidated through
model hooks.
"""
from typing import Iterable

from cms.extensions import cache

RENDERED_PAGE_KEY = "page_rendered:{slug}"
MENU_TREE_KEY = "menu_tree:{slug}"


def rendered_page_key(slug: str) -> str:
    return RENDERED_PAGE_KEY.format(slug=slug)


def menu_tree_key(slug: str) -> str:
    return MENU_TREE_KEY.format(slug=slug)


def invalidate_pages(slugs: Iterable[str]) -> None:
    keys = sorted({rendered_page_key(slug) for slug in slugs if slug})
    if keys:
        cache.delete_many(*keys)


def invalidate_menus(slugs: Iterable[str]) -> None:
    keys = sorted({menu_tree_key(slug) for slug in slugs if slug})
    if keys:
        cache.delete_many(*keys)
