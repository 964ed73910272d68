from typing import Any, Dict
from flask import current_app
from cms.domain.exceptions import NotFoundError
from cms.application.cms.rendered_page import get_rendered_by_slug
from cms.application.menus.public_tree import get_public_tree


def get_home_payload() -> Dict[str, Any]:
    """
    Site root: the published home page and the main menu.

    Either part is None when missing, so a fresh install still answers.
    """
    page = get_rendered_by_slug(current_app.config.get("HOME_PAGE_SLUG", "home"))

    try:
        menu = get_public_tree(current_app.config.get("MAIN_MENU_SLUG", "main"))
    except NotFoundError:
        menu = None

    return {"page": page, "menu": menu}
