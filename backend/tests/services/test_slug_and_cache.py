from __future__ import annotations

from cms.application.cms.create_page import create_page
from cms.application.cms.delete_page import delete_page
from cms.application.cms.rendered_page import get_rendered_by_slug
from cms.application.cms.update_page import update_page
from cms.extensions import cache
from cms.models import Page
from cms.utils.cache import rendered_page_key
from cms.utils.slug import make_unique, slugify


def test_slugify_strips_accents_and_symbols():
    assert slugify("Über uns & Co!") == "uber-uns-co"
    assert slugify("  --  ") == ""


def test_make_unique_falls_back_to_seed_then_default(payloads):
    assert make_unique(Page, None, "Our Team") == "our-team"
    assert make_unique(Page, "!!!", None) == "item"

    create_page(data=payloads.page([], title="Our Team"))
    assert make_unique(Page, "our team", None) == "our-team-2"


def test_make_unique_ignores_own_row(payloads):
    page = create_page(data=payloads.page([], title="Contact"))
    assert make_unique(Page, "contact", None, exclude_id=page.id) == "contact"


def test_update_invalidates_pages_sharing_a_section(make_post, payloads):
    post = make_post()
    home = create_page(data=payloads.page([
        payloads.section([[payloads.block("post", post.id)]], title="Shared"),
    ], title="Home", status="published"))
    shared_id = home.sections[0].id

    landing = create_page(data=payloads.page([
        payloads.section([[payloads.block("post", post.id)]], title="Shared", id=shared_id),
    ], title="Landing", status="published"))

    get_rendered_by_slug(home.slug)
    assert cache.get(rendered_page_key(home.slug)) is not None

    dto_section = payloads.section([[]], title="Shared, edited", id=shared_id)
    update_page(page=landing, data=payloads.page([dto_section], title="Landing", status="published"))

    assert cache.get(rendered_page_key(home.slug)) is None
    assert get_rendered_by_slug(home.slug)["sections"][0]["title"] == "Shared, edited"


def test_deleted_page_leaves_cache_and_public_reads(payloads):
    page = create_page(data=payloads.page([], title="Gone soon", status="published"))
    get_rendered_by_slug(page.slug)

    delete_page(page_id=page.id)

    assert cache.get(rendered_page_key(page.slug)) is None
    assert get_rendered_by_slug(page.slug) is None
