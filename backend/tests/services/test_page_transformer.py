from __future__ import annotations

import pytest

from cms.application.cms.create_page import create_page
from cms.application.cms.rendered_page import get_rendered_by_slug
from cms.domain.layout import SectionSettings, effective_columns_count
from cms.extensions import db
from cms.models import BlockSection
from cms.normalizers.page import normalize_page_for_editor, render_page


def _set_column_index(section, index):
    for link in BlockSection.query.filter_by(section_id=section.id):
        link.column_index = index
    db.session.commit()


def test_negative_column_index_renders_in_first_column(make_post, payloads):
    post = make_post()
    page = create_page(data=payloads.page([
        payloads.section([[], [payloads.block("post", post.id)]], ui_type="2 columns"),
    ]))
    _set_column_index(page.sections[0], -3)

    columns = normalize_page_for_editor(page)["sections"][0]["layout"]["columns"]

    assert [block["contentId"] for block in columns[0]["blocks"]] == [post.id]
    assert columns[1]["blocks"] == []


def test_column_index_past_count_renders_in_first_column(make_post, payloads):
    post = make_post()
    page = create_page(data=payloads.page([
        payloads.section([[payloads.block("post", post.id)], []], ui_type="2 columns"),
    ]))
    _set_column_index(page.sections[0], 2)

    columns = normalize_page_for_editor(page)["sections"][0]["layout"]["columns"]

    assert len(columns) == 2
    assert columns[0]["blocks"][0]["contentId"] == post.id


def test_columns_count_falls_back_to_highest_index(make_post, payloads):
    post = make_post()
    page = create_page(data=payloads.page([
        payloads.section(
            [[], [], [payloads.block("post", post.id)]],
            ui_type="3 columns",
        ),
    ]))
    section = page.sections[0]
    section.settings = {"title_size": "lg"}
    db.session.commit()

    layout = normalize_page_for_editor(page)["sections"][0]["layout"]

    assert layout["columns_count"] == 3
    assert layout["columns"][2]["blocks"][0]["contentId"] == post.id


def test_effective_columns_count_defaults_to_one():
    assert effective_columns_count(SectionSettings(), []) == 1
    assert effective_columns_count(SectionSettings(columns_count=2), [5]) == 2


def test_editor_dto_has_column_ids_and_hints(payloads):
    page = create_page(data=payloads.page([
        payloads.section([[], []], ui_type="2 columns", db_type_hint="gallery"),
    ]))

    section = normalize_page_for_editor(page)["sections"][0]

    assert section["db_type"] == "gallery"
    assert section["db_type_hint"] == "gallery"
    assert section["ui_type"] == "2 columns"
    assert [column["id"] for column in section["layout"]["columns"]] == [
        f"{section['id']}:0",
        f"{section['id']}:1",
    ]


def test_render_page_uses_placeholder_for_deleted_content(make_post, make_media, payloads):
    post = make_post(title="Visible")
    media = make_media(meta={"alt": "Team"})
    page = create_page(data=payloads.page([
        payloads.section([[payloads.block("post", post.id), payloads.block("media", media.id)]]),
    ], status="published"))

    media.soft_delete()
    db.session.commit()

    blocks = render_page(page)["sections"][0]["columns"][0]["blocks"]

    assert blocks[0]["type"] == "post"
    assert blocks[0]["data"]["title"] == "Visible"
    assert blocks[0]["data"]["href"] == f"/posts/{post.slug}"
    assert blocks[1]["type"] == "placeholder"


def test_rendered_page_only_for_published_pages(payloads):
    create_page(data=payloads.page([], title="Draft page"))
    published = create_page(data=payloads.page([], title="Live page", status="published"))

    assert get_rendered_by_slug("draft-page") is None
    assert get_rendered_by_slug(published.slug)["page"]["title"] == "Live page"


@pytest.mark.parametrize("column_index", [-1, 5])
def test_submitted_out_of_range_column_index_lands_in_first_column(make_post, payloads, column_index):
    post = make_post()
    section = payloads.section([[]], ui_type="2 columns", columns_count=2)
    section["layout"]["columns"] = [
        {"index": column_index, "blocks": [payloads.block("post", post.id)]},
    ]

    page = create_page(data=payloads.page([section]))

    columns = normalize_page_for_editor(page)["sections"][0]["layout"]["columns"]

    assert [[block["contentId"] for block in column["blocks"]] for column in columns] == [[post.id], []]
