# cms/application/cms/section_materializer.py
from typing import Any, Dict

from cms.extensions import db
from cms.models.section import Section
from cms.domain.layout import (
    DEFAULT_UI_LABEL,
    SectionSettings,
    resolve_section_type,
)
from cms.utils.slug import make_unique

DEFAULT_COLOR = "#ffffff"


def _coerce_int(value, default=None):
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _find_live_section(section_id) -> Section | None:
    section_id = _coerce_int(section_id)
    if section_id is None:
        return None

    section = db.session.get(Section, section_id)
    if section is None or section.is_deleted:
        return None
    return section


def materialize_section(payload: Dict[str, Any]) -> Section:
    """
    Builds or updates a Section from its submitted description.

    Blocks are not touched here. A payload carrying the id of a live section
    updates that section in place; any other payload creates a new row.
    """
    layout = payload.get("layout") or {}
    columns_count = max(1, _coerce_int(layout.get("columns_count"), 1))
    ui_label = str(payload.get("ui_type") or DEFAULT_UI_LABEL)

    section = _find_live_section(payload.get("id"))
    if section is None:
        section = Section()
        db.session.add(section)

    section.title = payload.get("title")
    section.type = resolve_section_type(
        ui_label=ui_label,
        hint=payload.get("db_type_hint"),
        columns_count=columns_count,
    )
    section.color = str(payload.get("color") or DEFAULT_COLOR)
    section.is_published = bool(payload.get("is_published", section.is_published or False))

    slug = payload.get("slug")
    if slug and slug != section.slug:
        section.slug = make_unique(Section, slug, section.title, exclude_id=section.id)

    settings = SectionSettings.from_json(section.settings)
    settings.columns_count = columns_count
    settings.ui_label = ui_label
    section.settings = settings.to_json()

    db.session.flush()  # ensures section.id

    return section


def write_columns_layout(section: Section, columns_layout_block_ids: Dict[int, list]) -> None:
    """Stores the column -> ordered block ids index on the section."""
    settings = SectionSettings.from_json(section.settings)
    settings.columns_layout_block_ids = {
        index: list(ids) for index, ids in columns_layout_block_ids.items()
    }
    section.settings = settings.to_json()
