from cms.domain.layout import SectionSettings, bucket_block_links, db_type_to_ui_label
from .block import normalize_block, render_block


def normalize_section(link):
    """
    Editor entry for one page <-> section pivot row.

    Mirrors the write payload so it can be submitted back unchanged.
    """
    section = link.section
    settings = SectionSettings.from_json(section.settings)
    columns_count, columns = bucket_block_links(section)

    return {
        "id": section.id,
        "title": section.title,
        "ui_type": settings.ui_label or db_type_to_ui_label(section.type, columns_count),
        "db_type": section.type,
        # Echoed back so hint-only layouts (hero, gallery) survive a resubmit
        "db_type_hint": section.type,
        "color": section.color,
        "slug": section.slug,
        "order": link.order,
        "settings": section.settings or {},
        "layout": {
            "columns_count": columns_count,
            "columns": [
                {
                    "id": f"{section.id}:{index}",
                    "index": index,
                    "blocks": [normalize_block(block_link) for block_link in column],
                }
                for index, column in enumerate(columns)
            ],
        },
    }


def render_section(link):
    section = link.section
    columns_count, columns = bucket_block_links(section)

    return {
        "id": section.id,
        "title": section.title,
        "type": section.type,
        "color": section.color,
        "order": link.order,
        "columns_count": columns_count,
        "columns": [
            {
                "index": index,
                "blocks": [render_block(block_link) for block_link in column],
            }
            for index, column in enumerate(columns)
        ],
    }
