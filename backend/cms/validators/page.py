"""
Boundary validation of page write payloads.

The composition engine trusts what passes here and only degrades on
semantically empty data.
"""
from cms.domain.exceptions import ValidationError
from cms.domain.lifecycle.page import ALLOWED_STATUSES

REFERENCE_CONTENT_TYPES = ("post", "media", "block")
MAX_COLUMNS = 4


def _is_int(value):
    return isinstance(value, int) and not isinstance(value, bool)


def _is_int_like(value):
    if _is_int(value):
        return True
    return isinstance(value, str) and value.strip().isdigit()


def validate_block(block, path):
    if not isinstance(block, dict):
        raise ValidationError(f"{path} must be an object")

    content_type = block.get("contentType")
    if not isinstance(content_type, str) or not content_type.strip():
        raise ValidationError(f"{path}.contentType is required")

    # Other content types degrade to a fallback block downstream
    if content_type in REFERENCE_CONTENT_TYPES and not _is_int(block.get("contentId")):
        raise ValidationError(f"{path}.contentId must be an integer")

    if block.get("title") is not None and not isinstance(block["title"], str):
        raise ValidationError(f"{path}.title must be a string")

    if block.get("order") is not None and (not _is_int(block["order"]) or block["order"] < 0):
        raise ValidationError(f"{path}.order must be a positive integer")


def validate_section(section, path):
    if not isinstance(section, dict):
        raise ValidationError(f"{path} must be an object")

    if not isinstance(section.get("ui_type"), str) or not section["ui_type"].strip():
        raise ValidationError(f"{path}.ui_type is required")

    if section.get("id") is not None and not _is_int_like(section["id"]):
        raise ValidationError(f"{path}.id must be an integer")

    layout = section.get("layout")
    if not isinstance(layout, dict):
        raise ValidationError(f"{path}.layout is required")

    columns_count = layout.get("columns_count")
    if not _is_int(columns_count) or not 1 <= columns_count <= MAX_COLUMNS:
        raise ValidationError(f"{path}.layout.columns_count must be between 1 and {MAX_COLUMNS}")

    columns = layout.get("columns")
    if not isinstance(columns, list):
        raise ValidationError(f"{path}.layout.columns must be a list")

    for c_idx, column in enumerate(columns):
        column_path = f"{path}.layout.columns[{c_idx}]"
        if not isinstance(column, dict):
            raise ValidationError(f"{column_path} must be an object")
        if not _is_int(column.get("index")):
            raise ValidationError(f"{column_path}.index must be an integer")
        if not isinstance(column.get("blocks"), list):
            raise ValidationError(f"{column_path}.blocks must be a list")

        for b_idx, block in enumerate(column["blocks"]):
            validate_block(block, f"{column_path}.blocks[{b_idx}]")


def validate_page_payload(data):
    """Raises ValidationError on the first malformed field."""
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")

    if not isinstance(data.get("title"), str) or not data["title"].strip():
        raise ValidationError("title is required")

    if not isinstance(data.get("type"), str) or not data["type"].strip():
        raise ValidationError("type is required")

    if data.get("status") not in ALLOWED_STATUSES:
        raise ValidationError(f"status must be one of {', '.join(ALLOWED_STATUSES)}")

    if data.get("slug") is not None and not isinstance(data["slug"], str):
        raise ValidationError("slug must be a string")

    if data.get("parent_id") is not None and not _is_int(data["parent_id"]):
        raise ValidationError("parent_id must be an integer")

    sections = data.get("sections")
    if not isinstance(sections, list):
        raise ValidationError("sections must be a list")

    for s_idx, section in enumerate(sections):
        validate_section(section, f"sections[{s_idx}]")

    return data
