"""
Section layout rules.

Layout shape is presentation-only, so it is kept in the section settings bag
rather than in relational columns. This module is the single place where that
bag is read, defaulted and written back.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

SECTION_DB_TYPES = ("one_column", "two_columns", "three_columns", "four_columns", "hero", "gallery")

# Legacy misspellings still sent by older editors
HINT_ALIASES = {
    "tree_columns": "three_columns",
    "for_columns": "four_columns",
}

UI_LABEL_TO_DB_TYPE = {
    "1 column": "one_column",
    "2 columns": "two_columns",
    "3 columns": "three_columns",
    "4 columns": "four_columns",
}

DEFAULT_UI_LABEL = "1 column"


def resolve_section_type(*, ui_label: Optional[str], hint: Optional[str], columns_count: int) -> str:
    """
    Maps a submitted section to its db type.

    Precedence: explicit hint, then UI label, then column count. Hints are the
    only way to reach "hero" and "gallery"; an unknown hint falls through.
    """
    normalized_hint = hint.strip().lower() if hint else None
    normalized_hint = HINT_ALIASES.get(normalized_hint, normalized_hint)

    if normalized_hint in SECTION_DB_TYPES:
        return normalized_hint

    label = (ui_label or "").strip().lower()
    if label in UI_LABEL_TO_DB_TYPE:
        return UI_LABEL_TO_DB_TYPE[label]

    if columns_count >= 4:
        return "four_columns"
    if columns_count == 3:
        return "three_columns"
    if columns_count == 2:
        return "two_columns"
    return "one_column"


def db_type_to_ui_label(db_type: Optional[str], columns_count: int) -> str:
    if db_type == "one_column":
        return "1 column"
    if db_type == "two_columns":
        return "2 columns"
    if db_type == "gallery":
        return "3 columns" if columns_count == 3 else "4 columns"

    return {1: "1 column", 2: "2 columns", 3: "3 columns"}.get(columns_count, "4 columns")


@dataclass
class SectionSettings:
    """Typed view over ``Section.settings``; unknown keys are preserved."""

    columns_count: Optional[int] = None
    ui_label: Optional[str] = None
    columns_layout_block_ids: Dict[int, List[int]] = field(default_factory=dict)
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_json(cls, raw: Optional[Dict[str, Any]]) -> "SectionSettings":
        raw = dict(raw or {})

        columns_count = raw.pop("columns_count", None)
        try:
            columns_count = int(columns_count) if columns_count is not None else None
        except (TypeError, ValueError):
            columns_count = None
        if columns_count is not None and columns_count < 1:
            columns_count = None

        layout_ids: Dict[int, List[int]] = {}
        for key, ids in (raw.pop("columns_layout_block_ids", None) or {}).items():
            try:
                layout_ids[int(key)] = [int(block_id) for block_id in ids or []]
            except (TypeError, ValueError):
                continue

        return cls(
            columns_count=columns_count,
            ui_label=raw.pop("ui_label", None),
            columns_layout_block_ids=layout_ids,
            extra=raw,
        )

    def to_json(self) -> Dict[str, Any]:
        data = dict(self.extra)
        data["columns_count"] = self.columns_count
        data["ui_label"] = self.ui_label
        # JSON object keys are strings
        data["columns_layout_block_ids"] = {
            str(index): list(ids)
            for index, ids in sorted(self.columns_layout_block_ids.items())
        }
        return data


def effective_columns_count(settings: SectionSettings, column_indexes: Iterable[int]) -> int:
    """
    Column count of a section: the stored value, otherwise one more than the
    highest column index in use, never less than one.
    """
    if settings.columns_count:
        return settings.columns_count

    indexes = [index for index in column_indexes if index is not None]
    if not indexes:
        return 1
    return max(1, max(indexes) + 1)


def clamp_column_index(column_index: Optional[int], columns_count: int) -> int:
    """Out-of-range column indexes render into the first column."""
    if column_index is None or column_index < 0 or column_index >= columns_count:
        return 0
    return column_index


def bucket_block_links(section) -> tuple[int, List[list]]:
    """
    Groups a section's block pivots into columns.

    Returns ``(columns_count, columns)`` where each column lists pivot rows
    sorted by the cross-column order, so flattening the columns interleaves
    blocks in their original authoring sequence.
    """
    settings = SectionSettings.from_json(section.settings)
    links = list(section.block_links)
    columns_count = effective_columns_count(settings, (link.column_index for link in links))

    columns: List[list] = [[] for _ in range(columns_count)]
    for link in links:
        columns[clamp_column_index(link.column_index, columns_count)].append(link)

    for column in columns:
        column.sort(key=lambda link: link.order)

    return columns_count, columns
