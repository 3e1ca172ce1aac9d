"""
Tabular (pandas) view of an obfuscator's mapping tables, for review and export.
"""

from __future__ import annotations

from typing import Any, Mapping

import pandas as pd

from utils.log_sanitize import MAP_KEY_SUFFIX

MAPPING_COLUMNS = ["Category", "Original", "Obfuscated"]


def mappings_to_frame(mappings: Mapping[str, Any]) -> pd.DataFrame:
    """
    Flatten the "<category>_map" tables of Obfuscator.get_mappings() into one
    row per (category, original, substitute). Settings are not included.

    Values are rendered as strings so ints, floats and text share columns.
    """
    rows = []
    for key, table in mappings.items():
        if not key.endswith(MAP_KEY_SUFFIX) or not isinstance(table, Mapping):
            continue
        category = key[: -len(MAP_KEY_SUFFIX)]
        for original, substitute in table.items():
            rows.append(
                {
                    "Category": category,
                    "Original": str(original),
                    "Obfuscated": str(substitute),
                }
            )

    if not rows:
        return pd.DataFrame(columns=MAPPING_COLUMNS)
    return pd.DataFrame(rows, columns=MAPPING_COLUMNS)


def category_counts(frame: pd.DataFrame) -> pd.Series:
    """
    Number of mapped values per category (categories without entries omitted).
    """
    if frame.empty:
        return pd.Series(dtype="int64", name="Count")
    return frame.groupby("Category").size().rename("Count")
