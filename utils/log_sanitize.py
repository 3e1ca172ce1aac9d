"""
Make obfuscation mapping tables safe to write to logs.

Privacy & legal motivation:
- A mapping table pairs every original value with its substitute; logging it
  would leak exactly the data the obfuscator exists to remove. This module
  turns such tables into a representation fit for logging (entry counts per
  category, settings kept, values dropped).
"""

from __future__ import annotations

from typing import Any, Mapping

# Suffix of keys that hold an original -> substitute table.
MAP_KEY_SUFFIX = "_map"


def summarize_mappings_for_log(mappings: Mapping[str, Any]) -> dict[str, Any]:
    """
    Return a copy of mappings safe for logging: every "<category>_map" table
    is replaced by its entry count; scalar settings are kept.

    Use this whenever you log the output of Obfuscator.get_mappings().
    """
    out: dict[str, Any] = {}
    for k, v in mappings.items():
        if k.endswith(MAP_KEY_SUFFIX) and isinstance(v, Mapping):
            out[k] = len(v)
        elif isinstance(v, Mapping):
            out[k] = summarize_mappings_for_log(v)
        else:
            out[k] = v
    return out


def total_entries(mappings: Mapping[str, Any]) -> int:
    """
    Number of original values recorded across every category table.
    """
    return sum(len(v) for k, v in mappings.items() if k.endswith(MAP_KEY_SUFFIX) and isinstance(v, Mapping))
