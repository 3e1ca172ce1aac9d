"""
Run log lines through an Obfuscator.

Lines holding a JSON object (structured logs) are decoded and walked with
`Obfuscator.obfuscate_value`, so keys stay intact and numbers are scaled;
every other line goes through `Obfuscator.obfuscate_string`.

All lines of one call share the obfuscator's consistency domain: an address
seen on line 3 and line 300 gets the same substitute.
"""

from __future__ import annotations

from typing import Any, Iterable, Iterator, Optional
import json
import logging

from log_processing.log_reader import LogLine, PathLike, read_files, read_upload
from obfuscation.obfuscator import Obfuscator

logger = logging.getLogger(__name__)


def _decode_json_object(line: str) -> Optional[dict[str, Any]]:
    stripped = line.strip()
    if not (stripped.startswith("{") and stripped.endswith("}")):
        return None
    try:
        doc = json.loads(stripped)
    except json.JSONDecodeError:
        return None
    return doc if isinstance(doc, dict) else None


def anonymize_line(line: str, obfuscator: Obfuscator) -> str:
    doc = _decode_json_object(line)
    if doc is None:
        return obfuscator.obfuscate_string(line)
    return json.dumps(obfuscator.obfuscate_value(doc), ensure_ascii=False)


def anonymize_lines(lines: Iterable[LogLine], obfuscator: Obfuscator) -> Iterator[LogLine]:
    """
    Yield a new LogLine per input line, same source and line number.
    """
    for ln in lines:
        yield LogLine(ln.source, ln.number, anonymize_line(ln.text, obfuscator))


def anonymize_upload(
    data: bytes,
    obfuscator: Obfuscator,
    *,
    source: str = "<upload>",
    encoding: str = "utf-8",
    errors: str = "replace",
) -> list[LogLine]:
    """
    Decode, split and anonymize uploaded content.
    """
    out = list(anonymize_lines(read_upload(data, source=source, encoding=encoding, errors=errors), obfuscator))
    logger.info("anonymized %d lines from %s", len(out), source)
    return out


def anonymize_files(
    paths: Iterable[PathLike],
    obfuscator: Obfuscator,
    *,
    encoding: str = "utf-8",
    errors: str = "replace",
    skip_missing: bool = False,
) -> Iterator[LogLine]:
    return anonymize_lines(
        read_files(paths, encoding=encoding, errors=errors, skip_missing=skip_missing),
        obfuscator,
    )


def lines_to_text(lines: Iterable[LogLine]) -> str:
    return "\n".join(ln.text for ln in lines)
