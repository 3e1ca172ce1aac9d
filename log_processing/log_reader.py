"""
Read log files as numbered lines.

Core API:
- read_stream(...): lines from an open text stream
- read_file(...): lines from one file on disk
- read_files(...): lines from several files (directories expand to their logs)
- read_upload(...): lines from content already in memory (browser uploads)

Line numbers are 1-based and restart for every file, so a LogLine can always
be traced back to the exact line of the source it came from.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, TextIO, Union
import io
import logging

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class LogLine:
    source: str
    number: int
    text: str


PathLike = Union[str, Path]

# Files picked up when a directory is passed to read_files().
DEFAULT_LOG_GLOB = "*.log"


def _check_first_line(first_line: int) -> None:
    if first_line < 1:
        raise ValueError("first_line must be >= 1")


def _numbered(lines: Iterable[str], source: str, first_line: int) -> Iterator[LogLine]:
    for number, raw in enumerate(lines, start=first_line):
        yield LogLine(source=source, number=number, text=raw.rstrip("\r\n"))


def read_stream(stream: TextIO, *, source: str = "<stream>", first_line: int = 1) -> Iterator[LogLine]:
    """
    Yield one LogLine per line of a text stream, line terminator removed.
    """
    _check_first_line(first_line)
    return _numbered(stream, source, first_line)


def read_file(path: PathLike, *, encoding: str = "utf-8", errors: str = "replace") -> Iterator[LogLine]:
    """
    Yield the lines of one log file.

    Undecodable bytes are replaced by default: a log with a stray binary
    fragment is still worth anonymizing. Raises FileNotFoundError when path
    does not exist.
    """
    p = Path(path)
    # newline="" keeps "\r\n" intact so that _numbered strips it as one terminator.
    with p.open("r", encoding=encoding, errors=errors, newline="") as f:
        yield from _numbered(f, str(p), 1)


def expand_log_paths(paths: Iterable[PathLike], *, pattern: str = DEFAULT_LOG_GLOB) -> list[Path]:
    """
    Replace every directory in paths by its files matching pattern (sorted,
    non-recursive); plain paths are kept in order, existing or not.
    """
    out: list[Path] = []
    for path in paths:
        p = Path(path)
        if p.is_dir():
            out.extend(sorted(c for c in p.glob(pattern) if c.is_file()))
        else:
            out.append(p)
    return out


def read_files(
    paths: Iterable[PathLike],
    *,
    encoding: str = "utf-8",
    errors: str = "replace",
    pattern: str = DEFAULT_LOG_GLOB,
    skip_missing: bool = False,
) -> Iterator[LogLine]:
    """
    Yield the lines of several log files, one file after the other.

    Args:
        pattern: Glob used for directories in paths.
        skip_missing: If True, missing files are logged and skipped; otherwise
            FileNotFoundError is raised.
    """
    for p in expand_log_paths(paths, pattern=pattern):
        if skip_missing and not p.exists():
            logger.warning("skipping missing log file %s", p)
            continue
        yield from read_file(p, encoding=encoding, errors=errors)


def read_upload(
    data: bytes,
    *,
    source: str = "<upload>",
    encoding: str = "utf-8",
    errors: str = "replace",
) -> Iterator[LogLine]:
    """
    Yield the lines of uploaded content already held in memory, split exactly
    as read_file() splits a file on disk.
    """
    text = data.decode(encoding, errors=errors)
    return _numbered(io.StringIO(text, newline=""), source, 1)
