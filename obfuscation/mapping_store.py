"""
Per-category mapping caches (original -> substitute) for one obfuscation run.

The first substitute derived for a key is the one served for the lifetime of
the store, which keeps a value consistent across every line and document of a
job. Nothing is persisted: callers that want cross-run consistency export a
snapshot and load it back into a fresh store.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field, fields
from typing import Any, Callable, Dict, Mapping, TypeVar

logger = logging.getLogger(__name__)

V = TypeVar("V")

# Caches whose substitutes are also stored as self-mappings.
PINNED_CATEGORIES = frozenset({"hostname", "name"})

MAP_SUFFIX = "_map"


@dataclass
class MappingStore:
    """
    Named caches, one per identifier category.

    Keys are the matched original text (for ``integer`` the integer itself, for
    ``number`` the ``"%f"`` rendering of the float).
    """

    card: Dict[str, str] = field(default_factory=dict)
    hostname: Dict[str, str] = field(default_factory=dict)
    id: Dict[str, str] = field(default_factory=dict)
    integer: Dict[int, int] = field(default_factory=dict)
    ip: Dict[str, str] = field(default_factory=dict)
    mac: Dict[str, str] = field(default_factory=dict)
    name: Dict[str, str] = field(default_factory=dict)
    number: Dict[str, float] = field(default_factory=dict)
    phone: Dict[str, str] = field(default_factory=dict)
    replset: Dict[str, str] = field(default_factory=dict)
    ssn: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self._lock = threading.RLock()

    @classmethod
    def categories(cls) -> tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    def cache(self, category: str) -> dict:
        if category not in self.categories():
            raise KeyError(f"Unknown mapping category: {category!r}")
        return getattr(self, category)

    def lookup_or_add(
        self,
        category: str,
        key: Any,
        derive: Callable[[], V],
        *,
        pin_substitute: bool = False,
    ) -> V:
        """
        Return the cached substitute for key, deriving and caching it first if
        needed. derive() is called at most once per key.

        With pin_substitute, the substitute is also stored under itself so a
        value that is already obfuscated maps to itself on a later pass. An
        original already mapped to something else keeps its mapping.
        """
        cache = self.cache(category)
        with self._lock:
            if key in cache:
                return cache[key]
            value = derive()
            cache[key] = value
            if pin_substitute:
                cache.setdefault(value, value)
            logger.debug("new %s mapping (%d entries)", category, len(cache))
            return value

    def counts(self) -> dict[str, int]:
        with self._lock:
            return {c: len(self.cache(c)) for c in self.categories()}

    def snapshot(self) -> dict[str, dict]:
        """
        Copy every cache into ``{"<category>_map": {...}}``.

        Self-mappings are dropped from the pinned caches; load() restores them.
        """
        out: dict[str, dict] = {}
        with self._lock:
            for c in self.categories():
                cache = self.cache(c)
                if c in PINNED_CATEGORIES:
                    out[c + MAP_SUFFIX] = {k: v for k, v in cache.items() if k != v}
                else:
                    out[c + MAP_SUFFIX] = dict(cache)
        return out

    def load(self, snapshot: Mapping[str, Any]) -> None:
        """
        Merge a snapshot produced by snapshot() (possibly via JSON) into the
        caches. Entries already present are kept. Keys that are not category
        maps are ignored.
        """
        with self._lock:
            for c in self.categories():
                entries = snapshot.get(c + MAP_SUFFIX)
                if not entries:
                    continue
                cache = self.cache(c)
                for k, v in entries.items():
                    if c == "integer":
                        k, v = int(k), int(v)
                    elif c == "number":
                        v = float(v)
                    cache.setdefault(k, v)
                    if c in PINNED_CATEGORIES:
                        cache.setdefault(v, v)
            logger.info("loaded mappings: %s", self.counts())

    def clear(self) -> None:
        with self._lock:
            for c in self.categories():
                self.cache(c).clear()
