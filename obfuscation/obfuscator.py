"""
Deterministic, format-preserving obfuscation of identifiers in logs and documents.

One `Obfuscator` instance is one consistency domain: within it, the same
original value always maps to the same substitute, so references between log
lines (an IP, a hostname, an email) survive anonymization.

Entry points:
- obfuscate_string(...): run every string rule, in a fixed order, over one line
- obfuscate_value(...): walk a decoded document (dicts, lists, scalars)
- obfuscate_<category>(...): a single category, for callers that already know
  what a field holds

Every obfuscation call is total: input that does not match a category is
returned unchanged.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional, Sequence
import json
import logging
import math
import numbers
import re

from obfuscation import patterns
from obfuscation.config import DEFAULT_CONFIG, ObfuscatorConfig, config_to_dict, merge_config, validate_config
from obfuscation.hashing import hash_hex, hash_index, hash_octet, sha256_bytes
from obfuscation.mapping_store import MappingStore
from utils.log_sanitize import summarize_mappings_for_log

logger = logging.getLogger(__name__)


CITIES = (
    "Atlanta", "Berlin", "Chicago", "Dublin", "ElPaso",
    "Foshan", "Giza", "Hongkong", "Istanbul", "Jakarta",
    "London", "Miami", "NewYork", "Orlando", "Paris",
    "Queens", "Rome", "Sydney", "Taipei", "Utica",
    "Vancouver", "Warsaw", "Xiamen", "Yonkers", "Zurich",
)

FLOWERS = (
    "Aster", "Begonia", "Carnation", "Daisy", "Erica",
    "Freesia", "Gardenia", "Hyacinth", "Iris", "Jasmine",
    "Kalmia", "Lavender", "Marigold", "Narcissus", "Orchid",
    "Peony", "Rose", "Sunflower", "Tulip", "Ursinia",
    "Violet", "Wisteria", "Xylobium", "Yarrow", "Zinnia",
)

# Unspecified / loopback addresses identify nobody.
UNOBFUSCATED_IPS = frozenset({"0.0.0.0", "127.0.0.1"})

# Digits kept at the start of a phone number (area code + 1).
PHONE_KEPT_DIGITS = 5

CARD_VISIBLE_DIGITS = 4


# A later copy of a matched value is rewritten only when it stands alone: not
# part of a longer word, number, address or dotted name.
_LEAD_BOUNDARY = r"(?<![\w.%+\-@])"
_TRAIL_BOUNDARY = r"(?![\w\-@]|\.\w)"


def _substitute(value: str, m: re.Match[str], replacement: str) -> str:
    """
    Put replacement at the span of m and at every later standalone copy of
    the matched text, so a value repeated on one line never stays in clear.
    """
    matched = m.group(0)
    lead = _LEAD_BOUNDARY if matched[0].isalnum() else ""
    trail = _TRAIL_BOUNDARY if matched[-1].isalnum() else ""
    copies = re.compile(lead + re.escape(matched) + trail)

    out = [value[: m.start()], replacement]
    last = m.end()
    # pos keeps the lookbehind able to see the text before it.
    for c in copies.finditer(value, m.end()):
        out.append(value[last:c.start()])
        out.append(replacement)
        last = c.end()
    out.append(value[last:])
    return "".join(out)


def _city(key: str) -> str:
    return CITIES[hash_index(key, len(CITIES))]


def _flower(key: str) -> str:
    return FLOWERS[hash_index(key + "flower", len(FLOWERS))]


def shift_date(year: int, month: int, day: int, offset_days: int) -> tuple[int, int, int]:
    """
    Shift a date by offset_days on a virtual calendar.

    Underflow borrows 30 days from the previous month, overflow carries every
    28 days into the next one. Not calendar-accurate: the output only has to
    look like a plausible nearby date and be reproducible.
    """
    day += offset_days
    while day < 1:
        month -= 1
        if month < 1:
            month = 12
            year -= 1
        day += 30
    while day > 28:
        day -= 28
        month += 1
        if month > 12:
            month = 1
            year += 1
    return year, month, day


def _cast_like(value: Any, result: Any) -> Any:
    """
    Return result as value's type, or as a plain int/float when that type
    cannot hold it (fixed-width integers and floats scaled past their range).
    """
    try:
        cast = type(value)(result)
    except (OverflowError, TypeError, ValueError):
        return result
    if isinstance(result, int) and int(cast) != result:
        return result
    if isinstance(result, float) and math.isfinite(result) and not math.isfinite(float(cast)):
        return result
    return cast


def _mask_digits_but_last(
text: str, visible: int = CARD_VISIBLE_DIGITS) -> str:
    if len(text) < visible:
        return text
    remaining = patterns.count_digits(text)
    out = []
    for c in text:
        if "0" <= c <= "9":
            out.append(c if remaining <= visible else "*")
            remaining -= 1
        else:
            out.append(c)
    return "".join(out)


class Obfuscator:
    """
    Owns the configuration and the mapping caches of one anonymization job.

    Not a singleton: create one per job. Instances may be shared across
    threads; cache access is serialized by the mapping store.
    """

    def __init__(self, config: Optional[ObfuscatorConfig] = None) -> None:
        self._config = config if config is not None else DEFAULT_CONFIG
        validate_config(self._config)
        self._store = MappingStore()

    @property
    def config(self) -> ObfuscatorConfig:
        return self._config

    @property
    def store(self) -> MappingStore:
        return self._store

    def configure(self, **overrides: Any) -> ObfuscatorConfig:
        """
        Replace the configuration, keeping every mapping derived so far.

        Cached substitutes keep their old shape; only new values use the new
        settings.
        """
        self._config = merge_config(self._config, **overrides)
        logger.info("obfuscator reconfigured: %s", config_to_dict(self._config))
        return self._config

    # --- Network identifiers ---

    def obfuscate_ip(self, value: str) -> str:
        m = patterns.IP_RE.search(value)
        if m is None:
            return value
        base = m.group(0)
        if base in UNOBFUSCATED_IPS:
            return value
        new_ip = self._store.lookup_or_add("ip", base, lambda: self._derive_ip(base))
        return _substitute(value, m, new_ip)

    def _derive_ip(self, base: str) -> str:
        if self._config.ip_style == "private_range":
            b = sha256_bytes(base)
            return f"10.{b[0]}.{b[1]}.{b[2]}"
        octets = base.split(".")
        return f"{octets[0]}.{hash_octet(base, 1)}.{hash_octet(base, 2)}.{octets[3]}"

    def obfuscate_hostname(self, hostname: str) -> str:
        if not hostname:
            return hostname
        return self._store.lookup_or_add(
            "hostname", hostname, lambda: self._derive_hostname(hostname), pin_substitute=True
        )

    def _derive_hostname(self, hostname: str) -> str:
        if self._config.name_style == "hash_prefixed":
            return f"host-{hash_hex(hostname, 8)}.local"
        return f"{_flower(hostname)}.{_city(hostname)}.local".lower()

    def obfuscate_host_port(self, value: str) -> str:
        """
        Obfuscate "host:port" / "ip:port"; the port is kept as written.
        """
        parts = value.split(":")
        if len(parts) != 2:
            return self.obfuscate_hostname(value)
        host, port = parts
        if patterns.contains_ip(host):
            return self.obfuscate_ip(host) + ":" + port
        return self.obfuscate_hostname(host) + ":" + port

    def obfuscate_replica_set(self, name: str) -> str:
        if not name:
            return name
        return self._store.lookup_or_add("replset", name, lambda: self._derive_replica_set(name))

    def _derive_replica_set(self, name: str) -> str:
        if self._config.name_style == "hash_prefixed":
            return f"rs-{hash_hex(name, 8)}"
        return f"rs-{_city(name)}".lower()

    def obfuscate_mac(self, value: str) -> str:
        """
        Keep the vendor prefix (first three octets), replace the device part.
        """
        m = patterns.MAC_RE.search(value)
        if m is None:
            return value
        matched = m.group(0)
        new_mac = self._store.lookup_or_add("mac", matched, lambda: self._derive_mac(matched))
        return _substitute(value, m, new_mac)

    @staticmethod
    def _derive_mac(matched: str) -> str:
        sep = "-" if "-" in matched else ":"
        parts = patterns.MAC_SEPARATOR_RE.split(matched)
        device = [f"{hash_octet(matched, i):02X}" for i in range(3, 6)]
        return sep.join(parts[:3] + device)

    # --- Names ---

    def _generate_name(self, matched: str) -> str:
        parts = matched.split(".")
        if len(parts) > 2:
            return f"{_flower(matched)}.{_city(matched)}.{parts[-1]}".lower()
        return f"{_flower(matched)}.{_city(matched)}".lower()

    def _obfuscate_name_match(self, value: str, m: re.Match[str]) -> str:
        matched = m.group(0)
        new_name = self._store.lookup_or_add(
            "name", matched, lambda: self._generate_name(matched), pin_substitute=True
        )
        return _substitute(value, m, new_name)

    def obfuscate_email(self, value: str) -> str:
        m = patterns.EMAIL_RE.search(value)
        if m is None:
            return value
        matched = m.group(0)
        new_email = self._store.lookup_or_add(
            "name",
            matched,
            lambda: f"{_flower(matched)}@{_city(matched)}.com".lower(),
            pin_substitute=True,
        )
        return _substitute(value, m, new_email)

    def obfuscate_fqdn(self, value: str) -> str:
        if patterns.is_path_like(value):
            return value
        m = patterns.FQDN_RE.search(value)
        if m is None:
            return value
        return self._obfuscate_name_match(value, m)

    def obfuscate_namespace(self, value: str) -> str:
        """
        Obfuscate a "db.collection[.tail]" namespace; a 3-part namespace keeps
        its last component.
        """
        if not patterns.is_namespace(value):
            return value
        if not patterns.NUMERIC_CHAR_RE.sub("", value):
            return value
        m = patterns.NAMESPACE_RE.search(value)
        if m is None:
            return value
        return self._obfuscate_name_match(value, m)

    # --- Personal data ---

    def obfuscate_ssn(self, value: str) -> str:
        m = patterns.SSN_RE.search(value)
        if m is None:
            return value
        matched = m.group(0)
        new_ssn = self._store.lookup_or_add("ssn", matched, lambda: self._derive_ssn(matched))
        return _substitute(value, m, new_ssn)

    @staticmethod
    def _derive_ssn(matched: str) -> str:
        digits = [c for c in matched if "0" <= c <= "9"]
        # Fisher-Yates with hash-chosen swap positions.
        for i in range(len(digits) - 1, 0, -1):
            j = hash_index(matched + str(i), i + 1)
            digits[i], digits[j] = digits[j], digits[i]
        s = "".join(digits)
        return f"{s[:3]}-{s[3:5]}-{s[5:]}"

    def obfuscate_phone_no(self, value: str) -> str:
        """
        Keep the first five digits, replace the rest; punctuation and length
        are preserved.
        """
        m = patterns.find_phone_no(value)
        if m is None:
            return value
        matched = m.group(0)
        new_phone = self._store.lookup_or_add("phone", matched, lambda: self._derive_phone_no(matched))
        return _substitute(value, m, new_phone)

    @staticmethod
    def _derive_phone_no(matched: str) -> str:
        out = []
        n = 0
        for i, c in enumerate(matched):
            if "0" <= c <= "9":
                n += 1
                if n > PHONE_KEPT_DIGITS:
                    c = str(hash_index(matched + str(i), 10))
            out.append(c)
        return "".join(out)

    def obfuscate_credit_card_no(self, value: str) -> str:
        """
        Mask every digit of the card number except the last four.
        """
        m = patterns.find_credit_card_no(value)
        if m is None:
            return value
        matched = m.group(0)
        masked = self._store.lookup_or_add("card", matched, lambda: _mask_digits_but_last(matched))
        return _substitute(value, m, masked)

    def obfuscate_record_id(self, value: str) -> str:
        """
        Replace the digits of a record/account id ("MRN: 12345678"), keeping
        the label, separators and length.
        """
        m = patterns.RECORD_ID_RE.search(value)
        if m is None:
            return value
        matched = m.group(0)
        new_id = self._store.lookup_or_add("id", matched, lambda: self._derive_record_id(matched))
        return _substitute(value, m, new_id)

    @staticmethod
    def _derive_record_id(matched: str) -> str:
        return "".join(
            str(hash_index(matched + str(i), 10)) if "0" <= c <= "9" else c
            for i, c in enumerate(matched)
        )

    # --- Dates and numbers ---

    def obfuscate_date(self, value: str) -> str:
        """
        Shift every YYYY-MM-DD date in value by the configured offset.
        """
        offset = self._config.date_offset_days

        def shift(m: re.Match[str]) -> str:
            year, month, day = shift_date(int(m.group(1)), int(m.group(2)), int(m.group(3)), offset)
            return f"{year:04d}-{month:02d}-{day:02d}"

        return patterns.DATE_RE.sub(shift, value)

    def obfuscate_int(self, value: int) -> int:
        if value <= 1:
            return value
        return self._store.lookup_or_add("integer", value, lambda: int(value * self._config.coefficient))

    def obfuscate_float(self, value: float) -> float:
        return self._store.lookup_or_add("number", f"{value:f}", lambda: value * self._config.coefficient)

    def _obfuscate_port(self, value: str) -> str:
        m = patterns.PORT_RE.search(value)
        if m is None:
            return value
        port = int(m.group(0)[1:])
        return _substitute(value, m, f":{int(port * self._config.coefficient)}")

    # --- Pipeline and traversal ---

    def obfuscate_string(self, value: str) -> str:
        """
        Apply every string rule to value.

        The order is part of the behavior: narrower shapes (cards, emails,
        namespaces) claim their text before broader ones (FQDN, IP, phone) can.
        """
        value = self._obfuscate_port(value)
        value = self.obfuscate_credit_card_no(value)
        value = self.obfuscate_email(value)
        value = self.obfuscate_namespace(value)
        value = self.obfuscate_fqdn(value)
        value = self.obfuscate_ip(value)
        value = self.obfuscate_mac(value)
        value = self.obfuscate_ssn(value)
        value = self.obfuscate_phone_no(value)
        value = self.obfuscate_date(value)
        return value

    def obfuscate_mapping(self, doc: Mapping) -> dict:
        return {k: self.obfuscate_value(v) for k, v in doc.items()}

    def obfuscate_sequence(self, seq: Sequence) -> list | tuple:
        if isinstance(seq, tuple):
            return tuple(self.obfuscate_value(item) for item in seq)
        return [self.obfuscate_value(item) for item in seq]

    def obfuscate_value(self, value: Any) -> Any:
        """
        Obfuscate any decoded value: containers are rebuilt (keys untouched),
        strings go through obfuscate_string, numbers are scaled, and anything
        else (None, bools, bytes, ...) is returned as is.
        """
        if isinstance(value, Mapping):
            return self.obfuscate_mapping(value)
        if isinstance(value, (list, tuple)):
            return self.obfuscate_sequence(value)
        if isinstance(value, str):
            return self.obfuscate_string(value)
        if isinstance(value, bool):
            return value
        if isinstance(value, numbers.Integral):
            return _cast_like(value, self.obfuscate_int(int(value)))
        if isinstance(value, numbers.Real):
            return _cast_like(value, self.obfuscate_float(float(value)))
        return value

    # --- Introspection ---

    def get_mappings(self) -> dict[str, Any]:
        """
        Return settings plus a copy of every category map (self-mappings of
        pinned substitutes filtered out). Contains original values: treat the
        result as sensitive.
        """
        return {**config_to_dict(self._config), **self._store.snapshot()}

    def mappings_json(self, indent: Optional[int] = 2) -> str:
        return json.dumps(self.get_mappings(), indent=indent, ensure_ascii=False)

    def load_mappings(self, mappings: Mapping[str, Any]) -> None:
        """
        Merge mappings exported by get_mappings() (or decoded from
        mappings_json()) into this instance, for cross-run consistency.
        """
        self._store.load(mappings)

    def reset(self) -> None:
        """
        Start a fresh consistency domain: drop every mapping, keep the config.
        """
        logger.info("clearing obfuscation mappings: %s", summarize_mappings_for_log(self.get_mappings()))
        self._store.clear()
