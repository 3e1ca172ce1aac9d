"""
Regex catalog and classifiers for identifiers found in log lines.

Detects (substring-based, first match wins):
- IPv4 addresses (and CIDR blocks), MAC addresses
- email addresses, FQDNs, database namespaces (db.collection)
- SSNs, phone numbers, credit-card numbers, record/account ids
- ISO dates (YYYY-MM-DD) and ":port" suffixes

All patterns are ASCII-only: a Unicode digit is never treated as part of an
identifier.
"""

from __future__ import annotations

import re
from typing import Optional


PORT_RE = re.compile(r":\d{2,}", flags=re.ASCII)


# Email regex (practical, not RFC-5322 complete).
EMAIL_RE = re.compile(
    r"""
    [a-z0-9._%+\-]+                 # local-part (common subset)
    @
    [a-z0-9.\-]+                    # domain labels
    \.
    [a-z]{2,}                       # top-level domain
    """,
    flags=re.IGNORECASE | re.VERBOSE | re.ASCII,
)


# Dotted quad, no range check and no anchors: "192.168.1.1.1" contains an IP.
IP_RE = re.compile(r"\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3}", flags=re.ASCII)

IP_CIDR_RE = re.compile(r"^\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3}(?:/\d{1,2})?$", flags=re.ASCII)


# FQDN: one or more labels followed by an alphabetic TLD.
# A match never starts mid-word or right after "@", so the domain half of an
# email is left to the email rule.
FQDN_RE = re.compile(
    r"""
    (?<![\w@.\-])                   # don't start inside a word or an address
    (?:[a-z0-9\-]{1,63}\.)+         # labels
    [a-z]{2,63}                     # top-level domain
    """,
    flags=re.IGNORECASE | re.VERBOSE | re.ASCII,
)


# Namespace: "db.collection" with an optional third component.
NAMESPACE_RE = re.compile(
    r"""
    (?<![\w@$.\-])                  # same start rule as FQDN_RE
    [^@$.\s]+                       # database
    \.
    [^^@.\s]+                       # collection
    (?:\.[^^@.\s]+)?                # optional tail (e.g. index name)
    """,
    flags=re.VERBOSE | re.ASCII,
)

# Characters that make a dotted value numeric rather than a name ("3.14").
NUMERIC_CHAR_RE = re.compile(r"[0-9.]")

SSN_RE = re.compile(r"\d{3}-\d{2}-\d{4}", flags=re.ASCII)

MAC_RE = re.compile(r"(?:[0-9a-f]{2}[:\-]){5}[0-9a-f]{2}", flags=re.IGNORECASE | re.ASCII)

MAC_SEPARATOR_RE = re.compile(r"[:\-]")

DATE_RE = re.compile(r"(\d{4})-(\d{2})-(\d{2})", flags=re.ASCII)


# Medical record / account ids: a label followed by 6+ digits.
RECORD_ID_RE = re.compile(r"(?:mrn|acct|id)[:\s#]*\d{6,}", flags=re.IGNORECASE | re.ASCII)


# Phone regex (generous shape; digit count decides).
PHONE_RE = re.compile(
    r"""
    (?:\+\d{1,3}[\-.\s]?)?          # optional country code
    (?:\(?\d{3}\)?[\-.\s]?)?        # optional area code, maybe parenthesized
    \d{3}[\-.\s]?\d{4}              # exchange + line number
    """,
    flags=re.VERBOSE | re.ASCII,
)

PHONE_MIN_DIGITS = 10
PHONE_MAX_DIGITS = 15


# Card regex: digits grouped in fours, optional "-" or " " separators.
# No Luhn validation: prefer masking a false positive over leaking a card.
CARD_RE = re.compile(
    r"""
    \d{4}[\-\s]?
    \d{4}[\-\s]?
    \d{4}[\-\s]?
    \d{1,7}
    """,
    flags=re.VERBOSE | re.ASCII,
)

CARD_MIN_DIGITS = 13
CARD_MAX_DIGITS = 19


HOST_PORT_RE = re.compile(r"^[a-z0-9._\-]+:\d+$", flags=re.IGNORECASE | re.ASCII)


def count_digits(s: str) -> int:
    return sum(1 for c in s if "0" <= c <= "9")


def _find_counted(pattern: re.Pattern[str], s: str, lo: int, hi: int) -> Optional[re.Match[str]]:
    for m in pattern.finditer(s):
        if lo <= count_digits(m.group(0)) <= hi:
            return m
    return None


def find_phone_no(s: str) -> Optional[re.Match[str]]:
    """
    Return the first phone-shaped match carrying 10-15 digits, or None.

    The digit count rejects short "phone-shaped" fragments such as 555-1234.
    """
    return _find_counted(PHONE_RE, s, PHONE_MIN_DIGITS, PHONE_MAX_DIGITS)


def find_credit_card_no(s: str) -> Optional[re.Match[str]]:
    """
    Return the first card-shaped match carrying 13-19 digits, or None.
    """
    return _find_counted(CARD_RE, s, CARD_MIN_DIGITS, CARD_MAX_DIGITS)


def contains_ip(s: str) -> bool:
    return IP_RE.search(s) is not None


def contains_email(s: str) -> bool:
    return EMAIL_RE.search(s) is not None


def contains_fqdn(s: str) -> bool:
    return FQDN_RE.search(s) is not None


def contains_ssn(s: str) -> bool:
    return SSN_RE.search(s) is not None


def contains_mac(s: str) -> bool:
    return MAC_RE.search(s) is not None


def contains_date(s: str) -> bool:
    return DATE_RE.search(s) is not None


def contains_record_id(s: str) -> bool:
    return RECORD_ID_RE.search(s) is not None


def contains_phone_no(s: str) -> bool:
    return find_phone_no(s) is not None


def contains_credit_card_no(s: str) -> bool:
    return find_credit_card_no(s) is not None


def is_ip_cidr(s: str) -> bool:
    """
    True when the whole string is a dotted quad with an optional /NN suffix.
    """
    return IP_CIDR_RE.match(s) is not None


def is_path_like(s: str) -> bool:
    return "/" in s or "\\" in s


def is_namespace(s: str) -> bool:
    """
    True when s looks like a database namespace: 2-3 non-empty dot-separated
    parts and no path separators ("mydb.users", "admin.system.version").
    """
    if is_path_like(s):
        return False
    parts = s.split(".")
    if len(parts) < 2 or len(parts) > 3:
        return False
    return all(parts)


def looks_like_hostname(s: str) -> bool:
    if " " in s:
        return False
    return "." in s or "-" in s


def looks_like_host_port(s: str) -> bool:
    return HOST_PORT_RE.match(s) is not None
