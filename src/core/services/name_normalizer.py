"""
Item name normalization and matching.

Suppliers, contract items and warehouse staff spell the same product in
different ways ("Banana Nanica", "BANANA-NANICA", "banana nanica!!"). Names
are compared through a canonical key, and optionally by substring
containment so partial names ("BANANA") still reach their product.

Substring matching can over-merge distinct products sharing a word
("OLEO" vs "OLEO DE SOJA" and "OLEO DE MILHO"); it is switched by
LEDGER_SUBSTRING_MATCHING and only reached through NameMatcher.
"""

import re
import unicodedata
from dataclasses import dataclass

_NON_ALNUM = re.compile(r"[^a-z0-9]")


def normalize_name(text: str | None) -> str:
    """Lower-case, strip diacritics, drop everything but ASCII letters and digits."""
    result = str(text or "").lower()
    result = unicodedata.normalize("NFD", result)
    result = "".join(ch for ch in result if not unicodedata.combining(ch))
    result = _NON_ALNUM.sub("", result)
    return result.strip()


def keys_match(a: str, b: str, allow_substring: bool = True) -> bool:
    """Compare two already-normalized keys."""
    if not a or not b:
        return False
    if a == b:
        return True
    return allow_substring and (a in b or b in a)


def names_match(a: str | None, b: str | None, allow_substring: bool = True) -> bool:
    """True when two free-text names refer to the same item."""
    return keys_match(normalize_name(a), normalize_name(b), allow_substring)


@dataclass(frozen=True)
class NameMatcher:
    """Matching policy shared by the FIFO resolver and the balance aggregator."""

    allow_substring: bool = True

    def key(self, name: str | None) -> str:
        return normalize_name(name)

    def matches(self, a: str | None, b: str | None) -> bool:
        return names_match(a, b, self.allow_substring)

    def matches_keys(self, a: str, b: str) -> bool:
        return keys_match(a, b, self.allow_substring)

    def matches_key(self, key: str, name: str | None) -> bool:
        return keys_match(key, normalize_name(name), self.allow_substring)
