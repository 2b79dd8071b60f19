"""Case-insensitive substring search over a fixed set of card fields."""
from typing import Iterable, List, Sequence

from .schema import Card

DEFAULT_SEARCH_FIELDS = ("name", "audit_name", "person_in_charge")


def matches(card: Card, needle: str, fields: Sequence[str] = DEFAULT_SEARCH_FIELDS) -> bool:
    """True if any of ``fields`` contains ``needle`` (already lowercased)."""
    for name in fields:
        value = card.get(name)
        if value is None:
            continue
        if needle in str(value).lower():
            return True
    return False


def filter_cards(cards: Iterable[Card], term: str,
                 fields: Sequence[str] = DEFAULT_SEARCH_FIELDS) -> List[Card]:
    """Cards matching ``term``. An empty term matches everything."""
    needle = (term or "").strip().lower()
    if not needle:
        return list(cards)
    return [c for c in cards if matches(c, needle, fields)]
