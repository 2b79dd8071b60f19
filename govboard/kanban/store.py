"""
In-memory card store for one board.

The store is the single owner of the card collection. Mutation goes through
a narrow API: set_cards (full replace after a fetch), apply_optimistic_update
(tentative move) and reconcile (confirm with the server's record, or revert).

Each optimistic update bumps a per-card version stamp. Reconciling a stale
PendingUpdate is a no-op, so an older response never clobbers a newer move.
"""
import logging
import threading
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from .schema import Card, CardId

logger = logging.getLogger(__name__)


@dataclass
class PendingUpdate:
    """One tentative status change, awaiting confirm-or-revert."""
    card_id: str
    previous: Card
    updated: Card
    version: int


class CardStore:
    """Lock-protected, ordered card collection."""

    def __init__(self, cards: Iterable[Card] = ()):
        self._cards: List[Card] = list(cards)
        self._versions: Dict[str, int] = {}
        self._lock = threading.RLock()

    # ── Reads ────────────────────────────────────────────────────────────────

    @property
    def cards(self) -> List[Card]:
        """Snapshot of the collection, in order."""
        with self._lock:
            return list(self._cards)

    def __len__(self) -> int:
        with self._lock:
            return len(self._cards)

    def get(self, card_id: CardId) -> Optional[Card]:
        key = str(card_id)
        with self._lock:
            for card in self._cards:
                if card.key == key:
                    return card
        return None

    # ── Mutations ────────────────────────────────────────────────────────────

    def set_cards(self, cards: Iterable[Card]) -> None:
        """Replace the whole collection with an authoritative fetch."""
        with self._lock:
            self._cards = list(cards)

    def remove(self, card_id: CardId) -> bool:
        key = str(card_id)
        with self._lock:
            before = len(self._cards)
            self._cards = [c for c in self._cards if c.key != key]
            return len(self._cards) != before

    def apply_optimistic_update(self, card_id: CardId, status: str) -> Optional[PendingUpdate]:
        """Move a card to ``status`` locally. None if the card is unknown."""
        key = str(card_id)
        with self._lock:
            idx = self._index(key)
            if idx is None:
                return None
            previous = self._cards[idx]
            updated = previous.with_status(status)
            self._cards[idx] = updated
            version = self._versions.get(key, 0) + 1
            self._versions[key] = version
            return PendingUpdate(card_id=key, previous=previous, updated=updated, version=version)

    def is_current(self, pending: PendingUpdate) -> bool:
        with self._lock:
            return (self._versions.get(pending.card_id, 0) == pending.version
                    and self._index(pending.card_id) is not None)

    def reconcile(self, pending: PendingUpdate, canonical: Optional[Card] = None) -> bool:
        """
        Settle a tentative update.

        With ``canonical`` the optimistic card is replaced by the server's
        record; without it the card reverts to its pre-move state. Returns
        False when the update is stale or the card is gone.
        """
        with self._lock:
            if not self.is_current(pending):
                logger.debug(f"Skipping stale reconcile for card {pending.card_id} v{pending.version}")
                return False
            idx = self._index(pending.card_id)
            self._cards[idx] = canonical if canonical is not None else pending.previous
            return True

    def _index(self, key: str) -> Optional[int]:
        for i, card in enumerate(self._cards):
            if card.key == key:
                return i
        return None
