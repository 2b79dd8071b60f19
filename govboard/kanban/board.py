"""
Kanban board engine for audit findings.

Drag-and-drop moves are two-phase: the card moves locally at once, then a
background worker persists the whole record and either confirms it with the
server's copy or reverts it and re-fetches the authoritative collection.
Every terminal outcome is reported through the notifier.
"""
import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..notify import Notifier
from .schema import Card, CardId, Lane, LANES, lane_keys
from .search import DEFAULT_SEARCH_FIELDS, filter_cards
from .store import CardStore, PendingUpdate

logger = logging.getLogger(__name__)

UPDATE_FAILED = "Failed to update audit finding"
FETCH_FAILED = "Failed to fetch audit findings"


def _records(data: Any) -> List[Dict[str, Any]]:
    if isinstance(data, list):
        return [d for d in data if isinstance(d, dict)]
    if isinstance(data, dict):
        for key in ("findings", "items", "data"):
            if isinstance(data.get(key), list):
                return _records(data[key])
    return []


class KanbanBoard:
    """
    Owns one board's cards and processes lane transitions.

    ``api`` is any object with ``get_all_findings()`` and
    ``update_finding(id, body)`` returning ApiResponse-like envelopes;
    ``create_finding`` and ``delete_finding`` are needed only by the
    matching board methods.
    """

    def __init__(self, api, notifier: Optional[Notifier] = None,
                 lanes: Tuple[Lane, ...] = LANES,
                 search_fields: Sequence[str] = DEFAULT_SEARCH_FIELDS,
                 executor: Optional[ThreadPoolExecutor] = None):
        self.api = api
        self.notifier = notifier or Notifier()
        self.lanes = lanes
        self.search_fields = tuple(search_fields)
        self.store = CardStore()
        self.search_term = ""
        # One worker: persists run in the order drops were issued
        self._executor = executor or ThreadPoolExecutor(max_workers=1, thread_name_prefix="kanban-persist")
        self._closed = False

    # ── Views ────────────────────────────────────────────────────────────────

    @property
    def cards(self) -> List[Card]:
        return self.store.cards

    @property
    def visible_cards(self) -> List[Card]:
        return filter_cards(self.store.cards, self.search_term, self.search_fields)

    def search(self, term: str) -> List[Card]:
        """Set the active search term and return the matching cards."""
        self.search_term = term or ""
        return self.visible_cards

    def lane_cards(self, lane_key: str) -> List[Card]:
        return [c for c in self.visible_cards if c.status == lane_key]

    def columns(self, term: Optional[str] = None) -> Dict[str, List[Card]]:
        """
        Visible cards grouped by lane, every lane present.

        ``term`` filters this call only and leaves the active search term alone.
        """
        if term is None:
            visible = self.visible_cards
        else:
            visible = filter_cards(self.store.cards, term, self.search_fields)
        return {lane.key: [c for c in visible if c.status == lane.key] for lane in self.lanes}

    def stats(self) -> Dict[str, int]:
        cards = self.store.cards
        stats = {"total": len(cards)}
        for lane in self.lanes:
            stats[lane.key] = sum(1 for c in cards if c.status == lane.key)
        return stats

    # ── Fetch ────────────────────────────────────────────────────────────────

    def refresh(self) -> bool:
        """Replace the collection with the backend's. On failure keep what we have."""
        try:
            response = self.api.get_all_findings()
        except Exception:
            logger.exception("Fetching audit findings raised")
            self.notifier.error(FETCH_FAILED)
            return False

        if not response.success:
            self.notifier.error(response.error or FETCH_FAILED)
            return False

        cards = [Card.from_dict(r, self.lanes) for r in _records(response.data)]
        self.store.set_cards(cards)
        logger.info(f"Loaded {len(cards)} audit findings")
        return True

    # ── Drag and drop ────────────────────────────────────────────────────────

    def handle_drop(self, card_id: CardId, from_lane: str, to_lane: str) -> Optional[Future]:
        """
        Move a card to another lane.

        Returns None for a no-op (same lane, unknown lane, unknown card),
        otherwise a Future resolving to True once the move is confirmed by the
        backend, or False once it has been rolled back.
        """
        if self._closed:
            return None
        if to_lane == from_lane:
            return None
        if to_lane not in lane_keys(self.lanes):
            logger.warning(f"Ignoring drop of card {card_id} onto unknown lane {to_lane!r}")
            return None

        card = self.store.get(card_id)
        if card is None or card.status == to_lane:
            return None

        pending = self.store.apply_optimistic_update(card_id, to_lane)
        if pending is None:
            return None
        logger.info(f"Card {card_id}: {card.status} → {to_lane} (optimistic v{pending.version})")
        try:
            return self._executor.submit(self._persist, pending)
        except RuntimeError:
            # Worker shut down by a concurrent close()
            logger.warning(f"Card {card_id}: persist worker stopped, reverting v{pending.version}")
            self.store.reconcile(pending)
            return None

    def _persist(self, pending: PendingUpdate) -> bool:
        body = pending.updated.to_backend_dict()
        try:
            response = self.api.update_finding(pending.updated.id, body)
        except Exception:
            logger.exception(f"Updating card {pending.card_id} raised")
            return self._rollback(pending, UPDATE_FAILED)

        if not response.success:
            if getattr(response, "transport_error", False):
                message = UPDATE_FAILED
            else:
                message = response.error or UPDATE_FAILED
            return self._rollback(pending, message)

        if self._closed:
            return False

        canonical = pending.updated
        if isinstance(response.data, dict) and response.data:
            canonical = Card.from_dict({**body, **response.data}, self.lanes)

        if self.store.reconcile(pending, canonical):
            self.notifier.success("Audit finding updated successfully!")
            return True
        logger.info(f"Card {pending.card_id}: response for v{pending.version} superseded, ignoring")
        return False

    def _rollback(self, pending: PendingUpdate, message: str) -> bool:
        if self._closed:
            return False
        self.notifier.error(message)
        if self.store.reconcile(pending):
            # Server state is the truth; the revert covers a failing fetch
            self.refresh()
        return False

    # ── Create / delete ──────────────────────────────────────────────────────

    def create_finding(self, data: Dict[str, Any]) -> bool:
        """Create a finding remotely and reload. Validation errors propagate."""
        response = self.api.create_finding(data)
        if not response.success:
            self.notifier.error(response.error or "Failed to create audit finding")
            return False
        self.notifier.success("Audit finding created successfully!")
        self.refresh()
        return True

    def delete_finding(self, card_id: CardId) -> bool:
        try:
            response = self.api.delete_finding(card_id)
        except Exception:
            logger.exception(f"Deleting card {card_id} raised")
            self.notifier.error("Failed to delete audit finding")
            return False
        if not response.success:
            self.notifier.error(response.error or "Failed to delete audit finding")
            return False
        self.store.remove(card_id)
        self.notifier.success("Audit finding deleted successfully!")
        return True

    # ── Lifecycle ────────────────────────────────────────────────────────────

    def close(self, wait: bool = True) -> None:
        """Stop the persist worker. Later continuations are ignored."""
        self._closed = True
        self._executor.shutdown(wait=wait)
