"""
Audit-finding card schema and lanes.

Lanes:
  Not Started → In Progress → Done

Any lane-to-lane move is legal. The board is free-form, not a workflow.
A card's lane is derived from its status alone.
"""
import logging
from enum import Enum
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Tuple, Union

logger = logging.getLogger(__name__)

CardId = Union[str, int]


class FindingStatus(Enum):
    """Valid audit-finding statuses, one per lane."""
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    DONE = "done"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").title()

    @staticmethod
    def normalize(value: Any) -> str:
        """'Not Started' / 'not-started' / 'not started' → 'not_started'."""
        return str(value).strip().lower().replace(" ", "_").replace("-", "_")

    @classmethod
    def is_valid(cls, value: Any) -> bool:
        return isinstance(value, str) and value in {s.value for s in cls}

    @property
    def backend_value(self) -> str:
        """Spelling the audit-findings service stores: 'not started', 'in progress', 'done'."""
        return self.value.replace("_", " ")

    @classmethod
    def to_backend(cls, key: str) -> str:
        """Lane key → backend status. Keys of custom lanes go out unchanged."""
        try:
            return cls(cls.normalize(key)).backend_value
        except ValueError:
            return key


@dataclass(frozen=True)
class Lane:
    """A board column."""
    key: str
    label: str


LANES: Tuple[Lane, ...] = tuple(Lane(s.value, s.label) for s in FindingStatus)


def lane_keys(lanes: Tuple[Lane, ...] = LANES) -> List[str]:
    return [lane.key for lane in lanes]


@dataclass
class Card:
    """A status-bearing record. ``payload`` is opaque to the board engine."""

    id: CardId
    status: str = FindingStatus.NOT_STARTED.value
    payload: Dict[str, Any] = field(default_factory=dict)

    @property
    def key(self) -> str:
        return str(self.id)

    def with_status(self, status: str) -> "Card":
        """Copy of this card in another lane."""
        return replace(self, status=status, payload=dict(self.payload))

    def get(self, name: str, default: Any = None) -> Any:
        return self.payload.get(name, default)

    def to_dict(self) -> Dict[str, Any]:
        """Full record, status as the lane key."""
        data = dict(self.payload)
        data["id"] = self.id
        data["status"] = self.status
        return data

    def to_backend_dict(self) -> Dict[str, Any]:
        """Full record as the backend expects it."""
        data = self.to_dict()
        data["status"] = FindingStatus.to_backend(self.status)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any], lanes: Tuple[Lane, ...] = LANES) -> "Card":
        """Build a card from a backend record, normalizing its status onto a lane."""
        payload = {k: v for k, v in data.items() if k not in ("id", "status")}
        keys = lane_keys(lanes)
        raw = data.get("status")
        status = FindingStatus.normalize(raw) if raw is not None else ""
        if status not in keys:
            logger.warning(
                f"Card {data.get('id')!r} has unknown status {raw!r}; placing it in {keys[0]!r}"
            )
            status = keys[0]
        return cls(id=data.get("id"), status=status, payload=payload)


# ── Validation ───────────────────────────────────────────────────────────────

REQUIRED_FINDING_FIELDS = (
    "name",
    "audit_id",
    "root_cause",
    "recommendation",
    "commitment",
    "commitment_date",
    "person_in_charge",
)


class FindingValidationError(Exception):
    """Raised when a finding form is submitted with missing or bad fields."""

    def __init__(self, problems: List[str]):
        self.problems = problems
        super().__init__("; ".join(problems))


def validate_finding(data: Dict[str, Any]) -> List[str]:
    """Return a list of problems with a create-finding body (empty if valid)."""
    problems = []
    missing = [
        name for name in REQUIRED_FINDING_FIELDS
        if data.get(name) is None or str(data.get(name)).strip() == ""
    ]
    if missing:
        problems.append(f"Missing required fields: {', '.join(missing)}")
    status = data.get("status")
    if status is not None and not FindingStatus.is_valid(FindingStatus.normalize(status)):
        problems.append(f"Invalid status: {status!r}")
    return problems


# ── Priority badge ───────────────────────────────────────────────────────────

def _parse_date(value: Any) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value:
        return None
    text = str(value).strip()
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        pass
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


def commitment_priority(commitment_date: Any, today: Optional[date] = None) -> Optional[str]:
    """high: overdue or due within a week; medium: within a month; low: later."""
    deadline = _parse_date(commitment_date)
    if deadline is None:
        return None
    today = today or date.today()
    days_left = (deadline - today).days
    if days_left <= 7:
        return "high"
    if days_left <= 30:
        return "medium"
    return "low"
