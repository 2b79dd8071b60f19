"""
Toast notifications.

Every terminal outcome of a remote operation ends up here. The notifier logs
the toast, keeps a bounded history for the board UI to poll, and fans out to
subscribers. Fire-and-forget: it never raises.
"""
import logging
import threading
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Dict, Any, List

logger = logging.getLogger(__name__)


class ToastKind(Enum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass
class Toast:
    message: str
    kind: ToastKind
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    def to_dict(self) -> Dict[str, Any]:
        return {"message": self.message, "kind": self.kind.value, "timestamp": self.timestamp}


class Notifier:
    """User-visible notification sink."""

    def __init__(self, history: int = 100):
        self.history = deque(maxlen=history)
        self.subscribers: List[Callable[[Toast], None]] = []
        self._lock = threading.Lock()

    def subscribe(self, callback: Callable[[Toast], None]) -> None:
        """Register a callback invoked with every toast."""
        self.subscribers.append(callback)

    def notify(self, message: str, kind: ToastKind = ToastKind.SUCCESS) -> Toast:
        kind = ToastKind(kind)
        toast = Toast(message=message, kind=kind)
        if kind is ToastKind.ERROR:
            logger.warning(f"[toast] {message}")
        else:
            logger.info(f"[toast] {message}")
        with self._lock:
            self.history.append(toast)
        for callback in self.subscribers:
            try:
                callback(toast)
            except Exception as e:
                logger.error(f"Error in toast subscriber: {e}")
        return toast

    def success(self, message: str) -> Toast:
        return self.notify(message, ToastKind.SUCCESS)

    def error(self, message: str) -> Toast:
        return self.notify(message, ToastKind.ERROR)

    def recent(self, limit: int = 20) -> List[Toast]:
        """Most recent toasts, newest first."""
        with self._lock:
            items = list(self.history)
        return list(reversed(items))[:limit]
