"""Shared test fixtures: an in-memory audit-findings backend."""

import sys
import threading
from pathlib import Path

import pytest

# Ensure the package is importable without installing
sys.path.insert(0, str(Path(__file__).parent.parent))

from govboard.api import ApiResponse
from govboard.kanban.board import KanbanBoard
from govboard.notify import Notifier


class FakeFindingsApi:
    """Stands in for AuditFindingsApi. Records every call."""

    def __init__(self, findings=None):
        self.findings = {str(f["id"]): dict(f) for f in (findings or [])}
        self.calls = []
        self.fail_updates = None      # ApiResponse to return instead of updating
        self.raise_on_update = None   # exception to raise from update_finding
        self.fail_fetch = False
        self.update_gate = None       # threading.Event the update waits on
        self.update_started = threading.Event()

    def get_all_findings(self):
        self.calls.append(("GET",))
        if self.fail_fetch:
            return ApiResponse(False, error="backend down", status_code=503)
        return ApiResponse(True, data=[dict(f) for f in self.findings.values()], status_code=200)

    def update_finding(self, finding_id, body):
        self.calls.append(("PUT", str(finding_id), dict(body)))
        self.update_started.set()
        if self.update_gate is not None:
            self.update_gate.wait(timeout=5)
        if self.raise_on_update is not None:
            raise self.raise_on_update
        if self.fail_updates is not None:
            return self.fail_updates
        stored = dict(body)
        stored["updated_at"] = "2025-01-01T00:00:00Z"
        self.findings[str(finding_id)] = stored
        return ApiResponse(True, data=dict(stored), status_code=200)

    def create_finding(self, body):
        self.calls.append(("POST", dict(body)))
        new_id = str(len(self.findings) + 100)
        self.findings[new_id] = dict(body, id=new_id)
        return ApiResponse(True, data=self.findings[new_id], status_code=201)

    def delete_finding(self, finding_id):
        self.calls.append(("DELETE", str(finding_id)))
        if self.findings.pop(str(finding_id), None) is None:
            return ApiResponse(False, error="Audit finding not found", status_code=404)
        return ApiResponse(True, status_code=200)

    def puts(self):
        return [c for c in self.calls if c[0] == "PUT"]


SAMPLE_FINDINGS = [
    {"id": 1, "name": "Firewall Audit", "person_in_charge": "Rina", "status": "not_started",
     "commitment_date": "2025-03-01"},
    {"id": 2, "name": "Backup Policy", "person_in_charge": "Budi", "status": "done",
     "audit_name": "DR Review"},
    {"id": 3, "name": "Access Review", "person_in_charge": "Sari", "status": "in progress"},
]


@pytest.fixture
def fake_api():
    return FakeFindingsApi(SAMPLE_FINDINGS)


@pytest.fixture
def notifier():
    return Notifier()


@pytest.fixture
def board(fake_api, notifier):
    b = KanbanBoard(fake_api, notifier)
    assert b.refresh()
    yield b
    b.close()
