"""
REST clients for the audit-findings and portfolio services.

Every call returns an ApiResponse envelope ``{success, data, error}``; remote
failures (HTTP errors, connection problems, bad JSON) never raise. Local
validation failures do raise, before any request is made.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

from .kanban.schema import FindingValidationError, validate_finding
from .transcode import to_camel, to_snake

logger = logging.getLogger(__name__)


@dataclass
class ApiResponse:
    success: bool
    data: Any = None
    error: Optional[str] = None
    status_code: Optional[int] = None

    @property
    def transport_error(self) -> bool:
        """True when the request never produced an HTTP response."""
        return not self.success and self.status_code is None

    def map(self, fn) -> "ApiResponse":
        """Apply ``fn`` to ``data`` on success."""
        if not self.success or self.data is None:
            return self
        return ApiResponse(True, fn(self.data), self.error, self.status_code)


def _error_text(body: Any, status: int) -> str:
    if isinstance(body, dict):
        for key in ("error", "message"):
            if body.get(key):
                return str(body[key])
    return f"HTTP error! status: {status}"


class RestClient:
    """Thin JSON-over-HTTP client with bearer auth."""

    def __init__(self, base_url: str, token: Optional[str] = None,
                 timeout: float = 10.0, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self.session = session or requests.Session()

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def request(self, method: str, path: str, json_body: Any = None,
                params: Optional[Dict[str, Any]] = None) -> ApiResponse:
        url = f"{self.base_url}{path}"
        try:
            r = self.session.request(
                method,
                url,
                json=json_body,
                params=params,
                headers=self._headers(),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"{method} {url} failed: {e}")
            return ApiResponse(False, error=f"Network error: {e}")

        body: Any = None
        if r.content:
            try:
                body = r.json()
            except ValueError:
                if r.ok:
                    logger.error(f"{method} {url} returned invalid JSON")
                    return ApiResponse(False, error="Invalid JSON response", status_code=r.status_code)

        if not r.ok:
            error = _error_text(body, r.status_code)
            logger.warning(f"{method} {url} → {r.status_code}: {error}")
            return ApiResponse(False, error=error, status_code=r.status_code)

        # Services either wrap their payload in an envelope or return it raw
        if isinstance(body, dict) and "success" in body:
            return ApiResponse(
                success=bool(body.get("success")),
                data=body.get("data"),
                error=body.get("error"),
                status_code=r.status_code,
            )
        return ApiResponse(True, data=body, status_code=r.status_code)


class AuditFindingsApi(RestClient):
    """Audit-findings service: the board's system of record."""

    PATH = "/api/audit/findings"

    def get_all_findings(self) -> ApiResponse:
        return self.request("GET", self.PATH)

    def get_finding(self, finding_id) -> ApiResponse:
        return self.request("GET", f"{self.PATH}/{finding_id}")

    def create_finding(self, data: Dict[str, Any]) -> ApiResponse:
        """Create a finding. Raises FindingValidationError before sending bad input."""
        problems = validate_finding(data)
        if problems:
            raise FindingValidationError(problems)
        return self.request("POST", self.PATH, json_body=data)

    def update_finding(self, finding_id, data: Dict[str, Any]) -> ApiResponse:
        return self.request("PUT", f"{self.PATH}/{finding_id}", json_body=data)

    def delete_finding(self, finding_id) -> ApiResponse:
        return self.request("DELETE", f"{self.PATH}/{finding_id}")

    def get_categories(self) -> ApiResponse:
        return self.request("GET", f"{self.PATH}/categories")


class PortfolioApi(RestClient):
    """Portfolio service. Speaks snake_case; callers see camelCase."""

    PATH = "/api/portfolio/projects"

    def list_projects(self, **params) -> ApiResponse:
        query = {k: v for k, v in params.items() if v not in (None, "")}
        return self.request("GET", self.PATH, params=query or None).map(to_camel)

    def get_project(self, project_id) -> ApiResponse:
        return self.request("GET", f"{self.PATH}/{project_id}").map(to_camel)

    def create_project(self, data: Dict[str, Any]) -> ApiResponse:
        # The create endpoint takes camelCase as-is
        return self.request("POST", self.PATH, json_body=data).map(to_camel)

    def update_project(self, project_id, data: Dict[str, Any]) -> ApiResponse:
        return self.request("PUT", f"{self.PATH}/{project_id}", json_body=to_snake(data)).map(to_camel)

    def delete_project(self, project_id) -> ApiResponse:
        return self.request("DELETE", f"{self.PATH}/{project_id}")


def findings_from_config(cfg) -> AuditFindingsApi:
    return AuditFindingsApi(cfg.audit_service_url, token=cfg.api_token, timeout=cfg.request_timeout)
