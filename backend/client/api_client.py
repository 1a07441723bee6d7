import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import httpx

from core import config

logger = logging.getLogger(__name__)


class ServerUnreachable(Exception):
    """The API could not be reached at all (refused, DNS, timeout)"""


@dataclass
class ApiResult:
    status_code: int
    body: Dict[str, Any] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return bool(self.body.get("success"))

    @property
    def data(self) -> Any:
        return self.body.get("data")

    @property
    def message(self) -> str:
        return self.body.get("message") or ""

    @property
    def errors(self) -> List[str]:
        return list(self.body.get("errors") or [])


class CareConnectClient:
    """Thin wrapper over the REST surface returning the response envelopes"""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = (base_url or config.API_URL).rstrip("/")
        self._client = httpx.Client(base_url=self.base_url, timeout=timeout, transport=transport)

    def _request(self, method: str, path: str, json: Optional[Dict[str, Any]] = None) -> ApiResult:
        try:
            response = self._client.request(method, path, json=json)
        except httpx.TransportError as e:
            logger.warning(f"{method} {path} failed: {e}")
            raise ServerUnreachable(f"Could not reach {self.base_url}") from e

        try:
            body = response.json()
        except ValueError:
            body = {"success": False, "message": f"Unexpected response ({response.status_code})"}
        if not isinstance(body, dict):
            body = {"success": False, "message": "Unexpected response body"}
        return ApiResult(response.status_code, body)

    # Support requests
    def list_support(self) -> ApiResult:
        return self._request("GET", "/api/support")

    def submit_support(self, data: Dict[str, Any]) -> ApiResult:
        return self._request("POST", "/api/support", json=data)

    def delete_support(self, request_id: str) -> ApiResult:
        return self._request("DELETE", f"/api/support/{request_id}")

    # Appointments
    def list_appointments(self) -> ApiResult:
        return self._request("GET", "/api/appointments")

    def get_appointment(self, appointment_id: str) -> ApiResult:
        return self._request("GET", f"/api/appointments/{appointment_id}")

    def book_appointment(self, data: Dict[str, Any]) -> ApiResult:
        return self._request("POST", "/api/appointments", json=data)

    def update_appointment(self, appointment_id: str, changes: Dict[str, Any]) -> ApiResult:
        return self._request("PUT", f"/api/appointments/{appointment_id}", json=changes)

    def delete_appointment(self, appointment_id: str) -> ApiResult:
        return self._request("DELETE", f"/api/appointments/{appointment_id}")

    def health(self) -> ApiResult:
        return self._request("GET", "/api/health")

    def close(self):
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()
