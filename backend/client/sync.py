"""
Form-to-API wiring for the client.

A controller owns one form and the list it feeds. Only one submission can be
in flight per controller, and each successful mutation is followed by a full
re-fetch of the list.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from client.api_client import ApiResult, CareConnectClient, ServerUnreachable

logger = logging.getLogger(__name__)

OFFLINE_TEXT = "No data available. Check that the server is running."


@dataclass
class Notification:
    level: str  # success, error, info
    text: str


class FormController(ABC):
    """Base controller; subclasses bind it to one resource through the hooks below"""

    empty_text = "Nothing here yet."

    def __init__(self, client: CareConnectClient):
        self.client = client
        self.items: List[Dict[str, Any]] = []
        self.offline = False
        self.submitting = False
        self.notifications: List[Notification] = []

    # Resource hooks
    @abstractmethod
    def _fetch(self) -> ApiResult:
        pass

    @abstractmethod
    def _create(self, data: Dict[str, Any]) -> ApiResult:
        pass

    @abstractmethod
    def _delete(self, record_id: str) -> ApiResult:
        pass

    @abstractmethod
    def format_item(self, item: Dict[str, Any]) -> str:
        pass

    def notify(self, level: str, text: str):
        self.notifications.append(Notification(level, text))

    def drain_notifications(self) -> List[Notification]:
        pending, self.notifications = self.notifications, []
        return pending

    def _notify_failure(self, result: ApiResult):
        text = result.message or f"Request failed ({result.status_code})"
        if result.errors:
            text = f"{text}: {'; '.join(result.errors)}"
        self.notify("error", text)

    def refresh(self) -> List[Dict[str, Any]]:
        try:
            result = self._fetch()
        except ServerUnreachable as e:
            self.offline = True
            self.items = []
            self.notify("error", str(e))
            return self.items

        self.offline = False
        if result.success:
            self.items = list(result.data or [])
        else:
            self.items = []
            self._notify_failure(result)
        return self.items

    def _mutate(self, action, success_text: str) -> Optional[ApiResult]:
        if self.submitting:
            self.notify("info", "A submission is already in progress")
            return None

        self.submitting = True
        try:
            result = action()
        except ServerUnreachable as e:
            self.offline = True
            self.notify("error", str(e))
            return None
        finally:
            self.submitting = False

        if result.success:
            self.notify("success", result.message or success_text)
            self.refresh()
        else:
            self._notify_failure(result)
        return result

    def submit(self, data: Dict[str, Any]) -> Optional[ApiResult]:
        return self._mutate(lambda: self._create(data), "Saved")

    def delete(self, record_id: str) -> Optional[ApiResult]:
        return self._mutate(lambda: self._delete(record_id), "Deleted")

    def render(self) -> str:
        if self.offline:
            return OFFLINE_TEXT
        if not self.items:
            return self.empty_text
        return "\n".join(self.format_item(item) for item in self.items)


class SupportController(FormController):
    empty_text = "No support requests yet."

    def _fetch(self):
        return self.client.list_support()

    def _create(self, data):
        return self.client.submit_support(data)

    def _delete(self, record_id):
        return self.client.delete_support(record_id)

    def format_item(self, item):
        return (
            f"{item.get('_id')}  [{item.get('status')}] {item.get('fullName')} "
            f"<{item.get('email')}> ({item.get('inquiryType')})\n"
            f"    {item.get('message')}"
        )


class AppointmentController(FormController):
    empty_text = "No appointments booked."

    def _fetch(self):
        return self.client.list_appointments()

    def _create(self, data):
        return self.client.book_appointment(data)

    def _delete(self, record_id):
        return self.client.delete_appointment(record_id)

    def update(self, record_id: str, changes: Dict[str, Any]) -> Optional[ApiResult]:
        return self._mutate(
            lambda: self.client.update_appointment(record_id, changes), "Appointment updated"
        )

    def format_item(self, item):
        line = (
            f"{item.get('_id')}  {item.get('appointmentDate')}  {item.get('patientName')} "
            f"- {item.get('appointmentType')} [{item.get('status')}]"
        )
        if item.get("notes"):
            line += f"\n    {item['notes']}"
        return line
