from typing import Any, Dict, List
from dataclasses import dataclass, field
from enum import Enum


class InquiryType(Enum):
    PATIENT = "patient"
    VOLUNTEER = "volunteer"
    GENERAL = "general"


class SupportStatus(Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    RESOLVED = "resolved"


class AppointmentType(Enum):
    CONSULTATION = "consultation"
    CHECKUP = "checkup"
    EMERGENCY = "emergency"
    FOLLOW_UP = "follow-up"


class AppointmentStatus(Enum):
    SCHEDULED = "scheduled"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


def enum_values(enum_cls) -> List[str]:
    return [member.value for member in enum_cls]


# Service outcomes. Every CRUD operation returns exactly one of these.


@dataclass
class Created:
    record: Dict[str, Any]


@dataclass
class Found:
    record: Dict[str, Any]


@dataclass
class Listed:
    records: List[Dict[str, Any]] = field(default_factory=list)


@dataclass
class Updated:
    record: Dict[str, Any]


@dataclass
class Deleted:
    id: str


@dataclass
class Rejected:
    """Input failed schema validation; nothing was written"""

    errors: List[str]


@dataclass
class NotFound:
    resource: str
    id: str

    @property
    def message(self) -> str:
        return f"{self.resource} not found"
