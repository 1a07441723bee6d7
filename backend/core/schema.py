"""
Validation rules for the two resource kinds.

Each resource is described by an ordered tuple of FieldRule entries. validate()
walks the table top to bottom, normalizes every value it can and collects every
violation it finds, so callers always get the complete list in one pass.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from core.models import AppointmentStatus, AppointmentType, InquiryType, SupportStatus, enum_values
from core.utils import parse_datetime

EMAIL_PATTERN = re.compile(r"^\S+@\S+\.\S+$")

STRING = "string"
DATE = "date"


class ValidationFailure:
    """A single violated rule. `message` is what clients get to see."""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message

    def __repr__(self):
        return f"{type(self).__name__}({self.field!r}, {self.message!r})"

    def __eq__(self, other):
        return (
            type(self) is type(other)
            and self.field == other.field
            and self.message == other.message
        )


class MissingField(ValidationFailure):
    pass


class TypeMismatch(ValidationFailure):
    def __init__(self, field: str):
        super().__init__(field, f"{field} must be a string")


class InvalidEnumValue(ValidationFailure):
    def __init__(self, field: str, allowed_values: Sequence[str], value: Any = None):
        self.allowed_values = tuple(allowed_values)
        self.value = value
        super().__init__(
            field,
            f"'{value}' is not a valid {field}. Allowed values: {', '.join(self.allowed_values)}",
        )


class LengthViolation(ValidationFailure):
    def __init__(self, field: str, bound: int, message: str):
        self.bound = bound
        super().__init__(field, message)


class PatternMismatch(ValidationFailure):
    pass


class InvalidDate(ValidationFailure):
    pass


@dataclass(frozen=True)
class FieldRule:
    name: str
    label: str
    kind: str = STRING
    required: bool = False
    trim: bool = False
    lowercase: bool = False
    enum: Optional[Tuple[str, ...]] = None
    default: Optional[str] = None
    min_length: Optional[int] = None
    min_message: Optional[str] = None
    max_length: Optional[int] = None
    max_message: Optional[str] = None
    pattern: Optional[re.Pattern] = None
    pattern_message: str = "Please provide a valid value"


@dataclass
class ValidationResult:
    value: Optional[Dict[str, Any]] = None
    failures: List[ValidationFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    @property
    def errors(self) -> List[str]:
        return [failure.message for failure in self.failures]


SUPPORT_SCHEMA: Tuple[FieldRule, ...] = (
    FieldRule(
        "fullName", "Full name", required=True, trim=True,
        min_length=2, min_message="Name must be at least 2 characters",
    ),
    FieldRule(
        "email", "Email", required=True, trim=True, lowercase=True,
        pattern=EMAIL_PATTERN, pattern_message="Please provide a valid email",
    ),
    FieldRule(
        "inquiryType", "Inquiry type",
        enum=tuple(enum_values(InquiryType)), default=InquiryType.GENERAL.value,
    ),
    FieldRule(
        "message", "Message", required=True,
        min_length=10, min_message="Message must be at least 10 characters",
    ),
    FieldRule(
        "status", "Status",
        enum=tuple(enum_values(SupportStatus)), default=SupportStatus.PENDING.value,
    ),
)

APPOINTMENT_SCHEMA: Tuple[FieldRule, ...] = (
    FieldRule("patientName", "Patient name", required=True, trim=True),
    FieldRule(
        "email", "Email", required=True, trim=True, lowercase=True,
        pattern=EMAIL_PATTERN, pattern_message="Please provide a valid email",
    ),
    FieldRule("appointmentDate", "Appointment date", kind=DATE, required=True),
    FieldRule("phone", "Phone", trim=True),
    FieldRule(
        "appointmentType", "Appointment type",
        enum=tuple(enum_values(AppointmentType)), default=AppointmentType.CONSULTATION.value,
    ),
    FieldRule(
        "notes", "Notes",
        max_length=500, max_message="Notes cannot exceed 500 characters",
    ),
    FieldRule(
        "status", "Status",
        enum=tuple(enum_values(AppointmentStatus)), default=AppointmentStatus.SCHEDULED.value,
    ),
)


def _is_unset(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _check_string(rule: FieldRule, raw: Any) -> Tuple[Optional[str], List[ValidationFailure]]:
    # bool is an int subclass but never a sensible string value
    if isinstance(raw, bool) or not isinstance(raw, (str, int, float)):
        return None, [TypeMismatch(rule.name)]

    value = raw if isinstance(raw, str) else str(raw)
    if rule.trim:
        value = value.strip()
    if rule.lowercase:
        value = value.lower()

    if rule.enum is not None:
        if value not in rule.enum:
            return None, [InvalidEnumValue(rule.name, rule.enum, value)]
        return value, []

    failures: List[ValidationFailure] = []
    if rule.min_length is not None and len(value) < rule.min_length:
        failures.append(LengthViolation(
            rule.name, rule.min_length,
            rule.min_message or f"{rule.label} must be at least {rule.min_length} characters",
        ))
    if rule.max_length is not None and len(value) > rule.max_length:
        failures.append(LengthViolation(
            rule.name, rule.max_length,
            rule.max_message or f"{rule.label} cannot exceed {rule.max_length} characters",
        ))
    if rule.pattern is not None and not rule.pattern.match(value):
        failures.append(PatternMismatch(rule.name, rule.pattern_message))
    return value, failures


def validate(schema: Sequence[FieldRule], record: Mapping[str, Any]) -> ValidationResult:
    """
    Validate and normalize a raw record against a rule table.

    Fields not declared in the schema are dropped. Unset optional fields get
    their declared default, or are left out when they have none.
    """
    if not isinstance(record, Mapping):
        return ValidationResult(failures=[
            ValidationFailure("body", "Request body must be a JSON object")
        ])

    normalized: Dict[str, Any] = {}
    failures: List[ValidationFailure] = []

    for rule in schema:
        raw = record.get(rule.name)

        if _is_unset(raw):
            if rule.required:
                failures.append(MissingField(rule.name, f"{rule.label} is required"))
            elif rule.default is not None:
                normalized[rule.name] = rule.default
            continue

        if rule.kind == DATE:
            parsed = parse_datetime(raw)
            if parsed is None:
                failures.append(InvalidDate(rule.name, f"{rule.label} must be a valid date"))
            else:
                normalized[rule.name] = parsed
            continue

        value, field_failures = _check_string(rule, raw)
        if field_failures:
            failures.extend(field_failures)
        else:
            normalized[rule.name] = value

    if failures:
        return ValidationResult(failures=failures)
    return ValidationResult(value=normalized)
