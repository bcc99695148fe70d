"""
Contact validation rule set shared by the API service and the client form.
"""
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable, List, Optional

from src.errors import ValidationFailure
from src.schemas.error import FieldViolation
from src.validation.validators import is_valid_email, is_valid_phone

ID_PATTERN = re.compile(r"^[0-9]+$")
# Contact.id is a 32-bit INTEGER column.
MAX_CONTACT_ID = 2**31 - 1


@dataclass(frozen=True)
class FieldRule:
    field: str
    label: str
    required: bool = False
    max_length: Optional[int] = None
    check: Optional[Callable[[str], bool]] = None
    check_message: Optional[str] = None


CONTACT_RULES = (
    FieldRule("firstName", "First name", required=True, max_length=50),
    FieldRule("lastName", "Last name", required=True, max_length=50),
    FieldRule("email", "Email", max_length=100, check=is_valid_email, check_message="Invalid email format"),
    FieldRule("phone", "Phone", max_length=20, check=is_valid_phone, check_message="Invalid phone format"),
    FieldRule("company", "Company", max_length=100),
    FieldRule("notes", "Notes", max_length=500),
)


def _is_blank(value: Any) -> bool:
    return value is None or value == ""


def _check_field(rule: FieldRule, value: Any) -> Optional[str]:
    if _is_blank(value):
        return f"{rule.label} is required" if rule.required else None
    if not isinstance(value, str):
        return f"{rule.label} must be a string"
    if rule.required and not value.strip():
        return f"{rule.label} cannot be empty"
    if rule.check is not None and not rule.check(value):
        return rule.check_message
    if rule.max_length is not None and len(value) > rule.max_length:
        return f"{rule.label} must not exceed {rule.max_length} characters"
    return None


def validate_contact(payload: Any) -> List[FieldViolation]:
    """
    Run every contact rule against a raw payload.

    All violations are collected, in rule declaration order. Optional fields
    that are absent, ``None`` or ``""`` pass.

    :param payload: Decoded request body, keyed by wire field names.
    :return: An empty list if the payload is acceptable.
    """
    if not isinstance(payload, Mapping):
        payload = {}
    violations = []
    for rule in CONTACT_RULES:
        message = _check_field(rule, payload.get(rule.field))
        if message is not None:
            violations.append(FieldViolation(field=rule.field, message=message))
    return violations


def validate_contact_id(raw: Optional[str]) -> int:
    """
    Parse a contact id path parameter.

    :param raw: The raw path segment.
    :return: The id as a positive integer.
    :raises ValidationFailure: If the id is missing, not a canonical positive integer, or too large to be stored.
    """
    if not raw:
        raise ValidationFailure(details=[FieldViolation(field="id", message="ID parameter is required")])
    if ID_PATTERN.fullmatch(raw) is None or str(int(raw)) != raw or not 0 < int(raw) <= MAX_CONTACT_ID:
        raise ValidationFailure(details=[FieldViolation(field="id", message="ID must be a positive integer")])
    return int(raw)
