"""
Application error taxonomy and the status/message classifier.

Every error the API can answer with is either one of the tagged
:class:`AppError` subclasses below, a storage constraint violation, or an
unexpected failure that is reported as a sanitized 500.
"""
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from sqlalchemy.exc import IntegrityError

from src.schemas.error import FieldViolation

INTERNAL_ERROR_MESSAGE = "Internal server error"

UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"
NOT_NULL_VIOLATION = "23502"

CONSTRAINT_RESPONSES = {
    UNIQUE_VIOLATION: (409, "A record with this information already exists"),
    FOREIGN_KEY_VIOLATION: (400, "Referenced record does not exist"),
    NOT_NULL_VIOLATION: (400, "Required field is missing"),
}

# SQLite reports constraint failures only through the message text.
SQLITE_CONSTRAINT_MESSAGES = {
    "unique constraint failed": UNIQUE_VIOLATION,
    "foreign key constraint failed": FOREIGN_KEY_VIOLATION,
    "not null constraint failed": NOT_NULL_VIOLATION,
}


class AppError(Exception):
    status_code = 500
    default_message = INTERNAL_ERROR_MESSAGE

    def __init__(self, message: Optional[str] = None, details: Optional[Sequence[FieldViolation]] = None):
        self.message = message or self.default_message
        self.details: List[FieldViolation] = list(details or [])
        super().__init__(self.message)


class ValidationFailure(AppError):
    status_code = 400
    default_message = "Validation failed"


class NotFoundError(AppError):
    status_code = 404
    default_message = "Contact not found"


class ConflictError(AppError):
    status_code = 409
    default_message = CONSTRAINT_RESPONSES[UNIQUE_VIOLATION][1]


class ConstraintError(AppError):
    status_code = 400
    default_message = CONSTRAINT_RESPONSES[NOT_NULL_VIOLATION][1]


class UnauthorizedError(AppError):
    status_code = 401
    default_message = "Unauthorized"


class ForbiddenError(AppError):
    status_code = 403
    default_message = "Forbidden"


class InternalError(AppError):
    """
    Wraps an unexpected failure with a fixed, human readable message.

    The message is logged but never sent to the caller.
    """


@dataclass
class ErrorClassification:
    status_code: int
    message: str
    details: List[FieldViolation] = field(default_factory=list)
    code: Optional[str] = None


def constraint_code(exc: BaseException) -> Optional[str]:
    """
    Extract the SQLSTATE of a storage constraint violation, if any.

    Looks at the exception itself and, for SQLAlchemy wrappers, at the
    driver exception it carries.
    """
    candidates = [exc]
    orig = getattr(exc, "orig", None)
    if orig is not None:
        candidates.append(orig)
    for candidate in candidates:
        for attr in ("sqlstate", "pgcode"):
            code = getattr(candidate, attr, None)
            if isinstance(code, str) and code in CONSTRAINT_RESPONSES:
                return code
    if isinstance(exc, IntegrityError):
        text = str(exc).lower()
        for fragment, code in SQLITE_CONSTRAINT_MESSAGES.items():
            if fragment in text:
                return code
    return None


def explicit_status(exc: BaseException) -> Optional[int]:
    for attr in ("status_code", "status"):
        value = getattr(exc, attr, None)
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    return None


def _status_from_message(message: str, keywords: Sequence[str]) -> bool:
    return any(keyword in message for keyword in keywords)


def classify(exc: BaseException, *, match_messages: bool = False) -> ErrorClassification:
    """
    Decide the HTTP status and public message for an error.

    First match wins:

    1. an explicit ``status_code``/``status`` attribute;
    2. "not found" style messages (404), only with ``match_messages``;
    3. "validation" style messages (400), only with ``match_messages``;
    4. storage constraint violations (409 or 400);
    5. authentication (401) and permission (403) messages, only with ``match_messages``;
    6. anything else (500).

    4xx responses keep the error's message, 5xx responses are replaced by a
    generic one. Details are only surfaced on 400 responses.

    :param exc: The error to classify.
    :param match_messages: Also classify untyped errors by their message text.
    :return: The classification.
    """
    message = getattr(exc, "message", None) or getattr(exc, "detail", None) or str(exc)
    if not isinstance(message, str):
        message = str(message)
    lowered = message.lower()
    code = constraint_code(exc)

    status_code = explicit_status(exc)
    if status_code is None and match_messages:
        if _status_from_message(lowered, ("not found", "does not exist")):
            status_code = 404
        elif _status_from_message(lowered, ("validation", "invalid", "required")):
            status_code = 400
    if status_code is None and code is not None:
        status_code, message = CONSTRAINT_RESPONSES[code]
    if status_code is None and match_messages:
        if _status_from_message(lowered, ("unauthorized", "authentication")):
            status_code = 401
        elif _status_from_message(lowered, ("forbidden", "permission")):
            status_code = 403
    if status_code is None:
        status_code = 500

    if status_code >= 500:
        message = INTERNAL_ERROR_MESSAGE

    details = list(getattr(exc, "details", None) or []) if status_code == 400 else []
    return ErrorClassification(status_code=status_code, message=message, details=details, code=code)
