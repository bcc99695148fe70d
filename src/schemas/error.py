from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import List, Optional


class FieldViolation(BaseModel):
    """
    A single field-level rejection of a contact payload.

    Attributes:
        field (str): Wire name of the offending field, e.g. ``firstName``.
        message (str): Human readable reason.
    """
    field: str
    message: str


class ErrorResponse(BaseModel):
    """
    Body returned for every error response.

    Attributes:
        error (str): Public, sanitized error message.
        details (Optional[List[FieldViolation]]): Field violations for validation failures.
        path (Optional[str]): Requested path, only for unmatched routes.
        stack (Optional[str]): Traceback, only in development mode.
        original_message (Optional[str]): Unsanitized message, only in development mode.
    """
    error: str
    details: Optional[List[FieldViolation]] = None
    path: Optional[str] = None
    stack: Optional[str] = None
    original_message: Optional[str] = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
