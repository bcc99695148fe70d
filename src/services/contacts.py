import logging
from typing import Any, List

from sqlalchemy.ext.asyncio import AsyncSession

from src.database.models import Contact
from src.errors import (
    AppError,
    ConflictError,
    ConstraintError,
    InternalError,
    NotFoundError,
    UNIQUE_VIOLATION,
    ValidationFailure,
    classify,
    constraint_code,
)
from src.repository import contacts as repository_contacts
from src.schemas.contact import ContactInput
from src.validation.rules import validate_contact

logger = logging.getLogger(__name__)


def _storage_failure(operation: str, error: Exception, message: str) -> AppError:
    """
    Turn a storage failure into an error that is safe to surface.

    Constraint violations keep their own classification, everything else
    becomes an internal error carrying ``message``.
    """
    logger.error(f"Service error in {operation}: {error}")
    code = constraint_code(error)
    if code is None:
        return InternalError(message)
    public_message = classify(error).message
    if code == UNIQUE_VIOLATION:
        return ConflictError(public_message)
    return ConstraintError(public_message)


def _validated(payload: Any) -> ContactInput:
    violations = validate_contact(payload)
    if violations:
        raise ValidationFailure(details=violations)
    return ContactInput.model_validate(payload)


async def find_all(db: AsyncSession) -> List[Contact]:
    """
    Retrieve every contact.

    :param db: Async SQLAlchemy session.
    :return: Contacts ordered by last name, then first name.
    :raises InternalError: If the store fails.
    """
    try:
        return await repository_contacts.get_contacts(db)
    except Exception as e:
        raise _storage_failure("find_all", e, "Failed to retrieve contacts") from e


async def find_by_id(db: AsyncSession, contact_id: int) -> Contact:
    """
    Retrieve one contact.

    :param db: Async SQLAlchemy session.
    :param contact_id: ID of the contact.
    :return: The contact.
    :raises NotFoundError: If no contact has this ID.
    :raises InternalError: If the store fails.
    """
    try:
        contact = await repository_contacts.get_contact(db, contact_id)
    except Exception as e:
        raise _storage_failure("find_by_id", e, "Failed to retrieve contact") from e
    if contact is None:
        raise NotFoundError("Contact not found")
    return contact


async def create(db: AsyncSession, payload: Any) -> Contact:
    """
    Validate a payload and store it as a new contact.

    Nothing is written when the payload breaks a rule.

    :param db: Async SQLAlchemy session.
    :param payload: Decoded request body.
    :return: The created contact.
    :raises ValidationFailure: If the payload breaks any contact rule.
    """
    contact = _validated(payload)
    try:
        return await repository_contacts.create_contact(db, contact)
    except Exception as e:
        raise _storage_failure("create", e, "Failed to create contact") from e


async def update(db: AsyncSession, contact_id: int, payload: Any) -> Contact:
    """
    Replace a contact's fields.

    The existence check runs before validation, and validation before the write.

    :param db: Async SQLAlchemy session.
    :param contact_id: ID of the contact.
    :param payload: Decoded request body.
    :return: The updated contact.
    :raises NotFoundError: If no contact has this ID.
    :raises ValidationFailure: If the payload breaks any contact rule.
    """
    await find_by_id(db, contact_id)
    contact = _validated(payload)
    try:
        updated = await repository_contacts.update_contact(db, contact_id, contact)
    except Exception as e:
        raise _storage_failure("update", e, "Failed to update contact") from e
    if updated is None:
        raise NotFoundError("Contact not found")
    return updated


async def remove(db: AsyncSession, contact_id: int) -> None:
    """
    Delete a contact.

    :param db: Async SQLAlchemy session.
    :param contact_id: ID of the contact.
    :raises NotFoundError: If no contact has this ID.
    """
    await find_by_id(db, contact_id)
    try:
        deleted = await repository_contacts.delete_contact(db, contact_id)
    except Exception as e:
        raise _storage_failure("remove", e, "Failed to delete contact") from e
    if not deleted:
        raise NotFoundError("Contact not found")
