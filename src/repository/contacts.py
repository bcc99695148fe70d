import logging
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.database import models
from src.schemas.contact import ContactInput

__all__ = ["get_contacts", "get_contact", "create_contact", "update_contact", "delete_contact"]

logger = logging.getLogger(__name__)


async def get_contacts(db: AsyncSession) -> List[models.Contact]:
    """
    Retrieve all contacts ordered by last name, then first name.

    :param db: Async SQLAlchemy session.
    :return: List of contact objects.
    """
    try:
        result = await db.execute(
            select(models.Contact).order_by(models.Contact.last_name, models.Contact.first_name)
        )
        return list(result.scalars().all())
    except Exception as e:
        logger.error(f"Error in get_contacts: {e}")
        raise


async def get_contact(db: AsyncSession, contact_id: int) -> Optional[models.Contact]:
    """
    Retrieve a contact by its ID.

    :param db: Async SQLAlchemy session.
    :param contact_id: ID of the contact to retrieve.
    :return: Contact object if found, otherwise None.
    """
    try:
        result = await db.execute(select(models.Contact).filter(models.Contact.id == contact_id))
        return result.scalar_one_or_none()
    except Exception as e:
        logger.error(f"Error in get_contact: {e}")
        raise


async def create_contact(db: AsyncSession, contact: ContactInput) -> models.Contact:
    """
    Create a new contact in the database.

    Both timestamps are set to the same instant.

    :param db: Async SQLAlchemy session.
    :param contact: Normalized contact data.
    :return: The created contact object.
    """
    now = models.utcnow()
    db_contact = models.Contact(**contact.model_dump(), created_at=now, updated_at=now)
    try:
        db.add(db_contact)
        await db.commit()
        await db.refresh(db_contact)
    except Exception as e:
        logger.error(f"Error in create_contact: {e}")
        raise
    return db_contact


async def update_contact(db: AsyncSession, contact_id: int, updated: ContactInput) -> Optional[models.Contact]:
    """
    Replace every content field of a contact.

    Optional fields missing from ``updated`` are cleared.

    :param db: Async SQLAlchemy session.
    :param contact_id: ID of the contact to update.
    :param updated: Normalized contact data.
    :return: The updated contact object, or None if not found.
    """
    contact = await get_contact(db, contact_id)
    if contact is None:
        return None
    try:
        for key, value in updated.model_dump().items():
            setattr(contact, key, value)
        contact.updated_at = models.utcnow()
        await db.commit()
        await db.refresh(contact)
    except Exception as e:
        logger.error(f"Error in update_contact: {e}")
        raise
    return contact


async def delete_contact(db: AsyncSession, contact_id: int) -> bool:
    """
    Delete a contact by its ID.

    :param db: Async SQLAlchemy session.
    :param contact_id: ID of the contact to delete.
    :return: True if a row was removed, False if none matched.
    """
    try:
        result = await db.execute(delete(models.Contact).where(models.Contact.id == contact_id))
        await db.commit()
    except Exception as e:
        logger.error(f"Error in delete_contact: {e}")
        raise
    return result.rowcount > 0
