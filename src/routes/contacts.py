from fastapi import APIRouter, Body, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Any, List

from src.database.db import get_db
from src.schemas.contact import ContactResponse
from src.services import contacts as contact_service
from src.validation.rules import validate_contact_id


router = APIRouter(prefix="/api/contacts", tags=["contacts"])


def get_contact_id(contact_id: str) -> int:
    """
    Parse the ``contact_id`` path parameter before it reaches the service.

    :param contact_id: Raw path segment.
    :return: The id as a positive integer.
    """
    return validate_contact_id(contact_id)


@router.get("", response_model=List[ContactResponse])
async def get_contacts(db: AsyncSession = Depends(get_db)):
    """
    Get all contacts, ordered by last name then first name.

    :param db: Database session.
    :return: List of contact objects.
    """
    return await contact_service.find_all(db)


@router.get("/{contact_id}", response_model=ContactResponse)
async def get_contact_by_id(contact_id: int = Depends(get_contact_id), db: AsyncSession = Depends(get_db)):
    """
    Retrieve a specific contact by ID.

    :param contact_id: ID of the contact.
    :param db: Database session.
    :return: Contact object if found.
    """
    return await contact_service.find_by_id(db, contact_id)


@router.post("", response_model=ContactResponse, status_code=status.HTTP_201_CREATED)
async def create_contact(payload: Any = Body(None), db: AsyncSession = Depends(get_db)):
    """
    Create a new contact.

    :param payload: Contact fields in camelCase.
    :param db: Database session.
    :return: The newly created contact.
    """
    return await contact_service.create(db, payload)


@router.put("/{contact_id}", response_model=ContactResponse)
async def update_contact(
    contact_id: int = Depends(get_contact_id),
    payload: Any = Body(None),
    db: AsyncSession = Depends(get_db),
):
    """
    Replace an existing contact by ID.

    :param contact_id: ID of the contact to update.
    :param payload: Contact fields in camelCase.
    :param db: Database session.
    :return: Updated contact object.
    """
    return await contact_service.update(db, contact_id, payload)


@router.delete("/{contact_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def delete_contact(contact_id: int = Depends(get_contact_id), db: AsyncSession = Depends(get_db)):
    """
    Delete a contact by ID.

    :param contact_id: ID of the contact to delete.
    :param db: Database session.
    :return: 204 No Content on successful deletion.
    """
    await contact_service.remove(db, contact_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
