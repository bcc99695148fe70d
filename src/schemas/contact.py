from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel
from datetime import datetime
from typing import Optional


class ContactBase(BaseModel):
    """
    Shared base model for contact data.

    Attributes are snake_case in Python and camelCase on the wire.

    Attributes:
        first_name (str): The first name of the contact.
        last_name (str): The last name of the contact.
        email (Optional[str]): The email address of the contact.
        phone (Optional[str]): The phone number of the contact.
        company (Optional[str]): The company the contact works for.
        notes (Optional[str]): Free text notes about the contact.
    """
    first_name: str
    last_name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    company: Optional[str] = None
    notes: Optional[str] = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ContactInput(ContactBase):
    """
    Normalized write model, built only from payloads that passed the rule set.

    Empty optional fields collapse to ``None`` here and nowhere else.
    """

    @field_validator("email", "phone", "company", "notes", mode="before")
    @classmethod
    def empty_as_none(cls, value):
        if value == "":
            return None
        return value


class ContactResponse(ContactBase):
    """
    Schema for returning contact data in responses.

    Attributes:
        id (int): Unique identifier for the contact.
        created_at (datetime): When the contact was created.
        updated_at (datetime): When the contact was last modified.
    """
    id: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)
