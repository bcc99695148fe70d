from dataclasses import dataclass, field
from typing import List, Optional

from src.client.api import ApiError, ContactsApiClient
from src.schemas.contact import ContactResponse


@dataclass
class ContactListView:
    """
    State behind the contact list: the loaded contacts and an error banner.

    A failed fetch leaves the previous contacts in place and sets ``error``;
    :meth:`retry` repeats the fetch.
    """
    client: ContactsApiClient
    contacts: List[ContactResponse] = field(default_factory=list)
    error: str = ""
    loading: bool = False

    async def load(self) -> bool:
        """
        Fetch every contact.

        :return: True if the contacts were loaded.
        """
        self.loading = True
        self.error = ""
        try:
            self.contacts = await self.client.get_all_contacts()
            return True
        except ApiError as e:
            self.error = e.message or "Failed to load contacts. Please try again."
            return False
        finally:
            self.loading = False

    async def retry(self) -> bool:
        return await self.load()

    def dismiss_error(self) -> None:
        self.error = ""


@dataclass
class ContactDetailView:
    """
    State behind a single contact page, including its delete action.

    Attributes:
        contact_id (int): ID of the displayed contact.
        deleted (bool): Set once the contact was deleted.
        pending_action (Optional[str]): ``"load"`` or ``"delete"``, whichever failed last.
    """
    client: ContactsApiClient
    contact_id: int
    contact: Optional[ContactResponse] = None
    error: str = ""
    deleted: bool = False
    pending_action: Optional[str] = None

    async def load(self) -> bool:
        self.error = ""
        try:
            self.contact = await self.client.get_contact_by_id(self.contact_id)
        except ApiError as e:
            self.pending_action = "load"
            if e.status == 404:
                self.error = "Contact not found"
            else:
                self.error = e.message or "Failed to load contact"
            return False
        self.pending_action = None
        return True

    async def delete(self) -> bool:
        self.error = ""
        try:
            await self.client.delete_contact(self.contact_id)
        except ApiError as e:
            self.pending_action = "delete"
            self.error = e.message or "Failed to delete contact"
            return False
        self.pending_action = None
        self.deleted = True
        return True

    async def retry(self) -> bool:
        """
        Repeat the action that failed last.

        :return: True if it succeeded, False if it failed again or nothing failed.
        """
        if self.pending_action == "load":
            return await self.load()
        if self.pending_action == "delete":
            return await self.delete()
        return False

    def dismiss_error(self) -> None:
        self.error = ""
