from dataclasses import dataclass, field
from typing import Dict, List, Optional

from src.client.api import ApiError, ContactsApiClient
from src.schemas.contact import ContactResponse
from src.validation.rules import validate_contact

# form attribute -> wire field name
FORM_FIELDS = {
    "first_name": "firstName",
    "last_name": "lastName",
    "email": "email",
    "phone": "phone",
    "company": "company",
    "notes": "notes",
}
REQUIRED_FIELDS = ("first_name", "last_name")
WIRE_TO_FORM = {wire: name for name, wire in FORM_FIELDS.items()}


@dataclass
class ContactForm:
    """
    State behind the create/edit contact form.

    Field values are kept as the raw strings typed by the user. The same
    rule set the API enforces is run locally before anything is sent.
    Errors are keyed by form attribute name.
    """
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    company: str = ""
    notes: str = ""
    errors: Dict[str, str] = field(default_factory=dict)
    submit_error: str = ""

    @classmethod
    def from_contact(cls, contact: ContactResponse) -> "ContactForm":
        return cls(
            first_name=contact.first_name,
            last_name=contact.last_name,
            email=contact.email or "",
            phone=contact.phone or "",
            company=contact.company or "",
            notes=contact.notes or "",
        )

    def change(self, name: str, value: str) -> None:
        """
        Update one field and clear its error.
        """
        if name not in FORM_FIELDS:
            raise KeyError(name)
        setattr(self, name, value)
        self.errors.pop(name, None)

    def to_payload(self) -> Dict[str, str]:
        """
        Trimmed values keyed by wire name, with empty optional fields left out.
        """
        payload = {}
        for name, wire in FORM_FIELDS.items():
            value = getattr(self, name).strip()
            if value or name in REQUIRED_FIELDS:
                payload[wire] = value
        return payload

    def validate(self) -> bool:
        self.errors = {
            WIRE_TO_FORM[violation.field]: violation.message
            for violation in validate_contact(self.to_payload())
        }
        return not self.errors

    def apply_server_errors(self, details: List[Dict[str, str]]) -> None:
        self.errors = {
            WIRE_TO_FORM.get(detail["field"], detail["field"]): detail["message"]
            for detail in details
        }

    async def submit(self, client: ContactsApiClient, contact_id: Optional[int] = None) -> Optional[ContactResponse]:
        """
        Validate locally, then create or update the contact.

        :param client: API client to send the request with.
        :param contact_id: ID of the contact being edited, None to create one.
        :return: The saved contact, or None if validation or the request failed.
        """
        self.submit_error = ""
        if not self.validate():
            return None
        try:
            if contact_id:
                return await client.update_contact(contact_id, self.to_payload())
            return await client.create_contact(self.to_payload())
        except ApiError as e:
            if e.details:
                self.apply_server_errors(e.details)
            else:
                self.submit_error = e.message or "Failed to save contact"
        return None
