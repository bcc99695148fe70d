import unittest
from unittest.mock import AsyncMock, MagicMock, patch

from sqlalchemy.exc import IntegrityError

from src.errors import ConflictError, InternalError, NotFoundError, ValidationFailure
from src.services import contacts as contact_service

REPOSITORY = "src.services.contacts.repository_contacts"


class DriverError(Exception):
    sqlstate = "23505"


class TestContactService(unittest.IsolatedAsyncioTestCase):

    def setUp(self):
        self.db = AsyncMock()
        self.contact = MagicMock(id=1, first_name="John", last_name="Doe")
        self.payload = {"firstName": "John", "lastName": "Doe", "email": ""}

    @patch(f"{REPOSITORY}.get_contacts", new_callable=AsyncMock)
    async def test_find_all(self, mock_get_contacts):
        mock_get_contacts.return_value = [self.contact]
        result = await contact_service.find_all(self.db)
        self.assertEqual(result, [self.contact])

    @patch(f"{REPOSITORY}.get_contacts", new_callable=AsyncMock)
    async def test_find_all_wraps_failures(self, mock_get_contacts):
        mock_get_contacts.side_effect = RuntimeError("relation contacts does not exist")
        with self.assertRaises(InternalError) as ctx:
            await contact_service.find_all(self.db)
        self.assertEqual(ctx.exception.message, "Failed to retrieve contacts")
        self.assertEqual(ctx.exception.status_code, 500)

    @patch(f"{REPOSITORY}.get_contact", new_callable=AsyncMock)
    async def test_find_by_id_not_found(self, mock_get_contact):
        mock_get_contact.return_value = None
        with self.assertRaises(NotFoundError) as ctx:
            await contact_service.find_by_id(self.db, 999)
        self.assertEqual(ctx.exception.status_code, 404)

    @patch(f"{REPOSITORY}.get_contact", new_callable=AsyncMock)
    async def test_find_by_id_wraps_failures(self, mock_get_contact):
        mock_get_contact.side_effect = RuntimeError("timeout")
        with self.assertRaises(InternalError) as ctx:
            await contact_service.find_by_id(self.db, 1)
        self.assertEqual(ctx.exception.message, "Failed to retrieve contact")

    @patch(f"{REPOSITORY}.create_contact", new_callable=AsyncMock)
    async def test_create_normalizes_payload(self, mock_create_contact):
        mock_create_contact.return_value = self.contact
        result = await contact_service.create(self.db, self.payload)
        self.assertIs(result, self.contact)
        contact_input = mock_create_contact.await_args.args[1]
        self.assertEqual(contact_input.first_name, "John")
        self.assertIsNone(contact_input.email)

    @patch(f"{REPOSITORY}.create_contact", new_callable=AsyncMock)
    async def test_create_rejects_invalid_payload_before_repository(self, mock_create_contact):
        with self.assertRaises(ValidationFailure) as ctx:
            await contact_service.create(self.db, {"lastName": "Doe"})
        self.assertEqual([d.field for d in ctx.exception.details], ["firstName"])
        mock_create_contact.assert_not_called()

    @patch(f"{REPOSITORY}.create_contact", new_callable=AsyncMock)
    async def test_create_wraps_failures(self, mock_create_contact):
        mock_create_contact.side_effect = RuntimeError("disk full")
        with self.assertRaises(InternalError) as ctx:
            await contact_service.create(self.db, self.payload)
        self.assertEqual(ctx.exception.message, "Failed to create contact")

    @patch(f"{REPOSITORY}.create_contact", new_callable=AsyncMock)
    async def test_create_unique_violation_is_conflict(self, mock_create_contact):
        mock_create_contact.side_effect = IntegrityError("INSERT", {}, DriverError("duplicate key"))
        with self.assertRaises(ConflictError) as ctx:
            await contact_service.create(self.db, self.payload)
        self.assertEqual(ctx.exception.status_code, 409)

    @patch(f"{REPOSITORY}.update_contact", new_callable=AsyncMock)
    @patch(f"{REPOSITORY}.get_contact", new_callable=AsyncMock)
    async def test_update(self, mock_get_contact, mock_update_contact):
        mock_get_contact.return_value = self.contact
        mock_update_contact.return_value = self.contact
        result = await contact_service.update(self.db, 1, self.payload)
        self.assertIs(result, self.contact)
        mock_update_contact.assert_awaited_once()

    @patch(f"{REPOSITORY}.update_contact", new_callable=AsyncMock)
    @patch(f"{REPOSITORY}.get_contact", new_callable=AsyncMock)
    async def test_update_checks_existence_before_validation(self, mock_get_contact, mock_update_contact):
        mock_get_contact.return_value = None
        with self.assertRaises(NotFoundError):
            await contact_service.update(self.db, 999, {"firstName": ""})
        mock_update_contact.assert_not_called()

    @patch(f"{REPOSITORY}.update_contact", new_callable=AsyncMock)
    @patch(f"{REPOSITORY}.get_contact", new_callable=AsyncMock)
    async def test_update_validates_before_write(self, mock_get_contact, mock_update_contact):
        mock_get_contact.return_value = self.contact
        with self.assertRaises(ValidationFailure):
            await contact_service.update(self.db, 1, {"firstName": "John", "lastName": "x" * 51})
        mock_update_contact.assert_not_called()

    @patch(f"{REPOSITORY}.update_contact", new_callable=AsyncMock)
    @patch(f"{REPOSITORY}.get_contact", new_callable=AsyncMock)
    async def test_update_wraps_failures(self, mock_get_contact, mock_update_contact):
        mock_get_contact.return_value = self.contact
        mock_update_contact.side_effect = RuntimeError("deadlock")
        with self.assertRaises(InternalError) as ctx:
            await contact_service.update(self.db, 1, self.payload)
        self.assertEqual(ctx.exception.message, "Failed to update contact")

    @patch(f"{REPOSITORY}.delete_contact", new_callable=AsyncMock)
    @patch(f"{REPOSITORY}.get_contact", new_callable=AsyncMock)
    async def test_remove(self, mock_get_contact, mock_delete_contact):
        mock_get_contact.return_value = self.contact
        mock_delete_contact.return_value = True
        self.assertIsNone(await contact_service.remove(self.db, 1))
        mock_delete_contact.assert_awaited_once_with(self.db, 1)

    @patch(f"{REPOSITORY}.delete_contact", new_callable=AsyncMock)
    @patch(f"{REPOSITORY}.get_contact", new_callable=AsyncMock)
    async def test_remove_not_found(self, mock_get_contact, mock_delete_contact):
        mock_get_contact.return_value = None
        with self.assertRaises(NotFoundError):
            await contact_service.remove(self.db, 999)
        mock_delete_contact.assert_not_called()

    @patch(f"{REPOSITORY}.delete_contact", new_callable=AsyncMock)
    @patch(f"{REPOSITORY}.get_contact", new_callable=AsyncMock)
    async def test_remove_wraps_failures(self, mock_get_contact, mock_delete_contact):
        mock_get_contact.return_value = self.contact
        mock_delete_contact.side_effect = RuntimeError("boom")
        with self.assertRaises(InternalError) as ctx:
            await contact_service.remove(self.db, 1)
        self.assertEqual(ctx.exception.message, "Failed to delete contact")


if __name__ == "__main__":
    unittest.main()
