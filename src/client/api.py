import logging
from typing import Any, Dict, List, Optional

import httpx

from src.conf.config import settings
from src.schemas.contact import ContactResponse

logger = logging.getLogger(__name__)

NETWORK_ERROR_MESSAGE = "Network error. Please check your connection."

STATUS_MESSAGES = {
    400: "Invalid request. Please check your input.",
    404: "Resource not found.",
    500: "Server error. Please try again later.",
}


class ApiError(Exception):
    """
    Error raised by :class:`ContactsApiClient` for any failed request.

    Attributes:
        message (str): Message suitable for display.
        status (int): HTTP status, or 0 when the server was not reached.
        details (Optional[list]): Field violations returned by the server.
    """

    def __init__(self, message: str, status: int = 0, details: Optional[List[Dict[str, str]]] = None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.details = details


def transform_error(error: Exception) -> ApiError:
    """
    Convert an httpx failure into an :class:`ApiError`.

    :param error: The exception raised by httpx.
    :return: The standardized error.
    """
    if isinstance(error, ApiError):
        return error
    if not isinstance(error, httpx.HTTPStatusError):
        return ApiError(str(error) or NETWORK_ERROR_MESSAGE, status=0)

    status = error.response.status_code
    message = None
    details = None
    try:
        data = error.response.json()
    except ValueError:
        data = None
    if isinstance(data, dict):
        message = data.get("message") or data.get("error")
        details = data.get("details")
    if not message:
        message = STATUS_MESSAGES.get(status, f"Request failed with status {status}")
    return ApiError(message, status=status, details=details)


def get_error_message(error: BaseException) -> str:
    if isinstance(error, ApiError):
        return error.message
    if str(error):
        return str(error)
    return "An unexpected error occurred"


class ContactsApiClient:
    """
    Async client for the contacts REST API.

    Use it as an async context manager::

        async with ContactsApiClient() as client:
            contacts = await client.get_all_contacts()
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._client = httpx.AsyncClient(
            base_url=base_url or settings.api_base_url,
            timeout=timeout if timeout is not None else settings.api_timeout,
            headers={"Content-Type": "application/json"},
            transport=transport,
        )

    async def __aenter__(self) -> "ContactsApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._client.request(method, url, **kwargs)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise transform_error(e) from e
        if settings.is_development:
            logger.debug(f"API Response: {response.status_code} {method} {url}")
        return response

    async def get_all_contacts(self) -> List[ContactResponse]:
        response = await self._request("GET", "/api/contacts")
        return [ContactResponse.model_validate(item) for item in response.json()]

    async def get_contact_by_id(self, contact_id: int) -> ContactResponse:
        response = await self._request("GET", f"/api/contacts/{contact_id}")
        return ContactResponse.model_validate(response.json())

    async def create_contact(self, data: Dict[str, Any]) -> ContactResponse:
        response = await self._request("POST", "/api/contacts", json=data)
        return ContactResponse.model_validate(response.json())

    async def update_contact(self, contact_id: int, data: Dict[str, Any]) -> ContactResponse:
        response = await self._request("PUT", f"/api/contacts/{contact_id}", json=data)
        return ContactResponse.model_validate(response.json())

    async def delete_contact(self, contact_id: int) -> None:
        await self._request("DELETE", f"/api/contacts/{contact_id}")
