"""Async client for the appointments API.

The only network boundary used by page-rendering code. Base URL and timeout
are given at construction; nothing is probed from the runtime environment.
"""
from __future__ import annotations
import asyncio
import json
import logging
from collections.abc import Mapping
from enum import Enum
from urllib.parse import quote
import httpx
from pydantic import BaseModel, ValidationError
from . import config
from .models import Appointment, AppointmentsListResponse, CreateAppointmentPayload, UpdateStatusPayload
from .status import AppointmentStatus
from .validation import validate_create_payload, validate_page_number, validate_page_size

logger = logging.getLogger(__name__)

CONNECTIVITY_MESSAGE = "Could not connect to the appointments API. Please try again."
_ERROR_TEXT_LIMIT = 200


class ApiError(Exception):
    """A failed call to the appointments API."""

    def __init__(self, message: str, status: int | None):
        super().__init__(message)
        self.message = message
        self.status = status

    @property
    def is_not_found(self) -> bool:
        return self.status == 404

    def __repr__(self) -> str:
        return f"{type(self).__name__}(message={self.message!r}, status={self.status!r})"


class ConnectivityError(ApiError):
    """Request never got a response: refused, unresolvable, or timed out."""

    def __init__(self, message: str = CONNECTIVITY_MESSAGE):
        super().__init__(message, None)


class ClientMode(str, Enum):
    INTERNAL = "internal"  # this service's /api edge routes
    DIRECT = "direct"  # the backend appointments service


def _present(value) -> bool:
    # containers count as present even when empty
    if isinstance(value, (list, dict)):
        return True
    return bool(value)


def error_message(resp: httpx.Response) -> str:
    """Best-effort message from a failed response body."""
    message = f"Error {resp.status_code}"
    try:
        data = resp.json()
    except ValueError:
        text = resp.text
        return text[:_ERROR_TEXT_LIMIT] if text else message

    detail = data.get("message") if isinstance(data, dict) else None
    if _present(detail):
        if isinstance(detail, list):
            return ", ".join(str(part) for part in detail)
        return str(detail)
    if _present(data):
        return data if isinstance(data, str) else json.dumps(data, separators=(",", ":"))
    return message


class AppointmentsClient:
    def __init__(
        self,
        base_url: str | None = None,
        *,
        mode: ClientMode = ClientMode.INTERNAL,
        timeout: float = config.API_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        if base_url is None:
            base_url = config.INTERNAL_API_URL if mode == ClientMode.INTERNAL else config.BACKEND_API_URL
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def _send(self, method: str, url: str, deadline: float, **kwargs) -> httpx.Response:
        async with httpx.AsyncClient(http2=True, timeout=deadline, transport=self._transport) as client:
            return await client.request(method, url, **kwargs)

    async def _request(
        self,
        method: str,
        path: str,
        model: type[BaseModel] | None = None,
        *,
        params: Mapping[str, str] | None = None,
        json_body: dict | None = None,
        timeout: float | None = None,
    ):
        """Send one request and return ``model`` parsed from the body.

        An empty or non-JSON success body gives None. ``timeout`` bounds the
        whole call, not just each read.
        """
        headers = {"Accept": "application/json"}
        if json_body is not None:
            headers["Content-Type"] = "application/json"
        url = f"{self.base_url}{path}"
        deadline = self.timeout if timeout is None else timeout
        try:
            resp = await asyncio.wait_for(
                self._send(method, url, deadline, params=params, json=json_body, headers=headers),
                deadline,
            )
        except (httpx.TransportError, asyncio.TimeoutError) as exc:
            logger.warning("%s %s failed: %r", method, url, exc)
            raise ConnectivityError() from exc

        if resp.is_error:
            message = error_message(resp)
            logger.warning("%s %s -> %s: %s", method, url, resp.status_code, message)
            raise ApiError(message, resp.status_code)

        if not resp.content:
            return None
        try:
            payload = resp.json()
        except ValueError:
            return None
        if model is None:
            return payload
        try:
            return model.model_validate(payload)
        except ValidationError as exc:
            logger.warning("%s %s -> %s: unexpected body: %s", method, url, resp.status_code, exc)
            message = f"Unexpected response from appointments API: {exc.error_count()} invalid field(s)"
            raise ApiError(message, resp.status_code) from exc

    async def get_all(
        self,
        status: AppointmentStatus | str | None = None,
        page: int | None = None,
        page_size: int | None = None,
        *,
        timeout: float | None = None,
    ) -> AppointmentsListResponse | None:
        """List one page of appointments, optionally filtered by status."""
        params: dict[str, str] = {}
        if status:
            params["status"] = (status.value if isinstance(status, AppointmentStatus) else str(status)).strip()
        if page is not None:
            params["page"] = str(validate_page_number(page))
        if page_size is not None:
            params["pageSize"] = str(validate_page_size(page_size))
        return await self._request(
            "GET", "/appointments", AppointmentsListResponse, params=params or None, timeout=timeout
        )

    async def get_by_id(self, appointment_id: str, *, timeout: float | None = None) -> Appointment | None:
        """Fetch one appointment. A missing one raises ApiError with status 404."""
        return await self._request("GET", f"/appointments/{_segment(appointment_id)}", Appointment, timeout=timeout)

    async def create(
        self, payload: CreateAppointmentPayload | Mapping, *, timeout: float | None = None
    ) -> Appointment | None:
        body = validate_create_payload(payload).to_wire()
        return await self._request("POST", "/appointments", Appointment, json_body=body, timeout=timeout)

    async def update_status(
        self, appointment_id: str, status: AppointmentStatus | str, *, timeout: float | None = None
    ) -> Appointment | None:
        body = UpdateStatusPayload(status=status).to_wire()
        return await self._request(
            "PATCH", f"/appointments/{_segment(appointment_id)}/status", Appointment, json_body=body, timeout=timeout
        )

    async def cancel(self, appointment_id: str, *, timeout: float | None = None) -> None:
        """Cancel via DELETE; the backend answers 204 with no body."""
        await self._request("DELETE", f"/appointments/{_segment(appointment_id)}", timeout=timeout)


def _segment(value: str) -> str:
    return quote(str(value), safe="")
