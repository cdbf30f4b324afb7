"""Edge routes: forward /api/appointments calls to the backend unchanged.

No business validation happens here. Backend status codes and error bodies
are relayed as-is; only a failure of the forwarding itself becomes a 500.
"""
import logging
from contextlib import asynccontextmanager
from typing import Any
from urllib.parse import quote
import httpx
from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse
from . import config
from .models import ErrorResponse

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    config.configure_logging()
    yield


app = FastAPI(title="Appointments Web", lifespan=lifespan)

_INTERNAL_ERROR = ErrorResponse(message="Internal server error").to_wire()


async def _forward(method: str, path: str, *, params: str = "", body: Any = None) -> httpx.Response:
    url = f"{config.BACKEND_API_URL}{path}"
    if params:
        url = f"{url}?{params}"
    headers = {"Accept": "application/json"}
    kwargs: dict[str, Any] = {}
    if body is not None:
        kwargs["json"] = body
    async with httpx.AsyncClient(http2=True, timeout=config.API_TIMEOUT_SECONDS) as client:
        return await client.request(method, url, headers=headers, **kwargs)


def _relay_error(resp: httpx.Response, fallback: str) -> JSONResponse:
    """Backend JSON error body with its status, or ``{message: fallback}``."""
    try:
        content = resp.json()
    except ValueError:
        content = {"message": fallback}
    return JSONResponse(content, status_code=resp.status_code)


def _internal_error(route: str) -> JSONResponse:
    logger.exception("Error in %s", route)
    return JSONResponse(_INTERNAL_ERROR, status_code=500)


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.get("/api/appointments")
async def list_appointments(request: Request):
    """Pass the query string through untouched; the backend paginates."""
    try:
        resp = await _forward("GET", "/appointments", params=request.url.query)
        if resp.is_error:
            return JSONResponse(
                {"message": resp.text or "Error fetching appointments"}, status_code=resp.status_code
            )
        return JSONResponse(resp.json())
    except Exception:
        return _internal_error("GET /api/appointments")


@app.post("/api/appointments")
async def create_appointment(request: Request):
    try:
        body = await request.json()
        resp = await _forward("POST", "/appointments", body=body)
        if resp.is_error:
            return _relay_error(resp, "Error creating appointment")
        return JSONResponse(resp.json(), status_code=201)
    except Exception:
        return _internal_error("POST /api/appointments")


@app.get("/api/appointments/{appointment_id}")
async def get_appointment(appointment_id: str):
    try:
        resp = await _forward("GET", f"/appointments/{quote(appointment_id, safe='')}")
        if resp.is_error:
            return _relay_error(resp, "Appointment not found")
        return JSONResponse(resp.json())
    except Exception:
        return _internal_error("GET /api/appointments/{id}")


@app.delete("/api/appointments/{appointment_id}")
async def delete_appointment(appointment_id: str):
    try:
        resp = await _forward("DELETE", f"/appointments/{quote(appointment_id, safe='')}")
        if resp.is_error:
            return _relay_error(resp, "Error deleting appointment")
        return Response(status_code=204)
    except Exception:
        return _internal_error("DELETE /api/appointments/{id}")


@app.patch("/api/appointments/{appointment_id}/status")
async def update_appointment_status(appointment_id: str, request: Request):
    try:
        body = await request.json()
        resp = await _forward("PATCH", f"/appointments/{quote(appointment_id, safe='')}/status", body=body)
        if resp.is_error:
            return _relay_error(resp, "Error updating status")
        return JSONResponse(resp.json())
    except Exception:
        return _internal_error("PATCH /api/appointments/{id}/status")
