"""Pre-flight validation for appointment data.

These checks run before anything reaches the network. Helpers that coerce
(page number, page size) never raise; predicates fail closed and return False
on input they cannot parse.
"""
from __future__ import annotations
import math
import re
from collections.abc import Mapping
from datetime import datetime, timezone
from pydantic import ValidationError
from .models import CreateAppointmentPayload
from .status import AppointmentStatus

PAGE_DEFAULT = 1
MIN_PAGE_SIZE = 1
MAX_PAGE_SIZE = 100

MAX_DESCRIPTION_LENGTH = 500
MAX_COMMENT_LENGTH = 1000
MIN_DURATION_MINUTES = 1
MAX_DURATION_MINUTES = 480  # 8 hours

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
_LEADING_FLOAT = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


class AppointmentValidationError(ValueError):
    """Raised when a payload fails local checks; never sent to the backend."""


def is_valid_status(value) -> bool:
    try:
        AppointmentStatus(value)
    except ValueError:
        return False
    return True


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an ISO-8601 timestamp, accepting a trailing ``Z``. None on failure."""
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def is_valid_date(value: str | None) -> bool:
    return parse_timestamp(value) is not None


def is_future_date(value: str | None, now: datetime | None = None) -> bool:
    parsed = parse_timestamp(value)
    if parsed is None:
        return False
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed > (now or datetime.now(timezone.utc))


def is_valid_date_range(start: str | None, end: str | None) -> bool:
    """True iff both parse and ``end`` is strictly later than ``start``."""
    start_dt, end_dt = parse_timestamp(start), parse_timestamp(end)
    if start_dt is None or end_dt is None:
        return False
    try:
        return end_dt > start_dt
    except TypeError:
        # one side naive, the other aware
        return False


def _leading_int(value) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return math.floor(value) if math.isfinite(value) else None
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        return int(match.group(1)) if match else None
    return None


def validate_page_number(value) -> int:
    """Positive page number, 1 for anything absent or invalid."""
    page = _leading_int(value)
    return page if page is not None and page > 0 else PAGE_DEFAULT


def validate_page_size(value, min_size: int = MIN_PAGE_SIZE, max_size: int = MAX_PAGE_SIZE) -> int:
    """Clamp to ``[min_size, max_size]``; ``min_size`` when unparsable."""
    size = _leading_int(value)
    if size is None:
        return min_size
    return max(min_size, min(max_size, size))


def parse_optional_number(value) -> float | None:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return None if math.isnan(value) else float(value)
    if isinstance(value, str):
        match = _LEADING_FLOAT.match(value)
        return float(match.group(1)) if match else None
    return None


def is_valid_duration(value) -> bool:
    """Duration is optional; when present it must be a positive number."""
    if value is None:
        return True
    number = parse_optional_number(value)
    return number is not None and number > 0


def sanitize_string(value: str | None) -> str | None:
    if not value:
        return None
    trimmed = value.strip()
    return trimmed or None


def validate_create_payload(payload: CreateAppointmentPayload | Mapping) -> CreateAppointmentPayload:
    """Check a create payload before it is POSTed.

    Accepts a model or a plain mapping using either wire or attribute names.
    Free-text fields come back trimmed.
    """
    if not isinstance(payload, CreateAppointmentPayload):
        try:
            payload = CreateAppointmentPayload.model_validate(dict(payload))
        except ValidationError as exc:
            raise AppointmentValidationError(str(exc)) from exc

    errors: list[str] = []
    for field in ("start", "end"):
        raw = getattr(payload, field)
        if raw is not None and not is_valid_date(raw):
            errors.append(f"{field} is not a valid date")
    if payload.start and payload.end and is_valid_date(payload.start) and is_valid_date(payload.end):
        if not is_valid_date_range(payload.start, payload.end):
            errors.append("end must be later than start")

    duration = payload.minutes_duration
    if not is_valid_duration(duration):
        errors.append("minutesDuration must be a positive number")
    elif duration is not None and not MIN_DURATION_MINUTES <= duration <= MAX_DURATION_MINUTES:
        errors.append(
            f"minutesDuration must be between {MIN_DURATION_MINUTES} and {MAX_DURATION_MINUTES}"
        )

    description = sanitize_string(payload.description)
    comment = sanitize_string(payload.comment)
    if description and len(description) > MAX_DESCRIPTION_LENGTH:
        errors.append(f"description must be at most {MAX_DESCRIPTION_LENGTH} characters")
    if comment and len(comment) > MAX_COMMENT_LENGTH:
        errors.append(f"comment must be at most {MAX_COMMENT_LENGTH} characters")
    if not payload.participant:
        errors.append("at least one participant is required")

    if errors:
        raise AppointmentValidationError(", ".join(errors))
    return payload.model_copy(update={"description": description, "comment": comment})
