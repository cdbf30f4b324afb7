"""Appointment status policy.

Pure data: the closed set of statuses, their labels, the transition table the
UI offers, and which statuses may be cancelled. Nothing here executes a
transition; the backend remains the authority and may reject a move this
table allows.
"""
from __future__ import annotations
from enum import Enum


class AppointmentStatus(str, Enum):
    PROPOSED = "proposed"
    PENDING = "pending"
    BOOKED = "booked"
    ARRIVED = "arrived"
    CHECKED_IN = "checked-in"
    FULFILLED = "fulfilled"
    CANCELLED = "cancelled"
    NOSHOW = "noshow"
    ENTERED_IN_ERROR = "entered-in-error"
    WAITLIST = "waitlist"


class ParticipantStatus(str, Enum):
    ACCEPTED = "accepted"
    DECLINED = "declined"
    TENTATIVE = "tentative"
    NEEDS_ACTION = "needs-action"


class ParticipantRequired(str, Enum):
    REQUIRED = "required"
    OPTIONAL = "optional"
    INFORMATION_ONLY = "information-only"


_S = AppointmentStatus

STATUS_LABELS: dict[AppointmentStatus, str] = {
    _S.PROPOSED: "Proposed",
    _S.PENDING: "Pending",
    _S.BOOKED: "Booked",
    _S.ARRIVED: "Arrived",
    _S.CHECKED_IN: "Checked in",
    _S.FULFILLED: "Fulfilled",
    _S.CANCELLED: "Cancelled",
    _S.NOSHOW: "No show",
    _S.ENTERED_IN_ERROR: "Entered in error",
    _S.WAITLIST: "Waitlist",
}

STATUS_TRANSITIONS: dict[AppointmentStatus, frozenset[AppointmentStatus]] = {
    _S.PROPOSED: frozenset({_S.PENDING, _S.CANCELLED, _S.ENTERED_IN_ERROR}),
    _S.PENDING: frozenset({_S.BOOKED, _S.CANCELLED, _S.ENTERED_IN_ERROR}),
    _S.BOOKED: frozenset({_S.ARRIVED, _S.CHECKED_IN, _S.CANCELLED, _S.NOSHOW, _S.ENTERED_IN_ERROR}),
    _S.ARRIVED: frozenset({_S.FULFILLED, _S.CANCELLED, _S.NOSHOW, _S.ENTERED_IN_ERROR}),
    _S.CHECKED_IN: frozenset({_S.FULFILLED, _S.CANCELLED, _S.NOSHOW, _S.ENTERED_IN_ERROR}),
    _S.WAITLIST: frozenset({_S.PENDING, _S.CANCELLED, _S.ENTERED_IN_ERROR}),
    _S.FULFILLED: frozenset(),
    _S.CANCELLED: frozenset(),
    _S.NOSHOW: frozenset(),
    _S.ENTERED_IN_ERROR: frozenset(),
}

TERMINAL_STATUSES = frozenset({_S.FULFILLED, _S.CANCELLED, _S.NOSHOW, _S.ENTERED_IN_ERROR})

# Not derived from the transition table: arrived can move to cancelled but is
# not offered a cancel action.
CANCELLABLE_STATUSES = frozenset({_S.PROPOSED, _S.PENDING, _S.BOOKED, _S.WAITLIST, _S.CHECKED_IN})

_missing = [s for s in AppointmentStatus if s not in STATUS_TRANSITIONS or s not in STATUS_LABELS]
if _missing:
    raise RuntimeError(f"status tables incomplete for: {', '.join(s.value for s in _missing)}")
del _missing


def label_of(status: AppointmentStatus | str) -> str:
    """Human readable label for a status."""
    return STATUS_LABELS[AppointmentStatus(status)]


def transitions_from(status: AppointmentStatus | str) -> frozenset[AppointmentStatus]:
    """Statuses the UI may offer as the next step from ``status``."""
    return STATUS_TRANSITIONS[AppointmentStatus(status)]


def can_transition(current: AppointmentStatus | str, target: AppointmentStatus | str) -> bool:
    return AppointmentStatus(target) in transitions_from(current)


def is_terminal(status: AppointmentStatus | str) -> bool:
    return AppointmentStatus(status) in TERMINAL_STATUSES


def is_cancellable(status: AppointmentStatus | str) -> bool:
    return AppointmentStatus(status) in CANCELLABLE_STATUSES


def status_options() -> list[tuple[str, str]]:
    """(value, label) pairs in declaration order, for select inputs."""
    return [(s.value, STATUS_LABELS[s]) for s in AppointmentStatus]
