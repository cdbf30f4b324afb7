import pytest
from pydantic import ValidationError
from appointments_web.models import Appointment, AppointmentsListResponse


def test_total_pages_derived_when_missing():
    resp = AppointmentsListResponse.model_validate({"data": [], "page": 1, "pageSize": 12, "total": 25})
    assert resp.total_pages == 3
    assert resp.to_wire()["totalPages"] == 3


def test_empty_total_requires_empty_data():
    appt = {"id": "a1", "status": "booked", "participant": []}
    with pytest.raises(ValidationError):
        AppointmentsListResponse.model_validate({"data": [appt], "page": 1, "pageSize": 12, "total": 0})


def test_page_must_be_positive():
    with pytest.raises(ValidationError):
        AppointmentsListResponse.model_validate({"data": [], "page": 0, "pageSize": 12, "total": 0})


def test_appointment_wire_names():
    appt = Appointment.model_validate({"id": "a1", "status": "pending", "minutesDuration": 20})
    assert appt.resource_type == "Appointment"
    assert appt.participant == []
    assert appt.to_wire() == {
        "id": "a1", "resourceType": "Appointment", "status": "pending", "minutesDuration": 20, "participant": [],
    }
