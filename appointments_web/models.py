import math
from pydantic import BaseModel, ConfigDict, Field, model_validator
from .status import AppointmentStatus, ParticipantRequired, ParticipantStatus


class _WireModel(BaseModel):
    """Snake_case attributes, camelCase on the wire."""
    model_config = ConfigDict(populate_by_name=True)

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class Actor(_WireModel):
    reference: str | None = None
    type: str | None = None
    display: str | None = None


class Participant(_WireModel):
    actor: Actor | None = None
    status: ParticipantStatus
    required: ParticipantRequired | None = None


class Meta(_WireModel):
    version_id: str | None = Field(None, alias="versionId")
    last_updated: str | None = Field(None, alias="lastUpdated")  # ISO-8601 dateTime


class CreateAppointmentPayload(_WireModel):
    status: AppointmentStatus
    description: str | None = None
    start: str | None = None  # ISO-8601 dateTime
    end: str | None = None
    minutes_duration: int | None = Field(None, alias="minutesDuration", ge=0)
    comment: str | None = None
    participant: list[Participant] = Field(default_factory=list)


class Appointment(CreateAppointmentPayload):
    id: str
    resource_type: str = Field("Appointment", alias="resourceType")
    meta: Meta | None = None


class UpdateStatusPayload(_WireModel):
    status: AppointmentStatus


class AppointmentsListResponse(_WireModel):
    """One page of appointments as returned by GET /appointments."""
    data: list[Appointment] = Field(default_factory=list)
    page: int = Field(1, ge=1)
    page_size: int = Field(alias="pageSize", ge=1)
    total: int = Field(0, ge=0)
    total_pages: int | None = Field(None, alias="totalPages", ge=0)

    @model_validator(mode="after")
    def _check_envelope(self):
        if self.total == 0 and self.data:
            raise ValueError("data must be empty when total is 0")
        if self.total_pages is None:
            self.total_pages = math.ceil(self.total / self.page_size)
        return self


class ErrorResponse(_WireModel):
    message: str | list[str]
    error: str | None = None
    status_code: int | None = Field(None, alias="statusCode")
