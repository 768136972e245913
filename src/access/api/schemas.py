"""Pydantic request/response schemas for the Access API."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------
class AddPersonRequest(BaseModel):
    name: str = Field(min_length=1)
    document_type: str = "CC"
    document_id: str = Field(min_length=1)
    phone: str | None = None
    email: str | None = None
    notes: str | None = None
    authorized_by: str | None = None


class RegisterAccessRequest(BaseModel):
    person_id: str
    action: Literal["entry", "exit"]
    person_name: str | None = None  # Taken from the directory when omitted


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class PersonIdResponse(BaseModel):
    person_id: str


class AuthorizedPersonResponse(BaseModel):
    id: str
    company_id: str
    name: str
    document_type: str | None = None
    document_id: str
    phone: str | None = None
    email: str | None = None
    notes: str | None = None
    authorized_by: str | None = None


class PresenceRecordResponse(BaseModel):
    person_id: str
    person_name: str | None = None
    company_id: str
    since: datetime


class AccessRegisteredResponse(BaseModel):
    present: bool
    record: PresenceRecordResponse | None = None


class AccessEventResponse(BaseModel):
    event_id: str
    company_id: str
    person_id: str
    person_name: str | None = None
    action: str
    timestamp: datetime


class StatusResponse(BaseModel):
    status: str = "ok"
