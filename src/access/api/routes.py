"""FastAPI routes for authorized persons and the site access log."""

from fastapi import APIRouter, Depends, Request
from protean.utils.globals import current_domain

from access.api.schemas import (
    AccessEventResponse,
    AccessRegisteredResponse,
    AddPersonRequest,
    AuthorizedPersonResponse,
    PersonIdResponse,
    PresenceRecordResponse,
    RegisterAccessRequest,
    StatusResponse,
)
from access.person.management import (
    AddAuthorizedPerson,
    RemoveAuthorizedPerson,
    authorized_persons,
    get_authorized_person,
)
from access.presence.projector import PresenceProjector
from shared.api_errors import domain_errors

access_router = APIRouter(prefix="/access", tags=["access"])


def get_projector(request: Request) -> PresenceProjector:
    return request.app.state.presence_projector


def _record_response(record) -> PresenceRecordResponse:
    return PresenceRecordResponse(
        person_id=str(record.person_id),
        person_name=record.person_name,
        company_id=str(record.company_id),
        since=record.since,
    )


# ---------------------------------------------------------------------------
# Authorized persons
# ---------------------------------------------------------------------------
@access_router.post("/{company_id}/persons", status_code=201, response_model=PersonIdResponse)
async def add_person(company_id: str, body: AddPersonRequest) -> PersonIdResponse:
    with domain_errors():
        command = AddAuthorizedPerson(
            company_id=company_id,
            name=body.name,
            document_type=body.document_type,
            document_id=body.document_id,
            phone=body.phone,
            email=body.email,
            notes=body.notes,
            authorized_by=body.authorized_by,
        )
        result = current_domain.process(command, asynchronous=False)
    return PersonIdResponse(person_id=result)


@access_router.get("/{company_id}/persons", response_model=list[AuthorizedPersonResponse])
async def list_persons(company_id: str) -> list[AuthorizedPersonResponse]:
    return [
        AuthorizedPersonResponse(
            id=str(person.id),
            company_id=str(person.company_id),
            name=person.name,
            document_type=person.document_type,
            document_id=person.document_id,
            phone=person.phone,
            email=person.email,
            notes=person.notes,
            authorized_by=person.authorized_by,
        )
        for person in authorized_persons(company_id)
    ]


@access_router.delete("/{company_id}/persons/{person_id}", response_model=StatusResponse)
async def remove_person(company_id: str, person_id: str) -> StatusResponse:
    with domain_errors():
        current_domain.process(
            RemoveAuthorizedPerson(company_id=company_id, person_id=person_id),
            asynchronous=False,
        )
    return StatusResponse()


# ---------------------------------------------------------------------------
# Site log
# ---------------------------------------------------------------------------
@access_router.post("/{company_id}/events", status_code=201, response_model=AccessRegisteredResponse)
async def register_access(
    company_id: str, body: RegisterAccessRequest, projector: PresenceProjector = Depends(get_projector)
) -> AccessRegisteredResponse:
    with domain_errors():
        person_name = body.person_name or get_authorized_person(company_id, body.person_id).name
        record = projector.register_event(company_id, body.person_id, person_name, body.action)
        present = projector.is_present(company_id, body.person_id)
    return AccessRegisteredResponse(
        present=present,
        record=_record_response(record) if record is not None else None,
    )


@access_router.get("/{company_id}/present", response_model=list[PresenceRecordResponse])
async def currently_present(
    company_id: str, projector: PresenceProjector = Depends(get_projector)
) -> list[PresenceRecordResponse]:
    with domain_errors():
        records = projector.currently_present(company_id)
    return [_record_response(record) for record in records]


@access_router.get("/{company_id}/history", response_model=list[AccessEventResponse])
async def access_history(
    company_id: str, projector: PresenceProjector = Depends(get_projector)
) -> list[AccessEventResponse]:
    with domain_errors():
        events = projector.history(company_id)
    return [
        AccessEventResponse(
            event_id=str(event.event_id),
            company_id=str(event.company_id),
            person_id=str(event.person_id),
            person_name=event.person_name,
            action=event.action,
            timestamp=event.timestamp,
        )
        for event in events
    ]
