"""Commands and lookups for the authorized person directory."""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from access.domain import access, logger
from access.person.person import AuthorizedPerson


@access.command(part_of="AuthorizedPerson")
class AddAuthorizedPerson:
    """Authorize a person to enter the company's storage units."""

    company_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    document_type = String(max_length=10)
    document_id = String(required=True, max_length=50)
    phone = String(max_length=50)
    email = String(max_length=255)
    notes = Text()
    authorized_by = String(max_length=255)


@access.command(part_of="AuthorizedPerson")
class RemoveAuthorizedPerson:
    """Withdraw a person's authorization."""

    company_id = Identifier(required=True)
    person_id = Identifier(required=True)


@access.command_handler(part_of=AuthorizedPerson)
class AuthorizedPersonManagementHandler:
    @handle(AddAuthorizedPerson)
    def add_person(self, command):
        person = AuthorizedPerson.register(
            company_id=command.company_id,
            name=command.name,
            document_id=command.document_id,
            document_type=command.document_type or "CC",
            phone=command.phone,
            email=command.email,
            notes=command.notes,
            authorized_by=command.authorized_by,
        )
        current_domain.repository_for(AuthorizedPerson).add(person)
        logger.info("Authorized person added", company_id=str(command.company_id), person_id=str(person.id))
        return str(person.id)

    @handle(RemoveAuthorizedPerson)
    def remove_person(self, command):
        person = get_authorized_person(command.company_id, command.person_id)
        current_domain.repository_for(AuthorizedPerson)._dao.delete(person)
        logger.info("Authorized person removed", company_id=str(command.company_id), person_id=str(person.id))


def authorized_persons(company_id) -> list[AuthorizedPerson]:
    repo = current_domain.repository_for(AuthorizedPerson)
    persons = repo._dao.query.filter(company_id=str(company_id)).all().items
    return sorted(persons, key=lambda person: person.name)


def get_authorized_person(company_id, person_id) -> AuthorizedPerson:
    """Fetch a person of the given company; other companies' persons are invisible."""
    person = current_domain.repository_for(AuthorizedPerson).get(str(person_id))
    if str(person.company_id) != str(company_id):
        raise ObjectNotFoundError({"person_id": [f"Person {person_id} not found for company {company_id}"]})
    return person
