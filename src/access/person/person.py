"""A person a client company allows into its storage units."""

from datetime import UTC, datetime
from enum import Enum

from protean.fields import DateTime, Identifier, String, Text

from access.domain import access


class DocumentType(Enum):
    CC = "CC"  # Cédula de ciudadanía
    CE = "CE"  # Cédula de extranjería
    PASSPORT = "PA"
    NIT = "NIT"


@access.aggregate
class AuthorizedPerson:
    company_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    document_type = String(max_length=10, choices=DocumentType, default=DocumentType.CC.value)
    document_id = String(required=True, max_length=50)
    phone = String(max_length=50)
    email = String(max_length=255)
    notes = Text()
    authorized_by = String(max_length=255)
    created_at = DateTime()

    @classmethod
    def register(
        cls,
        company_id,
        name,
        document_id,
        document_type=DocumentType.CC.value,
        phone=None,
        email=None,
        notes=None,
        authorized_by=None,
    ):
        return cls(
            company_id=company_id,
            name=name,
            document_type=document_type,
            document_id=document_id,
            phone=phone,
            email=email,
            notes=notes,
            authorized_by=authorized_by,
            created_at=datetime.now(UTC),
        )
