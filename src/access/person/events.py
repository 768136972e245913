"""Access events: a person crossing the facility boundary.

The person's name is copied in when the crossing is recorded and is not
corrected later if the directory entry changes.
"""

from enum import Enum

from protean.fields import DateTime, Identifier, String

from access.domain import access


class AccessAction(Enum):
    ENTRY = "entry"
    EXIT = "exit"


@access.event(part_of="AuthorizedPerson")
class AccessEvent:
    __version__ = 1

    event_id = Identifier(required=True)
    company_id = Identifier(required=True)
    person_id = Identifier(required=True)
    person_name = String(max_length=255)
    action = String(required=True, choices=AccessAction)
    timestamp = DateTime(required=True)
