"""Error taxonomy shared by the inventory ledger and the presence projector.

Every failure the core reports is one of these kinds, so callers (the HTTP
layer, the admin portal) can map each to its own message without parsing
text. Validation failures follow Protean's convention of a ``{field: [messages]}``
dictionary.
"""

from protean.exceptions import ObjectNotFoundError, ProteanException, ValidationError


class ItemNotFound(ObjectNotFoundError):
    """No live inventory row exists for the item in the given scope."""

    code = "item_not_found"

    def __init__(self, item_id, owner_scope):
        self.item_id = item_id
        self.owner_scope = owner_scope
        super().__init__({"item_id": [f"Item {item_id} not found in scope {owner_scope}"]})


class DuplicateItem(ValidationError):
    """A ``create`` targeted an item id that already has a live row."""

    code = "duplicate_item"

    def __init__(self, item_id, owner_scope):
        self.item_id = item_id
        self.owner_scope = owner_scope
        super().__init__({"item_id": [f"Item {item_id} already exists in scope {owner_scope}"]})


class InvalidQuantity(ValidationError):
    code = "invalid_quantity"

    def __init__(self, field, value, reason):
        self.field = field
        self.value = value
        super().__init__({field: [reason]})


class InvalidPerson(ValidationError):
    code = "invalid_person"

    def __init__(self, field):
        self.field = field
        super().__init__({field: [f"{field} is required"]})


class StoreUnavailable(ProteanException):
    """The event store could not be read from or appended to.

    Never retried: a repeated append could record the same movement twice.
    """

    code = "store_unavailable"

    def __init__(self, operation, scope, reason=None):
        self.operation = operation
        self.scope = scope
        self.reason = reason
        super().__init__({"store": [f"Event store {operation} failed for scope {scope}: {reason}"]})
