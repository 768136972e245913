"""One distinct article held in one storage unit.

Rows of the current inventory table are InventoryItem instances, built and
mutated only by folding inventory events. Quantity never drops below zero:
withdrawing more than is on hand empties the row instead of failing.
"""

from protean.fields import DateTime, Identifier, Integer, String, Text

from inventory.domain import inventory

UNCATEGORIZED = "Sin Categoría"


@inventory.aggregate
class InventoryItem:
    """Current state of an article, derived from its events."""

    owner_scope = Identifier(required=True)
    storage_unit_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    category = String(max_length=100)
    description = Text()
    quantity = Integer(default=0, min_value=0)
    last_updated = DateTime()

    @classmethod
    def from_creation(cls, event):
        return cls(
            id=event.item_id,
            owner_scope=event.owner_scope,
            storage_unit_id=event.storage_unit_id,
            name=event.name,
            category=event.category,
            description=event.description,
            quantity=event.quantity,
            last_updated=event.timestamp,
        )

    @property
    def display_category(self):
        return self.category or UNCATEGORIZED

    def receive(self, delta, at):
        self.quantity = self.quantity + delta
        self.last_updated = at

    def withdraw(self, delta, at):
        """Take units out, clamping at zero."""
        self.quantity = max(0, self.quantity - delta)
        self.last_updated = at

    def revise(self, at, name=None, category=None, description=None):
        """Change descriptive fields. Fields passed as None keep their value."""
        if name is not None:
            self.name = name
        if category is not None:
            self.category = category
        if description is not None:
            self.description = description
        self.last_updated = at

    def snapshot(self):
        """A detached copy, safe to hand to readers."""
        return InventoryItem(
            id=str(self.id),
            owner_scope=self.owner_scope,
            storage_unit_id=self.storage_unit_id,
            name=self.name,
            category=self.category,
            description=self.description,
            quantity=self.quantity,
            last_updated=self.last_updated,
        )
