"""Inventory bounded context: client belongings stored in rented units.

Records create/entry/exit/update/delete movements in an append-only ledger
and derives the current inventory table and the movement history from it.
"""

import structlog
from protean.domain import Domain

inventory = Domain(name="inventory")

logger = structlog.get_logger(__name__)
