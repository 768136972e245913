"""Access bounded context: who may enter a facility and who is inside now.

Keeps each company's directory of authorized persons and the append-only log
of boundary crossings, from which the on-site presence set is projected.
"""

import structlog
from protean.domain import Domain

access = Domain(name="access")

logger = structlog.get_logger(__name__)
