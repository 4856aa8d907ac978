"""Ordering bounded context — carts, checkout and the order lifecycle.

Owns the Order aggregate and its status state machine. Carts are kept in
the key-value store rather than the domain's database. Reacts to Payments
events to confirm paid orders.
"""

import structlog
from protean.domain import Domain

ordering = Domain(name="ordering")

logger = structlog.get_logger(__name__)
