"""Payments bounded context — payment initiation, verification and refunds.

Owns the Payment aggregate and the gateway abstraction. Starts a payment
for every new order and tells the other contexts how it ended.
"""

import structlog
from protean.domain import Domain

payments = Domain(name="payments")

logger = structlog.get_logger(__name__)
