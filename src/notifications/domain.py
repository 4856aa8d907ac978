"""Notifications bounded context — customer messages and their delivery.

Turns Ordering and Payments events into customer notifications, delivers
them through channel adapters and retries failed deliveries.
"""

import structlog
from protean.domain import Domain

notifications = Domain(name="notifications")

logger = structlog.get_logger(__name__)
