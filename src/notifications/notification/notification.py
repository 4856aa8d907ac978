"""Notification aggregate — tracks a single message through delivery.

A notification is created PENDING when a send is requested. Delivery
claims it by moving it to SENDING; channels without an adapter leave it
PENDING. A failed delivery bumps ``retry_count`` and parks the
notification in RETRYING, where only the periodic sweep picks it up
again, until the retry bound is reached.

State Machine:
    PENDING → SENDING → SENT
    SENDING → RETRYING → SENDING (via sweep)
    SENDING → FAILED (retry_count ≥ max_retries)

SENT and FAILED are terminal.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, Integer, String, Text
from shared.errors import InvalidTransitionError

from notifications.domain import notifications
from notifications.notification.events import NotificationCreated, NotificationFailed, NotificationSent


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class NotificationType(Enum):
    ORDER_CONFIRMATION = "ORDER_CONFIRMATION"
    ORDER_SHIPPED = "ORDER_SHIPPED"
    ORDER_DELIVERED = "ORDER_DELIVERED"
    ORDER_CANCELLED = "ORDER_CANCELLED"
    PAYMENT_SUCCESS = "PAYMENT_SUCCESS"
    PAYMENT_FAILED = "PAYMENT_FAILED"
    PAYMENT_REFUNDED = "PAYMENT_REFUNDED"
    WELCOME = "WELCOME"
    PASSWORD_RESET = "PASSWORD_RESET"
    PROMOTIONAL = "PROMOTIONAL"


class NotificationChannel(Enum):
    EMAIL = "EMAIL"
    SMS = "SMS"
    PUSH = "PUSH"
    IN_APP = "IN_APP"


class NotificationStatus(Enum):
    PENDING = "PENDING"
    SENDING = "SENDING"
    SENT = "SENT"
    RETRYING = "RETRYING"
    FAILED = "FAILED"

    @property
    def is_terminal(self) -> bool:
        return not _VALID_TRANSITIONS[self]


class ReferenceType(Enum):
    ORDER = "ORDER"
    PAYMENT = "PAYMENT"
    USER = "USER"


# ---------------------------------------------------------------------------
# State Machine
# ---------------------------------------------------------------------------
_VALID_TRANSITIONS = {
    NotificationStatus.PENDING: {NotificationStatus.SENDING},
    NotificationStatus.SENDING: {
        NotificationStatus.SENT,
        NotificationStatus.RETRYING,
        NotificationStatus.FAILED,
    },
    NotificationStatus.RETRYING: {NotificationStatus.SENDING},
    NotificationStatus.SENT: set(),  # Terminal
    NotificationStatus.FAILED: set(),  # Terminal
}


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@notifications.aggregate
class Notification:
    """One message to one user over one channel."""

    user_id: Identifier(required=True)
    notification_type: String(choices=NotificationType, required=True)
    channel: String(choices=NotificationChannel, required=True)

    # Resolved through the recipient directory at delivery time when absent
    recipient: String(max_length=255)
    subject: String(max_length=500)
    content: Text(required=True)

    status: String(choices=NotificationStatus, default=NotificationStatus.PENDING.value)
    retry_count: Integer(default=0)
    max_retries: Integer(default=3)
    error_message: String(max_length=1000)

    reference_id: String(max_length=64)
    reference_type: String(choices=ReferenceType)
    source_event_id: String(max_length=200, unique=True)

    created_at: DateTime()
    updated_at: DateTime()
    sent_at: DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        user_id,
        notification_type: NotificationType,
        channel: NotificationChannel,
        subject,
        content,
        recipient=None,
        reference_id=None,
        reference_type: ReferenceType | None = None,
        source_event_id=None,
        max_retries=3,
    ):
        if not user_id:
            raise ValidationError({"user_id": ["User id is required"]})
        if not content:
            raise ValidationError({"content": ["Notification content is required"]})

        now = datetime.now(UTC)
        notification = cls(
            user_id=user_id,
            notification_type=notification_type.value,
            channel=channel.value,
            recipient=recipient,
            subject=subject,
            content=content,
            status=NotificationStatus.PENDING.value,
            retry_count=0,
            max_retries=max_retries,
            reference_id=reference_id,
            reference_type=reference_type.value if reference_type else None,
            source_event_id=source_event_id,
            created_at=now,
            updated_at=now,
        )

        notification.raise_(
            NotificationCreated(
                notification_id=str(notification.id),
                user_id=str(user_id),
                notification_type=notification_type.value,
                channel=channel.value,
                created_at=now,
            )
        )
        return notification

    # -------------------------------------------------------------------
    # Predicates
    # -------------------------------------------------------------------
    @property
    def notification_status(self) -> NotificationStatus:
        return NotificationStatus(self.status)

    @property
    def notification_channel(self) -> NotificationChannel:
        return NotificationChannel(self.channel)

    @property
    def is_retryable(self) -> bool:
        return self.notification_status == NotificationStatus.RETRYING and self.retry_count < self.max_retries

    # -------------------------------------------------------------------
    # State transitions
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status: NotificationStatus) -> None:
        current = self.notification_status
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise InvalidTransitionError(f"Cannot transition from {current.value} to {target_status.value}")

    def _move_to(self, target_status: NotificationStatus) -> datetime:
        self._assert_can_transition(target_status)
        now = datetime.now(UTC)
        self.status = target_status.value
        self.updated_at = now
        return now

    def start_sending(self) -> None:
        self._move_to(NotificationStatus.SENDING)

    def mark_sent(self, recipient: str) -> None:
        now = self._move_to(NotificationStatus.SENT)
        self.recipient = recipient
        self.sent_at = now
        self.error_message = None
        self.raise_(
            NotificationSent(
                notification_id=str(self.id),
                user_id=str(self.user_id),
                channel=self.channel,
                recipient=recipient,
                sent_at=now,
            )
        )

    def record_failure(self, error: str) -> NotificationStatus:
        """Count a failed delivery attempt; returns the resulting status."""
        target = (
            NotificationStatus.FAILED if self.retry_count + 1 >= self.max_retries else NotificationStatus.RETRYING
        )
        now = self._move_to(target)
        self.retry_count += 1
        self.error_message = error[:1000]
        if target == NotificationStatus.FAILED:
            self.raise_(
                NotificationFailed(
                    notification_id=str(self.id),
                    user_id=str(self.user_id),
                    channel=self.channel,
                    retry_count=self.retry_count,
                    reason=self.error_message,
                    failed_at=now,
                )
            )
        return target
