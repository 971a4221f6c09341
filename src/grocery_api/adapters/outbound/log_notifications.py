from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Deque, Dict, Optional

from returns.result import Failure, Result, Success

from grocery_api.core.domain.model.errors import OrderError, PublishError
from grocery_api.core.domain.model.order import OrderStatus, now_utc
from grocery_api.core.ports.outbound.events import (
    EventPublisher,
    OrderEvent,
    OrderPlaced,
    OrderStatusChanged,
)

logger = logging.getLogger(__name__)

SENT_HISTORY = 500


@dataclass(frozen=True)
class NotificationTemplate:
    kind: str  # order_confirmation | status_update
    title: str
    body: str
    sms_body: str
    email_subject: str

    def render(self, business: str) -> "NotificationTemplate":
        return NotificationTemplate(
            kind=self.kind,
            title=self.title.format(business=business),
            body=self.body.format(business=business),
            sms_body=self.sms_body.format(business=business),
            email_subject=self.email_subject.format(business=business),
        )


TEMPLATES: Dict[str, NotificationTemplate] = {
    "order_confirmation": NotificationTemplate(
        kind="order_confirmation",
        title="Order Received!",
        body="Your order has been received and is awaiting confirmation.",
        sms_body="Your {business} order has been received. We will notify you when it's confirmed.",
        email_subject="Order Received - {business}",
    ),
    "order_confirmed": NotificationTemplate(
        kind="status_update",
        title="Order Confirmed!",
        body="Your order has been confirmed.",
        sms_body="Your {business} order has been confirmed.",
        email_subject="Order Confirmation - {business}",
    ),
    "order_preparing": NotificationTemplate(
        kind="status_update",
        title="Order Being Prepared",
        body="Your order is now being prepared for delivery.",
        sms_body="Your {business} order is being prepared. Estimated delivery time will be updated soon.",
        email_subject="Order Update - Being Prepared",
    ),
    "order_out_for_delivery": NotificationTemplate(
        kind="status_update",
        title="Out for Delivery",
        body="Your order is on the way to your delivery address.",
        sms_body="Your {business} order is out for delivery. Please be available to receive it.",
        email_subject="Order Update - Out for Delivery",
    ),
    "order_delivered": NotificationTemplate(
        kind="status_update",
        title="Order Delivered",
        body="Your order has been successfully delivered. Thank you!",
        sms_body="Your {business} order has been delivered. Thank you for your business!",
        email_subject="Order Delivered - Thank You!",
    ),
    "order_cancelled": NotificationTemplate(
        kind="status_update",
        title="Order Cancelled",
        body="Your order has been cancelled.",
        sms_body="Your {business} order has been cancelled. Contact us if this is unexpected.",
        email_subject="Order Cancelled - {business}",
    ),
}


@dataclass(frozen=True)
class SentNotification:
    order_id: str
    customer_id: Optional[str]
    template: str
    title: str
    message: str
    sent_at: datetime


def template_key(event: OrderEvent) -> Optional[str]:
    if isinstance(event, OrderPlaced):
        return "order_confirmation"
    if isinstance(event, OrderStatusChanged) and event.current is not OrderStatus.PENDING:
        return f"order_{event.current.value}"
    return None


@dataclass
class LoggingNotificationPublisher(EventPublisher):
    """Renders customer notifications and logs them; push/SMS/email are not sent.

    ``sent`` keeps only the most recent SENT_HISTORY notifications.
    """

    business_name: str = "Fresh Market"
    fail: bool = False
    sent: Deque[SentNotification] = field(
        default_factory=lambda: deque(maxlen=SENT_HISTORY)
    )

    def publish(self, event: OrderEvent) -> Result[None, OrderError]:
        if self.fail:
            return Failure(PublishError(message="notifier is down"))

        key = template_key(event)
        if key is None:
            logger.debug("no notification for event: %s", event)
            return Success(None)

        template = TEMPLATES[key].render(self.business_name)
        note = SentNotification(
            order_id=str(event.order_id),
            customer_id=event.customer_id,
            template=key,
            title=template.title,
            message=template.body,
            sent_at=now_utc(),
        )
        self.sent.append(note)
        logger.info(
            "[notify] %s order=%s customer=%s push=%r sms=%r email=%r",
            key,
            note.order_id,
            note.customer_id or "-",
            template.title,
            template.sms_body,
            template.email_subject,
        )
        return Success(None)
