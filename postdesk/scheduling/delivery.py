"""
Reminder delivery channels.

A delivery raises on failure; the executor turns that into a FAILED result
and the next sweep tries again.
"""
import hashlib
import hmac
import json
from typing import Dict, List, Optional

import requests

from ..logging_config import reminder_logger
from .models import Reminder, ReminderType, utcnow


class ReminderDelivery:
    """Base class for a reminder channel"""

    def deliver(self, reminder: Reminder) -> None:
        raise NotImplementedError


def reminder_payload(reminder: Reminder) -> dict:
    return {
        "event": "reminder.due",
        "reminder_id": reminder.id,
        "schedule_id": reminder.schedule_id,
        "type": reminder.type.value,
        "offset": reminder.offset.value,
        "trigger_at": reminder.trigger_at.isoformat(),
        "timestamp": utcnow().isoformat(),
    }


def sign_payload(payload: dict, secret: str) -> str:
    """Generate HMAC-SHA256 signature for a notification payload"""
    payload_bytes = json.dumps(payload, sort_keys=True).encode("utf-8")
    signature = hmac.new(secret.encode("utf-8"), payload_bytes, hashlib.sha256).hexdigest()
    return f"sha256={signature}"


class InAppDelivery(ReminderDelivery):
    """Keeps delivered reminders in an in-memory inbox"""

    def __init__(self):
        self.inbox: List[dict] = []

    def deliver(self, reminder: Reminder) -> None:
        payload = reminder_payload(reminder)
        self.inbox.append(payload)
        reminder_logger.info("In-app reminder delivered", reminder_id=reminder.id, schedule_id=reminder.schedule_id)


class WebhookDelivery(ReminderDelivery):
    """Hands reminders to an e-mail relay over a signed webhook"""

    def __init__(self, url: str, secret: Optional[str] = None, timeout: int = 10):
        self.url = url
        self.secret = secret
        self.timeout = timeout

    def deliver(self, reminder: Reminder) -> None:
        payload = reminder_payload(reminder)
        headers = {
            "Content-Type": "application/json",
            "X-PostDesk-Event": payload["event"],
        }
        if self.secret:
            headers["X-PostDesk-Signature"] = sign_payload(payload, self.secret)

        response = requests.post(self.url, json=payload, headers=headers, timeout=self.timeout)
        if not 200 <= response.status_code < 300:
            raise RuntimeError(f"Notification webhook returned {response.status_code}")

        reminder_logger.info(
            "Reminder handed to webhook",
            reminder_id=reminder.id,
            status_code=response.status_code,
        )


class RoutingDelivery(ReminderDelivery):
    """Picks a channel by reminder type"""

    def __init__(self, channels: Dict[ReminderType, ReminderDelivery]):
        self.channels = channels

    def deliver(self, reminder: Reminder) -> None:
        channel = self.channels.get(reminder.type)
        if channel is None:
            raise ValueError(f"Unsupported reminder type: {reminder.type.value}")
        channel.deliver(reminder)


def build_delivery(settings) -> RoutingDelivery:
    """E-mail goes through the webhook when one is configured, else in-app."""
    in_app = InAppDelivery()
    email: ReminderDelivery = in_app
    if settings.notification_webhook_url:
        email = WebhookDelivery(
            settings.notification_webhook_url,
            secret=settings.notification_webhook_secret,
        )
    return RoutingDelivery({
        ReminderType.EMAIL: email,
        ReminderType.IN_APP: in_app,
    })
