"""
Fire-and-forget notification bridge.

Lifecycle services emit events here; delivery happens after the surrounding
transaction commits and a delivery failure is logged, never propagated.
The concrete notifier is chosen with the MARKETPLACE_NOTIFIER setting.
"""
import logging
from typing import Any, Dict

from django.conf import settings
from django.db import models, transaction
from django.utils.module_loading import import_string

logger = logging.getLogger(__name__)


class TargetKind(models.TextChoices):
    USER = 'user', 'Single user'
    ROLE = 'role', 'Every user with a role'
    BROADCAST = 'broadcast', 'Everyone'


class NotificationEvent:
    """Event names emitted by the lifecycle services"""
    REQUEST_CREATED = 'new_request'
    OFFER_CREATED = 'new_offer'
    ORDER_CREATED = 'new_order'
    ORDER_UPDATED = 'order_update'


class Notifier:
    """Interface for push delivery backends (websocket gateway, queue, ...)"""

    def notify(self, target_kind: str, target: Any, event_name: str, payload: Dict[str, Any]) -> None:
        raise NotImplementedError


class LoggingNotifier(Notifier):
    """Default backend: records the event in the application log"""

    def notify(self, target_kind, target, event_name, payload):
        logger.info("notify %s:%s event=%s payload=%s", target_kind, target, event_name, payload)


def get_notifier() -> Notifier:
    return import_string(settings.MARKETPLACE_NOTIFIER)()


def deliver(target_kind, target, event_name, payload):
    """Deliver one event immediately, swallowing and logging any failure."""
    try:
        get_notifier().notify(target_kind, target, event_name, payload)
    except Exception:
        logger.exception("Notification %s to %s:%s failed", event_name, target_kind, target)


def notify(target_kind, target, event_name, payload=None):
    """
    Schedule an event for delivery once the current transaction commits.

    Outside a transaction the event is delivered right away. A rolled back
    transition never notifies anyone.
    """
    payload = payload or {}
    transaction.on_commit(lambda: deliver(target_kind, target, event_name, payload))


def notify_user(user_id, event_name, payload=None):
    notify(TargetKind.USER, user_id, event_name, payload)


def notify_role(role, event_name, payload=None):
    notify(TargetKind.ROLE, role, event_name, payload)
