import logging

from pydantic import BaseModel

from storefront.notifications.channels import ToastLevel
from storefront.notifications.events import CheckoutEvent
from storefront.notifications.rules import TOAST_RULES

logger = logging.getLogger(__name__)


class Toast(BaseModel):
    level: ToastLevel
    message: str


def dispatch_checkout_event(event: CheckoutEvent, **context) -> Toast:
    """
    Build the toast the shopper sees for a checkout event.

    Message templates live in `TOAST_RULES`; `context` fills their placeholders.
    """
    level, template = TOAST_RULES.get(event, (ToastLevel.INFO, "Done."))
    toast = Toast(level=level, message=template.format(**context))
    logger.debug(f"Toast for {event.value}: {toast.message}")
    return toast


def error_toast(message: str) -> Toast:
    return Toast(level=ToastLevel.ERROR, message=message)


def popup(toast: Toast) -> dict:
    """Response fragment the browser turns into a toast."""
    return {"toast": toast.model_dump(mode="json")}
