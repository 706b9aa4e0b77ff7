from .events import CheckoutEvent
from .dispatcher import Toast, dispatch_checkout_event, error_toast, popup

__all__ = [
    "CheckoutEvent",
    "Toast",
    "dispatch_checkout_event",
    "error_toast",
    "popup",
]
