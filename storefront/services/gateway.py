from storefront.config import settings
from storefront.schemas.checkout_schemas import GatewayLaunch, OrderCreated, PaymentSession

VERIFY_URL = "/checkout/payment/verify"
DISMISS_URL = "/checkout/payment/dismiss"


class RazorpayCheckout:
    """
    Opens Razorpay Checkout in the shopper's browser.

    The storefront only holds the public key id. The options returned here are
    passed as-is to `new Razorpay(options).open()`; the browser posts the
    handler payload to `verify_url` and calls `dismiss_url` from `modal.ondismiss`.
    """

    def __init__(
        self,
        key_id: str | None = None,
        store_name: str | None = None,
        currency: str | None = None,
    ):
        self.key_id = key_id if key_id is not None else settings.razorpay_key_id
        self.store_name = store_name or settings.store_name
        self.currency = currency or settings.currency

    def open(self, order: OrderCreated, payment: PaymentSession, user=None) -> GatewayLaunch:
        prefill = {}
        if user is not None:
            prefill = {
                "name": user.display_name,
                "email": user.email,
                "contact": user.phone or "",
            }

        options = {
            "key": self.key_id,
            "amount": payment.amount,
            "currency": payment.currency or self.currency,
            "name": self.store_name,
            "description": f"Order {order.order_number}",
            "order_id": payment.razorpay_order_id,
            "prefill": prefill,
            "notes": {
                "order_id": order.id,
                "order_number": order.order_number,
            },
        }

        return GatewayLaunch(options=options, verify_url=VERIFY_URL, dismiss_url=DISMISS_URL)
