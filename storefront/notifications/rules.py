from storefront.notifications.events import CheckoutEvent
from storefront.notifications.channels import ToastLevel


TOAST_RULES = {
    CheckoutEvent.CART_CONFIRMED: (ToastLevel.INFO, "Cart confirmed. Add your shipping details."),
    CheckoutEvent.ADDRESS_CONFIRMED: (ToastLevel.SUCCESS, "Shipping address saved."),
    CheckoutEvent.QUANTITY_UPDATED: (ToastLevel.SUCCESS, "Cart item quantity updated."),
    CheckoutEvent.ITEM_REMOVED: (ToastLevel.SUCCESS, "Product removed from cart."),
    CheckoutEvent.CART_CLEARED: (ToastLevel.SUCCESS, "Cart cleared successfully!"),
    CheckoutEvent.ORDER_PLACED: (
        ToastLevel.SUCCESS,
        "Order {order_number} placed successfully! Pay cash on delivery.",
    ),
    CheckoutEvent.PAYMENT_STARTED: (
        ToastLevel.INFO,
        "Order {order_number} created. Complete the payment to confirm it.",
    ),
    CheckoutEvent.PAYMENT_SUCCESS: (
        ToastLevel.SUCCESS,
        "Payment received. Order {order_number} is confirmed!",
    ),
    CheckoutEvent.PAYMENT_DISMISSED: (
        ToastLevel.WARNING,
        "Payment was not completed for order {order_number}. "
        "Please check My Orders for its current status.",
    ),
    CheckoutEvent.SIGNED_OUT: (ToastLevel.INFO, "You have been signed out."),
}
