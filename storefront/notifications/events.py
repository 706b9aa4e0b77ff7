from enum import Enum


class CheckoutEvent(str, Enum):
    CART_CONFIRMED = "cart_confirmed"
    ADDRESS_CONFIRMED = "address_confirmed"
    QUANTITY_UPDATED = "quantity_updated"
    ITEM_REMOVED = "item_removed"
    CART_CLEARED = "cart_cleared"
    ORDER_PLACED = "order_placed"
    PAYMENT_STARTED = "payment_started"
    PAYMENT_SUCCESS = "payment_success"
    PAYMENT_DISMISSED = "payment_dismissed"
    SIGNED_OUT = "signed_out"
