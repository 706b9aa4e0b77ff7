from enum import Enum, IntEnum


class Step(IntEnum):
    CART = 1
    ADDRESS = 2
    PAYMENT = 3

    @property
    def label(self):
        return self.name.capitalize()


STEP_DESCRIPTIONS = {
    Step.CART: "Review items",
    Step.ADDRESS: "Shipping details",
    Step.PAYMENT: "Complete order",
}


class PaymentMethod(str, Enum):
    COD = "cod"
    RAZORPAY = "razorpay"


class PaymentOutcomeStatus(str, Enum):
    COMPLETED = "completed"
    AWAITING_GATEWAY = "awaiting_gateway"
    INDETERMINATE = "indeterminate"


# Local storage keys shared with the browser
SHIPPING_ADDRESS_KEY = "selectedShippingAddress"
SHIPPING_PHONE_KEY = "selectedShippingPhoneNumber"
