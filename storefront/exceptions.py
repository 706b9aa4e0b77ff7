"""Error taxonomy for the storefront checkout service."""


class StorefrontError(Exception):
    """Base exception for all storefront errors."""

    default_message = "Something went wrong. Please try again."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class CheckoutValidationError(StorefrontError):
    """Raised before any backend call when the shopper's input is incomplete."""

    default_message = "Please check your order details."


class StepTransitionError(StorefrontError):
    """Raised when the checkout wizard is asked to move somewhere it cannot go."""

    def __init__(self, current, action: str):
        self.current = current
        self.action = action
        super().__init__(f"Cannot {action} from the {current.label} step.")


class SubmissionInProgress(StorefrontError):
    """Raised when a second submit arrives while the first is still in flight."""

    default_message = "Your order is already being placed. Please wait."


class NotAuthenticated(StorefrontError):
    default_message = "Please sign in to continue."


class BackendError(StorefrontError):
    """Raised when the marketplace API answers with an error or cannot be reached."""

    default_message = "Something went wrong. Please try again."

    def __init__(
        self,
        message: str | None = None,
        status_code: int | None = None,
        payload=None,
    ):
        self.status_code = status_code
        self.payload = payload
        super().__init__(message)


class OrderCreationError(BackendError):
    default_message = "Failed to place order. Please try again."


class PaymentSessionError(BackendError):
    default_message = (
        "Could not start the online payment. Your order was created; "
        "please check My Orders before trying again."
    )


class PaymentVerificationError(BackendError):
    default_message = (
        "We could not verify your payment. Please check your order status "
        "in My Orders before paying again."
    )


class CartUpdateError(BackendError):
    default_message = "Failed to update cart. Please try again."


ERROR_STATUS_CODES = {
    CheckoutValidationError: 400,
    StepTransitionError: 409,
    SubmissionInProgress: 409,
    NotAuthenticated: 401,
    PaymentVerificationError: 402,
}


def status_code_for(exc: StorefrontError) -> int:
    for error_type in type(exc).__mro__:
        if error_type in ERROR_STATUS_CODES:
            return ERROR_STATUS_CODES[error_type]

    if isinstance(exc, BackendError):
        # Backend client errors are passed through, everything else is a bad gateway
        if exc.status_code and 400 <= exc.status_code < 500:
            return exc.status_code
        return 502

    return 500
