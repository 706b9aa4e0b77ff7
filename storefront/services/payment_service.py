import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Optional

from storefront.constants.checkout import (
    PaymentMethod,
    PaymentOutcomeStatus,
    Step,
)
from storefront.exceptions import (
    BackendError,
    CheckoutValidationError,
    NotAuthenticated,
    OrderCreationError,
    PaymentSessionError,
    PaymentVerificationError,
    StepTransitionError,
    SubmissionInProgress,
)
from storefront.notifications import CheckoutEvent, dispatch_checkout_event
from storefront.schemas.checkout_schemas import (
    GatewayCallback,
    OrderCreated,
    PaymentOutcome,
    PaymentSession,
)
from storefront.utils.errors import extract_error_message

logger = logging.getLogger(__name__)

MY_ORDERS_URL = "/account/orders"


class SubmitGuard:
    """The disabled submit button: one order submission per shopper at a time."""

    def __init__(self):
        self._lock = threading.Lock()

    @property
    def in_flight(self):
        return self._lock.locked()

    @contextmanager
    def hold(self):
        if not self._lock.acquire(blocking=False):
            raise SubmissionInProgress()
        try:
            yield
        finally:
            self._lock.release()


@dataclass(frozen=True)
class PendingPayment:
    order: OrderCreated
    session: PaymentSession


class PaymentResolver:
    """
    Drives the backend calls behind "Place Order".

    COD:      create order -> done.
    Razorpay: create order -> create payment session -> open gateway,
              then later verify (handler) or dismiss (modal closed).

    Nothing here is retried; every failure surfaces to the shopper and the
    submit guard is released so they can try again by hand.
    """

    def __init__(self, client, gateway, flow):
        self.client = client
        self.gateway = gateway
        self.flow = flow

    # -------------------------
    # place order
    # -------------------------

    def place_order(self, method, user) -> PaymentOutcome:
        with self.flow.guard.hold():
            method = self._check_preconditions(method, user)

            order = self._create_order()

            if method == PaymentMethod.COD:
                return self._confirm_cod(order)
            return self._start_gateway(order, user)

    def _check_preconditions(self, method, user) -> PaymentMethod:
        if user is None:
            raise NotAuthenticated()

        try:
            method = PaymentMethod(method)
        except ValueError:
            raise CheckoutValidationError(f"Unsupported payment method: {method}")

        cart = self.flow.cart
        if cart.is_empty:
            raise CheckoutValidationError("Your cart is empty.")
        if cart.subtotal <= Decimal("0"):
            raise CheckoutValidationError("Your cart total must be greater than zero.")

        steps = self.flow.steps
        if not steps.shipping_address or not steps.phone_number:
            raise CheckoutValidationError("Please confirm your shipping address and phone number.")
        if steps.finished or steps.current_step != Step.PAYMENT:
            raise StepTransitionError(steps.current_step, "place the order")

        if self.flow.pending is not None:
            raise CheckoutValidationError(
                f"Finish or close the open payment for order "
                f"{self.flow.pending.order.order_number} first."
            )

        return method

    def _create_order(self) -> OrderCreated:
        steps = self.flow.steps
        try:
            order = self.client.create_order_from_cart(
                shipping_address=steps.shipping_address,
                phone_number=steps.phone_number,
            )
        except BackendError as e:
            logger.error(f"Order creation failed: {e.message}")
            raise OrderCreationError(
                extract_error_message(e.payload),
                status_code=e.status_code,
                payload=e.payload,
            ) from e

        logger.info(f"Order {order.order_number} (id {order.id}) created")
        return order

    def _confirm_cod(self, order: OrderCreated) -> PaymentOutcome:
        self.flow.steps.complete()
        toast = dispatch_checkout_event(CheckoutEvent.ORDER_PLACED, order_number=order.order_number)
        return PaymentOutcome(
            status=PaymentOutcomeStatus.COMPLETED,
            order=order,
            message=toast.message,
            redirect_to=MY_ORDERS_URL,
        )

    def _start_gateway(self, order: OrderCreated, user) -> PaymentOutcome:
        try:
            session = self.client.create_razorpay_order(order.id)
        except BackendError as e:
            # the order stays created but unpaid, the backend reconciles it
            logger.error(f"Payment session for order {order.id} failed: {e.message}")
            raise PaymentSessionError(
                status_code=e.status_code,
                payload=e.payload,
            ) from e

        self.flow.pending = PendingPayment(order=order, session=session)
        launch = self.gateway.open(order, session, user)
        logger.info(
            f"Razorpay order {session.razorpay_order_id} opened for order {order.id} "
            f"({session.amount} {session.currency})"
        )

        toast = dispatch_checkout_event(CheckoutEvent.PAYMENT_STARTED, order_number=order.order_number)
        return PaymentOutcome(
            status=PaymentOutcomeStatus.AWAITING_GATEWAY,
            order=order,
            gateway=launch,
            message=toast.message,
        )

    # -------------------------
    # gateway completion
    # -------------------------

    def complete_gateway_payment(self, callback: GatewayCallback) -> PaymentOutcome:
        with self.flow.guard.hold():
            pending = self.flow.pending
            if pending is None:
                raise CheckoutValidationError("There is no payment waiting for confirmation.")

            if callback.razorpay_order_id != pending.session.razorpay_order_id:
                logger.warning(
                    f"Callback for Razorpay order {callback.razorpay_order_id} while "
                    f"{pending.session.razorpay_order_id} is open; forwarding as received"
                )

            # a callback is verified at most once
            self.flow.pending = None

            try:
                result = self.client.verify_payment(callback)
            except BackendError as e:
                logger.error(f"Payment verification failed for order {pending.order.id}: {e.message}")
                raise PaymentVerificationError(status_code=e.status_code, payload=e.payload) from e

            if not _verification_confirmed(result):
                logger.error(f"Backend rejected payment for order {pending.order.id}: {result}")
                raise PaymentVerificationError(payload=result)

            self.flow.steps.complete()
            logger.info(f"Payment {callback.razorpay_payment_id} verified for order {pending.order.id}")

            toast = dispatch_checkout_event(
                CheckoutEvent.PAYMENT_SUCCESS, order_number=pending.order.order_number
            )
            return PaymentOutcome(
                status=PaymentOutcomeStatus.COMPLETED,
                order=pending.order,
                message=toast.message,
                redirect_to=MY_ORDERS_URL,
            )

    def dismiss_gateway(self) -> PaymentOutcome:
        """
        The shopper closed Razorpay Checkout without finishing.

        The payment may or may not have gone through, so the order's status is
        looked up once and reported as-is. No polling.
        """
        with self.flow.guard.hold():
            pending = self.flow.pending
            if pending is None:
                raise CheckoutValidationError("There is no open payment.")
            self.flow.pending = None

        order = pending.order

        order_status = None
        try:
            order_status = self.client.get_order(order.id).get("status")
        except BackendError as e:
            logger.warning(f"Status lookup for dismissed order {order.id} failed: {e.message}")

        logger.info(f"Payment dismissed for order {order.id}, backend status {order_status}")

        toast = dispatch_checkout_event(CheckoutEvent.PAYMENT_DISMISSED, order_number=order.order_number)
        return PaymentOutcome(
            status=PaymentOutcomeStatus.INDETERMINATE,
            order=order,
            order_status=order_status,
            message=toast.message,
            redirect_to=MY_ORDERS_URL,
        )


def _verification_confirmed(result: Optional[Dict[str, Any]]) -> bool:
    if not isinstance(result, dict):
        return True
    if result.get("verified") is False or result.get("success") is False:
        return False
    return str(result.get("status", "")).lower() not in {"failed", "failure", "error"}
