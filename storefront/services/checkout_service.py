import logging
import threading
from pathlib import Path
from typing import Dict, Optional

from storefront.exceptions import CheckoutValidationError
from storefront.services.cart_service import CartLineMutator, CartView
from storefront.services.checkout_steps import StepController
from storefront.services.payment_service import PaymentResolver, PendingPayment, SubmitGuard
from storefront.storage import LocalStorage

logger = logging.getLogger(__name__)


class CheckoutFlow:
    """Everything the storefront remembers about one shopper's checkout."""

    def __init__(self, storage: LocalStorage):
        self.storage = storage
        self.steps = StepController(storage)
        self.cart = CartView()
        self.guard = SubmitGuard()
        self.pending: Optional[PendingPayment] = None
        self.lock = threading.RLock()

    def refresh_cart(self, client) -> CartView:
        with self.lock:
            if self.steps.finished:
                # a finished checkout starts over on the next cart visit
                self.steps.reset()
            self.cart = CartView.load(client)
            return self.cart

    def back(self):
        """Step back, unless an order submission or gateway payment is still open."""
        with self.lock, self.guard.hold():
            if self.pending is not None:
                raise CheckoutValidationError(
                    f"Finish or close the open payment for order "
                    f"{self.pending.order.order_number} first."
                )
            self.steps.back()

    def mutator(self, client) -> CartLineMutator:
        return CartLineMutator(client, self.cart)

    def resolver(self, client, gateway) -> PaymentResolver:
        return PaymentResolver(client, gateway, self)

    def state(self):
        steps = self.steps
        return {
            "current_step": int(steps.current_step),
            "completed_steps": sorted(int(s) for s in steps.completed_steps),
            "steps": steps.describe(),
            "shipping_address": steps.shipping_address,
            "phone_number": steps.phone_number,
            "submitting": self.guard.in_flight,
            "pending_order": self.pending.order if self.pending else None,
        }


class CheckoutRegistry:
    """Checkout flows keyed by user id. Created once per application."""

    def __init__(self, storage_dir: Optional[Path] = None):
        self.storage_dir = storage_dir
        self._flows: Dict[int, CheckoutFlow] = {}
        self._lock = threading.Lock()

    def get(self, user_id: int) -> CheckoutFlow:
        with self._lock:
            flow = self._flows.get(user_id)
            if flow is None:
                storage = LocalStorage(f"user-{user_id}", base_dir=self.storage_dir)
                flow = CheckoutFlow(storage)
                self._flows[user_id] = flow
                logger.debug(f"Checkout flow created for user {user_id}")
            return flow

    def discard(self, user_id: int):
        with self._lock:
            self._flows.pop(user_id, None)

    def __len__(self):
        return len(self._flows)
