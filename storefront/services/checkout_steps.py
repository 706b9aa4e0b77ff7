import logging
from typing import Optional, Set

from storefront.constants.checkout import (
    SHIPPING_ADDRESS_KEY,
    SHIPPING_PHONE_KEY,
    STEP_DESCRIPTIONS,
    Step,
)
from storefront.exceptions import CheckoutValidationError, StepTransitionError
from storefront.storage import LocalStorage

logger = logging.getLogger(__name__)


class StepController:
    """
    Cart -> Address -> Payment wizard.

    Shipping details are mirrored into local storage on confirmation so a fresh
    controller (a page reload) starts at the cart with them already filled in.
    Going back never throws them away.
    """

    def __init__(self, storage: LocalStorage):
        self.storage = storage
        self.current_step = Step.CART
        self.completed_steps: Set[Step] = set()
        self.finished = False
        self.shipping_address: Optional[str] = None
        self.phone_number: Optional[str] = None
        self.restore()

    def restore(self):
        """Back to the cart step with the last confirmed shipping details."""
        self.reset()
        self.shipping_address = self.storage.get_item(SHIPPING_ADDRESS_KEY)
        self.phone_number = self.storage.get_item(SHIPPING_PHONE_KEY)

    # -------------------------
    # forward
    # -------------------------

    def confirm_cart(self, cart):
        self._expect(Step.CART, "confirm the cart")

        if cart.is_empty:
            raise CheckoutValidationError("Your cart is empty.")

        self._advance()

    def confirm_address(self, address: str, phone: str):
        self._expect(Step.ADDRESS, "confirm the address")

        address = (address or "").strip()
        phone = (phone or "").strip()
        if not address:
            raise CheckoutValidationError("Please select or enter a shipping address.")
        if not phone:
            raise CheckoutValidationError("Please enter a phone number.")

        self.shipping_address = address
        self.phone_number = phone
        self.storage.set_item(SHIPPING_ADDRESS_KEY, address)
        self.storage.set_item(SHIPPING_PHONE_KEY, phone)

        self._advance()

    def complete(self):
        self._expect(Step.PAYMENT, "complete the order")

        self.completed_steps.add(Step.PAYMENT)
        self.finished = True
        self.forget_shipping_details()
        logger.info("Checkout completed")

    # -------------------------
    # back
    # -------------------------

    def back(self):
        if self.finished or self.current_step == Step.CART:
            raise StepTransitionError(self.current_step, "go back")

        previous = Step(self.current_step - 1)
        self.completed_steps.discard(previous)
        self.current_step = previous

    # -------------------------
    # helpers
    # -------------------------

    def forget_shipping_details(self):
        self.storage.remove_item(SHIPPING_ADDRESS_KEY, SHIPPING_PHONE_KEY)
        self.shipping_address = None
        self.phone_number = None

    def reset(self):
        self.current_step = Step.CART
        self.completed_steps.clear()
        self.finished = False

    def _expect(self, step: Step, action: str):
        if self.finished or self.current_step != step:
            raise StepTransitionError(self.current_step, action)

    def _advance(self):
        self.completed_steps.add(self.current_step)
        self.current_step = Step(self.current_step + 1)
        logger.debug(f"Checkout moved to {self.current_step.label}")

    def describe(self):
        return [
            {
                "id": int(step),
                "title": step.label,
                "description": STEP_DESCRIPTIONS[step],
                "completed": step in self.completed_steps,
                "current": step == self.current_step,
            }
            for step in Step
        ]
