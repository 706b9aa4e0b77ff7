import logging
from decimal import Decimal
from typing import Iterable, List, Optional

from storefront.exceptions import BackendError, CartUpdateError, CheckoutValidationError
from storefront.notifications import CheckoutEvent, Toast, dispatch_checkout_event
from storefront.schemas.cart_schemas import CartLine
from storefront.utils.errors import field_error

logger = logging.getLogger(__name__)


class CartView:
    """The shopper's cart as currently displayed."""

    def __init__(self, lines: Optional[Iterable[CartLine]] = None):
        self.lines: List[CartLine] = list(lines or [])

    @classmethod
    def load(cls, client) -> "CartView":
        return cls(client.get_cart())

    @property
    def is_empty(self):
        return not self.lines

    @property
    def item_count(self):
        return sum(line.quantity for line in self.lines)

    @property
    def subtotal(self) -> Decimal:
        return sum((line.total_price for line in self.lines), Decimal("0"))

    def find(self, line_id: int) -> CartLine:
        for line in self.lines:
            if line.id == line_id:
                return line
        raise CheckoutValidationError("This item is no longer in your cart.")

    def snapshot(self) -> List[CartLine]:
        return list(self.lines)

    def restore(self, snapshot: List[CartLine]):
        self.lines = list(snapshot)


# -------------------------
# COMMANDS
# -------------------------

class CartCommand:
    """
    One optimistic cart mutation.

    `apply` changes the view before the request, `execute` performs the round
    trip and `compensate` puts the view back if the round trip fails.
    """

    event: CheckoutEvent
    failure_message = "Failed to update cart. Please try again."

    def __init__(self):
        self._snapshot: Optional[List[CartLine]] = None

    def apply(self, view: CartView):
        self._snapshot = view.snapshot()
        self._apply(view)

    def compensate(self, view: CartView):
        if self._snapshot is not None:
            view.restore(self._snapshot)

    def describe_failure(self, error: BackendError) -> str:
        return self.failure_message

    def _apply(self, view: CartView):
        raise NotImplementedError

    def execute(self, client):
        raise NotImplementedError


class UpdateQuantity(CartCommand):
    event = CheckoutEvent.QUANTITY_UPDATED
    failure_message = "Failed to update quantity. Please try again."

    def __init__(self, line_id: int, quantity: int):
        super().__init__()
        self.line_id = line_id
        self.quantity = quantity

    def _apply(self, view: CartView):
        view.lines = [
            line.model_copy(
                update={
                    "quantity": self.quantity,
                    "total_price": line.product_details.price * self.quantity,
                }
            )
            if line.id == self.line_id
            else line
            for line in view.lines
        ]

    def execute(self, client):
        client.update_cart_item(self.line_id, self.quantity)

    def describe_failure(self, error: BackendError) -> str:
        reason = field_error(error.payload, "quantity")
        if reason:
            return f"Failed to update quantity: {reason}"
        return self.failure_message


class RemoveLine(CartCommand):
    event = CheckoutEvent.ITEM_REMOVED
    failure_message = "Failed to remove item. Please try again."

    def __init__(self, line_id: int):
        super().__init__()
        self.line_id = line_id

    def _apply(self, view: CartView):
        view.lines = [line for line in view.lines if line.id != self.line_id]

    def execute(self, client):
        client.delete_cart_item(self.line_id)


class ClearCart(CartCommand):
    event = CheckoutEvent.CART_CLEARED
    failure_message = "Failed to clear cart. Please try again."

    def _apply(self, view: CartView):
        view.lines = []

    def execute(self, client):
        client.clear_cart()


# -------------------------
# MUTATOR
# -------------------------

class CartLineMutator:
    """Runs cart commands one round trip at a time, compensating on failure."""

    def __init__(self, client, view: CartView):
        self.client = client
        self.view = view

    def change_quantity(self, line_id: int, quantity: int) -> Toast:
        if quantity < 1:
            raise CheckoutValidationError("Quantity cannot be less than 1.")
        self.view.find(line_id)
        return self.run(UpdateQuantity(line_id, quantity))

    def remove(self, line_id: int) -> Toast:
        return self.run(RemoveLine(line_id))

    def clear(self) -> Toast:
        return self.run(ClearCart())

    def run(self, command: CartCommand) -> Toast:
        command.apply(self.view)

        try:
            command.execute(self.client)
        except BackendError as e:
            command.compensate(self.view)
            logger.warning(f"{type(command).__name__} failed, cart view restored: {e.message}")
            raise CartUpdateError(
                command.describe_failure(e),
                status_code=e.status_code,
                payload=e.payload,
            ) from e

        return dispatch_checkout_event(command.event)
