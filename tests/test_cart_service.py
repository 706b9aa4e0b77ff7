"""Tests for optimistic cart mutations and their compensation."""

from decimal import Decimal

import pytest

from storefront.exceptions import CartUpdateError, CheckoutValidationError
from storefront.notifications.channels import ToastLevel
from storefront.services.cart_service import CartLineMutator, CartView

from conftest import backend_failure, make_line


@pytest.fixture
def view():
    return CartView([
        make_line(1, price="8999.00", quantity=1),
        make_line(2, price="1500.50", quantity=2, name="Hand Stacker"),
    ])


@pytest.fixture
def mutator(backend, view):
    return CartLineMutator(backend, view)


class TestCartView:
    def test_subtotal_sums_line_totals(self, view):
        assert view.subtotal == Decimal("12000.00")
        assert view.item_count == 3

    def test_empty_view(self):
        view = CartView()
        assert view.is_empty
        assert view.subtotal == Decimal("0")

    def test_load_from_backend(self, backend):
        view = CartView.load(backend)
        assert [line.id for line in view.lines] == [1]
        assert backend.call_names() == ["get_cart"]

    def test_find_unknown_line(self, view):
        with pytest.raises(CheckoutValidationError):
            view.find(99)


class TestChangeQuantity:
    def test_updates_line_and_total(self, mutator, view, backend):
        toast = mutator.change_quantity(2, 3)

        line = view.find(2)
        assert line.quantity == 3
        assert line.total_price == Decimal("4501.50")
        assert toast.level == ToastLevel.SUCCESS
        assert backend.calls == [("update_cart_item", {"line_id": 2, "quantity": 3})]

    @pytest.mark.parametrize("quantity", [0, -1])
    def test_below_one_rejected_without_network(self, mutator, view, backend, quantity):
        with pytest.raises(CheckoutValidationError):
            mutator.change_quantity(1, quantity)
        assert backend.calls == []
        assert view.find(1).quantity == 1

    def test_failure_restores_line(self, mutator, view, backend):
        backend.failures["update_cart_item"] = backend_failure(
            status_code=400, payload={"quantity": ["Only 2 units in stock."]}
        )

        with pytest.raises(CartUpdateError) as exc_info:
            mutator.change_quantity(2, 5)

        assert exc_info.value.message == "Failed to update quantity: Only 2 units in stock."
        line = view.find(2)
        assert line.quantity == 2
        assert line.total_price == Decimal("3001.00")

    def test_failure_without_field_error_uses_generic_message(self, mutator, backend):
        backend.failures["update_cart_item"] = backend_failure(status_code=500, payload={"detail": "boom"})

        with pytest.raises(CartUpdateError) as exc_info:
            mutator.change_quantity(1, 2)

        assert exc_info.value.message == "Failed to update quantity. Please try again."


class TestRemoveAndClear:
    def test_remove_drops_line(self, mutator, view, backend):
        mutator.remove(1)
        assert [line.id for line in view.lines] == [2]
        assert backend.calls == [("delete_cart_item", {"line_id": 1})]

    def test_remove_failure_puts_line_back(self, mutator, view, backend):
        backend.failures["delete_cart_item"] = backend_failure()

        with pytest.raises(CartUpdateError) as exc_info:
            mutator.remove(1)

        assert exc_info.value.message == "Failed to remove item. Please try again."
        assert [line.id for line in view.lines] == [1, 2]

    def test_clear_empties_view(self, mutator, view, backend):
        mutator.clear()
        assert view.is_empty
        assert backend.call_names() == ["clear_cart"]

    def test_clear_failure_restores_everything(self, mutator, view, backend):
        backend.failures["clear_cart"] = backend_failure()

        with pytest.raises(CartUpdateError):
            mutator.clear()

        assert len(view.lines) == 2
        assert view.subtotal == Decimal("12000.00")

    def test_each_mutation_is_its_own_round_trip(self, mutator, backend):
        mutator.change_quantity(1, 2)
        mutator.change_quantity(1, 3)
        mutator.remove(2)
        assert backend.call_names() == ["update_cart_item", "update_cart_item", "delete_cart_item"]
