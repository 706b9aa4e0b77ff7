"""Pytest fixtures for storefront tests."""

import threading
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from storefront.dependencies.session import get_backend_client
from storefront.exceptions import BackendError
from storefront.main import create_app
from storefront.schemas.cart_schemas import CartLine
from storefront.schemas.checkout_schemas import OrderCreated, PaymentSession
from storefront.schemas.user_schemas import UserProfile
from storefront.services.checkout_service import CheckoutFlow, CheckoutRegistry
from storefront.storage import LocalStorage


def make_line(line_id=1, price="8999.00", quantity=1, product_id=None, name="Pallet Truck"):
    price = Decimal(price)
    return CartLine(
        id=line_id,
        product=product_id or line_id * 10,
        product_details={"id": product_id or line_id * 10, "name": name, "price": price, "images": []},
        quantity=quantity,
        total_price=price * quantity,
    )


class FakeBackend:
    """Records every call the storefront makes to the marketplace API."""

    def __init__(self):
        self.calls = []
        self.user = UserProfile(
            id=1,
            username="buyer",
            email="buyer@example.com",
            first_name="Asha",
            last_name="Rao",
            role={"id": 3, "name": "user"},
            phone="9876543210",
        )
        self.cart_lines = [make_line()]
        self.order = OrderCreated(id=42, order_number="ORD-0042")
        self.payment_session = PaymentSession(
            amount=899900, currency="INR", razorpay_order_id="order_Rzp123"
        )
        self.verify_result = {"status": "success", "message": "Payment verified"}
        self.order_status = "pending"
        self.failures = {}
        # set to make create_order_from_cart wait until released
        self.hold_order_creation = None
        self.order_creation_started = threading.Event()

    def _record(self, name, **kwargs):
        self.calls.append((name, kwargs))
        if name in self.failures:
            raise self.failures[name]

    def call_names(self):
        return [name for name, _ in self.calls]

    def count(self, name):
        return self.call_names().count(name)

    def refresh_tokens(self):
        self._record("refresh_tokens")
        return False

    def get_me(self):
        self._record("get_me")
        return self.user

    def get_cart(self):
        self._record("get_cart")
        return list(self.cart_lines)

    def update_cart_item(self, line_id, quantity):
        self._record("update_cart_item", line_id=line_id, quantity=quantity)

    def delete_cart_item(self, line_id):
        self._record("delete_cart_item", line_id=line_id)

    def clear_cart(self):
        self._record("clear_cart")

    def create_order_from_cart(self, shipping_address, phone_number):
        self.order_creation_started.set()
        if self.hold_order_creation is not None:
            self.hold_order_creation.wait(timeout=5)
        self._record(
            "create_order_from_cart",
            shipping_address=shipping_address,
            phone_number=phone_number,
        )
        return self.order

    def get_order(self, order_id):
        self._record("get_order", order_id=order_id)
        return {"id": order_id, "status": self.order_status}

    def create_razorpay_order(self, order_id):
        self._record("create_razorpay_order", order_id=order_id)
        return self.payment_session

    def verify_payment(self, callback):
        self._record("verify_payment", **callback.model_dump())
        return self.verify_result


def backend_failure(message="Server exploded", status_code=500, payload=None):
    return BackendError(message, status_code=status_code, payload=payload or {"message": message})


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def storage_dir(tmp_path):
    return tmp_path / "local_storage"


@pytest.fixture
def storage(storage_dir):
    return LocalStorage("user-1", base_dir=storage_dir)


@pytest.fixture
def flow(storage):
    return CheckoutFlow(storage)


@pytest.fixture
def ready_flow(flow, backend):
    """A flow sitting on the payment step with confirmed shipping details."""
    flow.refresh_cart(backend)
    flow.steps.confirm_cart(flow.cart)
    flow.steps.confirm_address("12 Dock Road, Chennai 600001", "+91 9876543210")
    return flow


@pytest.fixture
def registry(storage_dir):
    return CheckoutRegistry(storage_dir)


@pytest.fixture
def api_client(backend, registry):
    app = create_app(registry)
    app.dependency_overrides[get_backend_client] = lambda: backend
    with TestClient(app, headers={"Authorization": "Bearer test-token"}) as client:
        yield client
    app.dependency_overrides.clear()
