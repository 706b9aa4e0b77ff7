from fastapi import APIRouter, Depends

from storefront.dependencies.session import (
    get_backend_client,
    get_checkout_flow,
    get_current_user,
    get_gateway,
)
from storefront.notifications import CheckoutEvent, Toast, dispatch_checkout_event, popup
from storefront.notifications.channels import ToastLevel
from storefront.constants.checkout import PaymentOutcomeStatus
from storefront.schemas.checkout_schemas import (
    AddressConfirm,
    CheckoutState,
    GatewayCallback,
    PaymentOutcome,
    PlaceOrderRequest,
)
from storefront.schemas.user_schemas import UserProfile
from storefront.services.api_client import BackendClient
from storefront.services.checkout_service import CheckoutFlow
from storefront.services.gateway import RazorpayCheckout

router = APIRouter()

OUTCOME_TOAST_LEVEL = {
    PaymentOutcomeStatus.COMPLETED: ToastLevel.SUCCESS,
    PaymentOutcomeStatus.AWAITING_GATEWAY: ToastLevel.INFO,
    PaymentOutcomeStatus.INDETERMINATE: ToastLevel.WARNING,
}


def state_payload(flow: CheckoutFlow):
    return CheckoutState(**flow.state()).model_dump(mode="json")


def outcome_payload(outcome: PaymentOutcome, flow: CheckoutFlow):
    toast = Toast(level=OUTCOME_TOAST_LEVEL[outcome.status], message=outcome.message)
    return {
        **popup(toast),
        **outcome.model_dump(mode="json"),
        "checkout": state_payload(flow),
    }


@router.get("/")
def get_checkout(flow: CheckoutFlow = Depends(get_checkout_flow)):
    return state_payload(flow)


# Step 1 -> 2

@router.post("/cart/confirm")
def confirm_cart(
    flow: CheckoutFlow = Depends(get_checkout_flow),
    client: BackendClient = Depends(get_backend_client),
):
    with flow.lock:
        if flow.cart.is_empty:
            flow.refresh_cart(client)
        flow.steps.confirm_cart(flow.cart)
        return {
            **popup(dispatch_checkout_event(CheckoutEvent.CART_CONFIRMED)),
            **state_payload(flow),
        }


# Step 2 -> 3

@router.post("/address")
def confirm_address(
    data: AddressConfirm,
    flow: CheckoutFlow = Depends(get_checkout_flow),
):
    with flow.lock:
        flow.steps.confirm_address(data.shipping_address, data.phone_number)
        return {
            **popup(dispatch_checkout_event(CheckoutEvent.ADDRESS_CONFIRMED)),
            **state_payload(flow),
        }


@router.post("/back")
def go_back(flow: CheckoutFlow = Depends(get_checkout_flow)):
    flow.back()
    return state_payload(flow)


# Step 3

@router.post("/place-order")
def place_order(
    data: PlaceOrderRequest,
    user: UserProfile = Depends(get_current_user),
    flow: CheckoutFlow = Depends(get_checkout_flow),
    client: BackendClient = Depends(get_backend_client),
    gateway: RazorpayCheckout = Depends(get_gateway),
):
    outcome = flow.resolver(client, gateway).place_order(data.payment_method, user)
    return outcome_payload(outcome, flow)


@router.post("/payment/verify")
def verify_payment(
    callback: GatewayCallback,
    flow: CheckoutFlow = Depends(get_checkout_flow),
    client: BackendClient = Depends(get_backend_client),
    gateway: RazorpayCheckout = Depends(get_gateway),
):
    outcome = flow.resolver(client, gateway).complete_gateway_payment(callback)
    return outcome_payload(outcome, flow)


@router.post("/payment/dismiss")
def dismiss_payment(
    flow: CheckoutFlow = Depends(get_checkout_flow),
    client: BackendClient = Depends(get_backend_client),
    gateway: RazorpayCheckout = Depends(get_gateway),
):
    outcome = flow.resolver(client, gateway).dismiss_gateway()
    return outcome_payload(outcome, flow)
