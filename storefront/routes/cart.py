from fastapi import APIRouter, Depends

from storefront.dependencies.session import get_backend_client, get_checkout_flow
from storefront.notifications import popup
from storefront.schemas.cart_schemas import CartQuantityUpdate
from storefront.services.api_client import BackendClient
from storefront.services.cart_service import CartView
from storefront.services.checkout_service import CheckoutFlow

router = APIRouter()


def cart_payload(cart: CartView):
    return {
        "items": [line.model_dump(mode="json") for line in cart.lines],
        "item_count": cart.item_count,
        "subtotal": str(cart.subtotal),
    }


# View Cart

@router.get("/")
def get_cart(
    flow: CheckoutFlow = Depends(get_checkout_flow),
    client: BackendClient = Depends(get_backend_client),
):
    return cart_payload(flow.refresh_cart(client))


# Update Quantity

@router.patch("/items/{line_id}")
def update_cart_item(
    line_id: int,
    data: CartQuantityUpdate,
    flow: CheckoutFlow = Depends(get_checkout_flow),
    client: BackendClient = Depends(get_backend_client),
):
    with flow.lock:
        toast = flow.mutator(client).change_quantity(line_id, data.quantity)
        return {**popup(toast), **cart_payload(flow.cart)}


# Remove Item

@router.delete("/items/{line_id}")
def remove_cart_item(
    line_id: int,
    flow: CheckoutFlow = Depends(get_checkout_flow),
    client: BackendClient = Depends(get_backend_client),
):
    with flow.lock:
        toast = flow.mutator(client).remove(line_id)
        return {**popup(toast), **cart_payload(flow.cart)}


# Clear Cart

@router.post("/clear")
def clear_cart(
    flow: CheckoutFlow = Depends(get_checkout_flow),
    client: BackendClient = Depends(get_backend_client),
):
    with flow.lock:
        toast = flow.mutator(client).clear()
        return {**popup(toast), **cart_payload(flow.cart)}
