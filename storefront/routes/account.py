from fastapi import APIRouter, Depends

from storefront.dependencies.session import get_checkout_registry, get_user_session
from storefront.notifications import CheckoutEvent, dispatch_checkout_event, popup
from storefront.services.checkout_service import CheckoutRegistry
from storefront.session import UserSession

router = APIRouter()


@router.get("/me")
def read_me(session: UserSession = Depends(get_user_session)):
    user = session.require_user()
    return {
        **user.model_dump(mode="json"),
        "role_id": user.role_id,
        "display_name": user.display_name,
    }


@router.post("/logout")
def logout(
    session: UserSession = Depends(get_user_session),
    registry: CheckoutRegistry = Depends(get_checkout_registry),
):
    if session.user:
        registry.discard(session.user.id)

    session.teardown()

    return {
        **popup(dispatch_checkout_event(CheckoutEvent.SIGNED_OUT)),
        "redirect_to": "/login",
    }
