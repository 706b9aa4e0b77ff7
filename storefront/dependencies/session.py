from fastapi import Depends, HTTPException, Request

from storefront.config import settings
from storefront.schemas.user_schemas import UserProfile
from storefront.services.api_client import BackendClient
from storefront.services.authorization import policy
from storefront.services.checkout_service import CheckoutFlow, CheckoutRegistry
from storefront.services.gateway import RazorpayCheckout
from storefront.session import TokenStore, UserSession


def get_token_store(request: Request) -> TokenStore:
    access = request.cookies.get(settings.access_token_cookie)
    refresh = request.cookies.get(settings.refresh_token_cookie)

    auth_header = request.headers.get("Authorization", "")
    if auth_header.lower().startswith("bearer "):
        access = auth_header[7:].strip() or access

    tokens = TokenStore(access=access, refresh=refresh)
    # picked up by TokenCookieMiddleware once the response is ready
    request.state.tokens = tokens
    return tokens


def get_backend_client(tokens: TokenStore = Depends(get_token_store)) -> BackendClient:
    return BackendClient(tokens)


def get_user_session(
    tokens: TokenStore = Depends(get_token_store),
    client=Depends(get_backend_client),
) -> UserSession:
    return UserSession(tokens, client).initialize()


def get_current_user(session: UserSession = Depends(get_user_session)) -> UserProfile:
    return session.require_user()


def enforce_route_policy(request: Request, session: UserSession = Depends(get_user_session)):
    decision = policy.evaluate(request.url.path, session.role, session.is_authenticated)
    if not decision.allowed:
        raise HTTPException(
            status_code=decision.status_code,
            detail={"message": decision.reason, "redirect_to": decision.redirect_to},
        )
    return session


def get_checkout_registry(request: Request) -> CheckoutRegistry:
    return request.app.state.checkout_registry


def get_checkout_flow(
    user: UserProfile = Depends(get_current_user),
    registry: CheckoutRegistry = Depends(get_checkout_registry),
) -> CheckoutFlow:
    return registry.get(user.id)


def get_gateway() -> RazorpayCheckout:
    return RazorpayCheckout()
