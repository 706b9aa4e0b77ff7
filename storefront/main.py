import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from storefront.config import settings
from storefront.dependencies.session import enforce_route_policy
from storefront.exceptions import StorefrontError, status_code_for
from storefront.middleware.token_cookies import TokenCookieMiddleware
from storefront.notifications import error_toast, popup
from storefront.routes import account, cart, checkout
from storefront.services.checkout_service import CheckoutRegistry

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    storage_dir = Path(settings.storage_dir)
    storage_dir.mkdir(parents=True, exist_ok=True)
    logger.info(f"Storefront checkout ({settings.env}) talking to {settings.api_root}")
    yield


def create_app(registry: CheckoutRegistry | None = None) -> FastAPI:
    app = FastAPI(title="MHE Bazar Storefront Checkout", lifespan=lifespan)
    app.state.checkout_registry = registry if registry is not None else CheckoutRegistry()

    app.add_middleware(TokenCookieMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    guarded = [Depends(enforce_route_policy)]
    app.include_router(account.router, prefix="/account", tags=["Account"], dependencies=guarded)
    app.include_router(cart.router, prefix="/cart", tags=["Cart"], dependencies=guarded)
    app.include_router(checkout.router, prefix="/checkout", tags=["Checkout"], dependencies=guarded)

    @app.exception_handler(StorefrontError)
    async def storefront_error_handler(request: Request, exc: StorefrontError) -> JSONResponse:
        return JSONResponse(
            status_code=status_code_for(exc),
            content={
                "detail": exc.message,
                "error_type": type(exc).__name__,
                **popup(error_toast(exc.message)),
            },
        )

    @app.get("/health")
    def health():
        return {"status": "ok"}

    @app.get("/")
    def root():
        return {
            "account_endpoints": ["/account/me", "/account/logout"],
            "cart_endpoints": [
                "/cart", "/cart/items/{line_id}", "/cart/clear",
            ],
            "checkout_endpoints": [
                "/checkout", "/checkout/cart/confirm", "/checkout/address",
                "/checkout/back", "/checkout/place-order",
                "/checkout/payment/verify", "/checkout/payment/dismiss",
            ],
        }

    return app


app = create_app()
