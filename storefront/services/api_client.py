import logging
from typing import Any, Dict, List, Optional

import requests
from pydantic import ValidationError

from storefront.config import settings
from storefront.exceptions import BackendError
from storefront.schemas.cart_schemas import CartLine
from storefront.schemas.checkout_schemas import (
    GatewayCallback,
    OrderCreated,
    PaymentSession,
)
from storefront.schemas.user_schemas import TokenPair, UserProfile
from storefront.utils.errors import extract_error_message
from storefront.utils.pagination import iter_pages

logger = logging.getLogger(__name__)

USERS_ME_PATH = "/users/me/"
TOKEN_REFRESH_PATH = "/token/refresh/"
CART_PATH = "/cart/"
CART_CLEAR_PATH = "/cart/clear/"
CREATE_ORDER_PATH = "/orders/create_from_cart/"
CREATE_RAZORPAY_ORDER_PATH = "/payments/create_razorpay_order/"
VERIFY_PAYMENT_PATH = "/payments/verify_payment/"


class BackendClient:
    """
    Thin client for the marketplace REST API.

    Every non-2xx answer or network failure becomes a `BackendError` carrying
    the backend's message when it sent one. Nothing is retried, except that a
    request rejected with 401 is replayed once after a successful token refresh.
    """

    def __init__(
        self,
        tokens,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        http: Optional[requests.Session] = None,
    ):
        self.tokens = tokens
        self.base_url = (base_url or settings.api_root).rstrip("/")
        self.api_key = api_key if api_key is not None else settings.api_key
        self.timeout = timeout if timeout is not None else settings.http_timeout
        self.http = http or requests.Session()

    # -------------------------
    # transport
    # -------------------------

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.tokens.access:
            headers["Authorization"] = f"Bearer {self.tokens.access}"
        if self.api_key:
            headers["X-API-KEY"] = self.api_key
        return headers

    def _url(self, path: str) -> str:
        if path.startswith("http://") or path.startswith("https://"):
            return path
        return f"{self.base_url}{path}"

    def _request(
        self,
        method: str,
        path: str,
        *,
        json: Optional[dict] = None,
        replayed: bool = False,
    ) -> Any:
        url = self._url(path)

        try:
            response = self.http.request(
                method,
                url,
                json=json,
                headers=self._headers(),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"{method} {path} failed: {e}")
            raise BackendError() from e

        if (
            response.status_code == 401
            and not replayed
            and path != TOKEN_REFRESH_PATH
            and self.tokens.refresh
        ):
            if self.refresh_tokens():
                return self._request(method, path, json=json, replayed=True)

        if response.status_code >= 400:
            payload = _safe_json(response)
            message = extract_error_message(payload)
            logger.warning(
                f"{method} {path} returned {response.status_code}: {message or response.text[:200]}"
            )
            raise BackendError(message, status_code=response.status_code, payload=payload)

        if response.status_code == 204 or not response.content:
            return None

        return _safe_json(response)

    # -------------------------
    # session
    # -------------------------

    def refresh_tokens(self) -> bool:
        """Swap the refresh token for a new access token. Clears the store on failure."""
        if not self.tokens.refresh:
            return False

        try:
            data = self._request("POST", TOKEN_REFRESH_PATH, json={"refresh": self.tokens.refresh})
            pair = TokenPair(**(data or {}))
        except (BackendError, ValueError) as e:
            logger.info(f"Token refresh failed: {e}")
            self.tokens.clear()
            return False

        self.tokens.update(pair.access, pair.refresh)
        return True

    def get_me(self) -> UserProfile:
        return _parse(UserProfile, self._request("GET", USERS_ME_PATH))

    # -------------------------
    # cart
    # -------------------------

    def get_cart(self) -> List[CartLine]:
        pages = iter_pages(lambda url: self._request("GET", url or CART_PATH))
        return [_parse(CartLine, line) for line in pages]

    def update_cart_item(self, line_id: int, quantity: int) -> Any:
        return self._request("PATCH", f"{CART_PATH}{line_id}/", json={"quantity": quantity})

    def delete_cart_item(self, line_id: int) -> None:
        self._request("DELETE", f"{CART_PATH}{line_id}/")

    def clear_cart(self) -> None:
        self._request("POST", CART_CLEAR_PATH)

    # -------------------------
    # orders & payments
    # -------------------------

    def create_order_from_cart(self, shipping_address: str, phone_number: str) -> OrderCreated:
        data = self._request(
            "POST",
            CREATE_ORDER_PATH,
            json={"shipping_address": shipping_address, "phone_number": phone_number},
        )
        return _parse(OrderCreated, data)

    def get_order(self, order_id: int) -> Dict[str, Any]:
        return self._request("GET", f"/orders/{order_id}/") or {}

    def create_razorpay_order(self, order_id: int) -> PaymentSession:
        data = self._request("POST", CREATE_RAZORPAY_ORDER_PATH, json={"order_id": order_id})
        return _parse(PaymentSession, data)

    def verify_payment(self, callback: GatewayCallback) -> Dict[str, Any]:
        return self._request("POST", VERIFY_PAYMENT_PATH, json=callback.model_dump()) or {}


def _safe_json(response):
    try:
        return response.json()
    except ValueError:
        return response.text or None


def _parse(model, data):
    if not isinstance(data, dict):
        raise BackendError("Unexpected response from server.", payload=data)
    try:
        return model(**data)
    except ValidationError as e:
        logger.error(f"Could not read {model.__name__} from response: {e}")
        raise BackendError("Unexpected response from server.", payload=data) from e
