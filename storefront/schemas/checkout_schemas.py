from pydantic import BaseModel, ConfigDict, field_validator
from typing import Any, Dict, List, Optional

from storefront.constants.checkout import PaymentMethod, PaymentOutcomeStatus


class AddressConfirm(BaseModel):
    shipping_address: str
    phone_number: str

    @field_validator("shipping_address", "phone_number")
    @classmethod
    def strip_whitespace(cls, value: str) -> str:
        return value.strip()


class PlaceOrderRequest(BaseModel):
    payment_method: str = PaymentMethod.COD.value


class OrderCreated(BaseModel):
    """Order as returned by `orders/create_from_cart`. Opaque to the storefront."""

    model_config = ConfigDict(extra="allow", frozen=True)

    id: int
    order_number: str
    status: Optional[str] = None

    @field_validator("order_number", mode="before")
    @classmethod
    def order_number_as_text(cls, value):
        return str(value) if value is not None else value


class PaymentSession(BaseModel):
    model_config = ConfigDict(frozen=True)

    amount: int             # paise
    currency: Optional[str] = None
    razorpay_order_id: str


class GatewayCallback(BaseModel):
    razorpay_payment_id: str
    razorpay_order_id: str
    razorpay_signature: str


class GatewayLaunch(BaseModel):
    """What the browser hands to Razorpay Checkout."""

    options: Dict[str, Any]
    verify_url: str
    dismiss_url: str


class PaymentOutcome(BaseModel):
    status: PaymentOutcomeStatus
    order: Optional[OrderCreated] = None
    gateway: Optional[GatewayLaunch] = None
    order_status: Optional[str] = None
    message: str
    redirect_to: Optional[str] = None


class CheckoutState(BaseModel):
    current_step: int
    completed_steps: List[int]
    steps: List[Dict[str, Any]]
    shipping_address: Optional[str] = None
    phone_number: Optional[str] = None
    submitting: bool = False
    pending_order: Optional[OrderCreated] = None
