"""
models.py — Data Models for Checkout Processing

This module defines the data structures used for cart validation, the
translation into Stripe line items, and the outcome of a checkout attempt.
Pydantic models ensure type safety and validation of incoming cart items.

Models:
    - CartItem: A single product in the shopping cart.
    - OrderRequest: A validated cart plus delivery address.
    - LineItem / PriceData / ProductData: Stripe line item payload.
    - CheckoutCreated, InvalidOrder, PaymentDeclined, RemoteFailure: checkout outcomes.
    - CheckoutResponse: The normalized JSON body returned to the frontend.
"""

from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

CURRENCY = "inr"
MAX_ADDRESS_LENGTH = 450

EMPTY_CART_MESSAGE = "Cart is empty."
MISSING_ADDRESS_MESSAGE = "Address is required."
INVALID_ITEM_MESSAGE = "Invalid item format in cart."
CARD_DECLINED_MESSAGE = "Your card was declined. Please try a different payment method."
INTERNAL_ERROR_MESSAGE = "Internal Server Error. Please try again later."


class CartItem(BaseModel):
    """
    Represents a single product in the shopping cart.

    Attributes:
        id (int | str): Product identifier as sent by the frontend. Must not be empty.
        name (str): Product name shown on the Stripe checkout page.
        price (Decimal): Unit price in major currency units (rupees). Must be greater than zero.
        quantity (int): Number of units. Must be at least one.
    """
    id: Union[int, str]
    name: str = Field(..., min_length=1)
    price: Decimal = Field(..., gt=0)
    quantity: int = Field(..., ge=1)

    @field_validator("id")
    @classmethod
    def id_not_blank(cls, value):
        if isinstance(value, str) and not value.strip():
            raise ValueError("id must not be empty")
        return value

    @property
    def unit_amount(self) -> int:
        """Unit price in minor currency units (paise), rounded half-up."""
        return int((self.price * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class OrderRequest(BaseModel):
    """
    A cart that passed validation, ready to be forwarded to Stripe.

    Attributes:
        items (List[CartItem]): Non-empty, ordered list of cart items.
        address (str): Delivery address as received (untrimmed).
    """
    items: List[CartItem] = Field(..., min_length=1)
    address: str

    @property
    def forwarded_address(self) -> str:
        return self.address[:MAX_ADDRESS_LENGTH]


class ProductData(BaseModel):
    name: str


class PriceData(BaseModel):
    currency: str = CURRENCY
    product_data: ProductData
    unit_amount: int


class LineItem(BaseModel):
    """Stripe `line_items` entry with inline price data."""
    price_data: PriceData
    quantity: int

    @classmethod
    def from_cart_item(cls, item: CartItem) -> "LineItem":
        return cls(
            price_data=PriceData(
                product_data=ProductData(name=item.name),
                unit_amount=item.unit_amount,
            ),
            quantity=item.quantity,
        )


# --- Checkout outcomes ---

class InvalidOrderKind(str, Enum):
    EMPTY_CART = "empty_cart"
    MISSING_ADDRESS = "missing_address"
    INVALID_ITEM = "invalid_item"


class CheckoutCreated(BaseModel):
    model_config = ConfigDict(frozen=True)

    session_id: str


class InvalidOrder(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: InvalidOrderKind
    message: str


class PaymentDeclined(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str = CARD_DECLINED_MESSAGE


class RemoteFailure(BaseModel):
    model_config = ConfigDict(frozen=True)

    reason: str


CheckoutOutcome = Union[CheckoutCreated, InvalidOrder, PaymentDeclined, RemoteFailure]


class CheckoutResponse(BaseModel):
    """
    Normalized JSON body of `POST /order`.

    Exactly one of `id` (on success) or `message` (on failure) is set.
    """
    success: bool
    id: Optional[str] = None
    message: Optional[str] = None
