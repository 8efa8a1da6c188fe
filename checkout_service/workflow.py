"""
workflow.py — Core Checkout Logic

This module contains the logic behind `POST /order`. It turns a raw cart
payload into a Stripe Checkout session and reports the result as an explicit
outcome value instead of raising.

Workflow Overview:
1. Validate the cart (fail fast, first violation wins, no remote call on failure)
2. Translate cart items into Stripe line items (INR, amounts in paise)
3. Create the checkout session via the payment client
4. Classify the result: created / declined / remote failure
"""

import logging
from typing import Any, Union

from pydantic import ValidationError

from .clients import CardDeclinedError, PaymentServiceError
from .config import Settings
from .models import (
    EMPTY_CART_MESSAGE,
    INVALID_ITEM_MESSAGE,
    MISSING_ADDRESS_MESSAGE,
    CartItem,
    CheckoutCreated,
    CheckoutOutcome,
    InvalidOrder,
    InvalidOrderKind,
    LineItem,
    OrderRequest,
    PaymentDeclined,
    RemoteFailure,
)

log = logging.getLogger(__name__)


def validate_order(payload: Any) -> Union[OrderRequest, InvalidOrder]:
    """
    Validates a raw `POST /order` body.

    Checks run in a fixed order and the first violation is returned:
        1. `items` present and non-empty       → EMPTY_CART
        2. `address` non-blank string          → MISSING_ADDRESS
        3. every item is a well-formed CartItem → INVALID_ITEM

    Args:
        payload (Any): Decoded JSON body. Anything other than an object is
            treated as an empty payload.

    Returns:
        OrderRequest | InvalidOrder: The validated order, or the first violation.
    """
    if not isinstance(payload, dict):
        payload = {}

    items = payload.get("items")
    if not items:
        return InvalidOrder(kind=InvalidOrderKind.EMPTY_CART, message=EMPTY_CART_MESSAGE)

    address = payload.get("address")
    if not isinstance(address, str) or not address.strip():
        return InvalidOrder(kind=InvalidOrderKind.MISSING_ADDRESS, message=MISSING_ADDRESS_MESSAGE)

    invalid_item = InvalidOrder(kind=InvalidOrderKind.INVALID_ITEM, message=INVALID_ITEM_MESSAGE)
    if not isinstance(items, list):
        return invalid_item

    cart = []
    for position, raw_item in enumerate(items):
        try:
            cart.append(CartItem.model_validate(raw_item))
        except ValidationError as e:
            log.info(f"Rejected cart item #{position}: {e.error_count()} validation error(s).")
            return invalid_item

    return OrderRequest(items=cart, address=address)


def build_session_params(order: OrderRequest, settings: Settings) -> dict:
    """
    Translates a validated order into Stripe Checkout session parameters.

    Args:
        order (OrderRequest): The validated cart.
        settings (Settings): Provides the frontend redirect URLs.

    Returns:
        dict: Keyword parameters for `checkout.sessions.create`.
    """
    return {
        "payment_method_types": ["card"],
        "line_items": [LineItem.from_cart_item(item).model_dump() for item in order.items],
        "mode": "payment",
        "success_url": settings.success_url,
        "cancel_url": settings.cancel_url,
        "metadata": {"address": order.forwarded_address},
    }


async def process_checkout(payload: Any, payment_client, settings: Settings) -> CheckoutOutcome:
    """
    Executes the checkout for a single request.

    Args:
        payload (Any): Decoded JSON request body.
        payment_client: Object with an async `create_checkout_session(params) -> str`
            method, usually a StripePaymentClient.
        settings (Settings): Application settings.

    Returns:
        CheckoutOutcome: One of
            - InvalidOrder: validation failed, nothing was sent to Stripe
            - CheckoutCreated: the session id to hand back to the frontend
            - PaymentDeclined: Stripe reported a card decline
            - RemoteFailure: any other payment service failure

    Any exception other than PaymentServiceError propagates to the caller.
    """
    result = validate_order(payload)
    if isinstance(result, InvalidOrder):
        log.info(f"Order rejected: {result.message}")
        return result

    order = result
    log.info(f"Creating checkout session for {len(order.items)} item(s).")
    params = build_session_params(order, settings)

    try:
        session_id = await payment_client.create_checkout_session(params)
    except CardDeclinedError:
        log.warning("Checkout failed: card declined.")
        return PaymentDeclined()
    except PaymentServiceError as e:
        log.error(f"Checkout failed: payment service error: {e}")
        return RemoteFailure(reason=str(e))

    log.info(f"Checkout session created (ID: {session_id}).")
    return CheckoutCreated(session_id=session_id)
