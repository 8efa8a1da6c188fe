"""
main.py — FastAPI Entry Point for the Checkout Service

This module provides the REST API interface between the shop frontend and
Stripe Checkout. It relays a validated cart to Stripe and returns the hosted
checkout session id, so the frontend can redirect the customer to the payment page.

Responsibilities:
    • Accept checkout requests via HTTP API (POST /order)
    • Map checkout outcomes to normalized JSON responses
    • Turn any unhandled error into a generic 500 response
    • Provide a liveness probe (GET /)
"""

import json
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .clients import StripePaymentClient
from .config import ConfigurationError, Settings, load_settings
from .logging_config import get_logger, setup_logging
from .models import (
    INTERNAL_ERROR_MESSAGE,
    CheckoutCreated,
    CheckoutOutcome,
    CheckoutResponse,
    InvalidOrder,
    PaymentDeclined,
    RemoteFailure,
)
from .workflow import process_checkout

log = get_logger(__name__)


def outcome_to_response(outcome: CheckoutOutcome) -> JSONResponse:
    """
    Maps a checkout outcome to its HTTP response.

    Status codes:
        - 200: CheckoutCreated
        - 400: InvalidOrder, PaymentDeclined
        - 500: RemoteFailure
    """
    if isinstance(outcome, CheckoutCreated):
        status_code, body = 200, CheckoutResponse(success=True, id=outcome.session_id)
    elif isinstance(outcome, (InvalidOrder, PaymentDeclined)):
        status_code, body = 400, CheckoutResponse(success=False, message=outcome.message)
    elif isinstance(outcome, RemoteFailure):
        status_code, body = 500, CheckoutResponse(success=False, message=INTERNAL_ERROR_MESSAGE)
    else:
        raise TypeError(f"Unknown checkout outcome: {outcome!r}")

    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


def is_json_request(request: Request) -> bool:
    """True when the body is declared as JSON; other bodies are ignored like an empty payload."""
    content_type = request.headers.get("content-type", "")
    media_type = content_type.split(";", 1)[0].strip().lower()
    return media_type == "application/json" or media_type.endswith("+json")


def create_app(settings: Settings, payment_client=None) -> FastAPI:
    """
    Builds the FastAPI application.

    Args:
        settings (Settings): Application settings.
        payment_client (optional): Object with an async `create_checkout_session(params)`
            method. Defaults to a StripePaymentClient built from the settings.

    Returns:
        FastAPI: The configured application.
    """
    if payment_client is None:
        payment_client = StripePaymentClient(settings.stripe_secret_key, timeout=settings.payment_timeout_seconds)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        log.info(f"Server running on port {settings.port}")
        yield
        if hasattr(payment_client, "aclose"):
            await payment_client.aclose()
        log.info("Checkout service stopped.")

    app = FastAPI(title="Checkout Service", lifespan=lifespan)
    app.state.settings = settings
    app.state.payment_client = payment_client

    # Global Error Handler
    # Registered before CORSMiddleware so the CORS layer wraps the 500 response too.
    @app.middleware("http")
    async def unhandled_error(request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as exc:
            log.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
            return JSONResponse(
                status_code=500,
                content=CheckoutResponse(success=False, message=INTERNAL_ERROR_MESSAGE).model_dump(exclude_none=True),
            )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_url],
        allow_methods=["GET", "POST"],
        allow_credentials=True,
    )

    # API Endpoint: Frontend → Checkout Service
    @app.post("/order")
    async def create_order(request: Request):
        """
        Validates the cart and creates a Stripe Checkout session.

        Request body:
            items (list): Cart items with id, name, price (rupees) and quantity.
            address (str): Delivery address, forwarded as session metadata.

        Returns:
            JSONResponse: `{"success": true, "id": ...}` or `{"success": false, "message": ...}`.
        """
        payload = {}
        if is_json_request(request):
            raw = await request.body()
            if raw.strip():
                payload = json.loads(raw)

        outcome = await process_checkout(payload, request.app.state.payment_client, request.app.state.settings)
        return outcome_to_response(outcome)

    # Health Check Endpoint
    @app.get("/")
    def health_check():
        return {"success": True, "error": False}

    return app


def run():
    """
    Starts the checkout service with uvicorn.

    Exits with status 1 if the settings cannot be loaded (e.g. STRIPE_SECRET_KEY missing).
    """
    try:
        settings = load_settings()
    except ConfigurationError as e:
        setup_logging()
        log.critical(f"Error: {e}")
        sys.exit(1)

    setup_logging(settings.log_level, settings.log_file)
    app = create_app(settings)
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    run()
