"""
This module provides the communication client for the external payment system used by the checkout service:
- Stripe Checkout (REST API via the official Stripe SDK, async transport on httpx)
The class encapsulates protocol logic, error translation, and connection management.
"""

import asyncio
import logging

import httpx
import stripe

log = logging.getLogger(__name__)


class PaymentServiceError(Exception):
    """Raised when the payment service could not create a checkout session."""


class CardDeclinedError(PaymentServiceError):
    """Raised when Stripe classifies the failure as a card decline."""


# --- Payment Client (Stripe REST) ---
class StripePaymentClient:
    """
    Client for Stripe Checkout.
    Creates hosted checkout sessions and translates Stripe SDK errors into
    PaymentServiceError / CardDeclinedError.
    """
    def __init__(self, api_key: str, timeout: float = 10.0):
        """
        Initializes the Stripe client with an async httpx transport and a bounded timeout.
        Network retries are disabled; a failed call is final for the request.
        Args:
            api_key (str): Stripe secret key.
            timeout (float): Seconds to wait for the session call to complete.
        """
        self.timeout = timeout
        timeout_config = httpx.Timeout(5.0, read=timeout)
        self.http_client = stripe.HTTPXClient(timeout=timeout_config)
        self.stripe = stripe.StripeClient(
            api_key,
            http_client=self.http_client,
            max_network_retries=0,
        )

    async def aclose(self):
        """Closes the underlying httpx session."""
        await self.http_client.close_async()

    async def create_checkout_session(self, params: dict) -> str:
        """
        Creates a new Stripe Checkout session.
        Args:
            params (dict): Session parameters (payment_method_types, line_items, mode,
                success_url, cancel_url, metadata).
        Returns:
            str: The session identifier (e.g. "cs_test_...").
        Raises:
            CardDeclinedError: If Stripe reports a card error.
            PaymentServiceError: On any other Stripe error, transport error or timeout.
        """
        try:
            session = await asyncio.wait_for(
                self.stripe.v1.checkout.sessions.create_async(params),
                timeout=self.timeout,
            )
        except stripe.CardError as e:
            log.warning(f"Stripe declined the card: code={e.code} message={e.user_message}")
            raise CardDeclinedError(str(e)) from e
        except stripe.StripeError as e:
            log.error(f"Stripe error ({type(e).__name__}): {e}")
            raise PaymentServiceError(str(e)) from e
        except asyncio.TimeoutError as e:
            log.error(f"Stripe did not respond within {self.timeout}s.")
            raise PaymentServiceError("Timed out waiting for the payment service.") from e
        except httpx.HTTPError as e:
            log.error(f"HTTP error while talking to Stripe: {e}")
            raise PaymentServiceError(str(e)) from e

        return session.id
