"""
config.py — Runtime Settings for the Checkout Service

Settings are read from the process environment and from a `.env` file in the
working directory (pydantic-settings), so development setups can keep the
Stripe key out of the shell profile.

Variables:
    STRIPE_SECRET_KEY        Secret API key for Stripe (required)
    FRONTEND_URL             Base URL of the shop frontend (redirects + CORS)
    HOST / PORT              Bind address of the HTTP server
    PAYMENT_TIMEOUT_SECONDS  Upper bound for the checkout session call
    LOG_LEVEL / LOG_FILE     Logging configuration
"""

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_FRONTEND_URL = "http://localhost:5173"
DEFAULT_PORT = 2222


class ConfigurationError(RuntimeError):
    """Raised when a required setting is missing or malformed."""


class Settings(BaseSettings):
    """
    Immutable application settings, loaded from env.

    Attributes:
        stripe_secret_key (str): Secret key used to authenticate against Stripe.
        frontend_url (str): Frontend base URL without trailing slash.
        host (str): Interface the server binds to.
        port (int): Listening port.
        payment_timeout_seconds (float): Seconds to wait for Stripe before giving up.
        log_level (str): Root log level name.
        log_file (str): Log file path. Empty string disables file logging.
    """
    stripe_secret_key: str = Field(..., min_length=1, description="Stripe secret key")
    frontend_url: str = Field(default=DEFAULT_FRONTEND_URL, description="Frontend base URL")
    host: str = Field(default="0.0.0.0", description="API bind host")
    port: int = Field(default=DEFAULT_PORT, gt=0, lt=65536, description="API bind port")
    payment_timeout_seconds: float = Field(default=10.0, gt=0, description="Stripe call timeout")
    log_level: str = Field(default="INFO", description="Root log level")
    log_file: str = Field(default="checkout_service.log", description="Log file path")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    @field_validator("frontend_url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/") or DEFAULT_FRONTEND_URL

    @field_validator("log_level")
    @classmethod
    def upper_level(cls, value: str) -> str:
        return value.upper()

    @property
    def success_url(self) -> str:
        return f"{self.frontend_url}/success"

    @property
    def cancel_url(self) -> str:
        return f"{self.frontend_url}/payment/error"


def load_settings() -> Settings:
    """
    Builds the Settings object from the environment and `.env`.

    Returns:
        Settings: The validated settings.

    Raises:
        ConfigurationError: If STRIPE_SECRET_KEY is missing or a value is invalid.
    """
    try:
        return Settings()
    except ValidationError as e:
        missing = {err["loc"][0] for err in e.errors() if err["loc"]}
        if "stripe_secret_key" in missing:
            raise ConfigurationError("STRIPE_SECRET_KEY is not defined in the environment or .env file.") from e
        raise ConfigurationError(f"Invalid configuration: {e}") from e
