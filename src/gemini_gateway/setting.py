import os
from dataclasses import dataclass

TITLE = "Gemini OpenAI Gateway"
SUMMARY = "OpenAI-Compatible Chat Completions API for Google Gemini"
VERSION = "0.1.0"
DESCRIPTION = """
Use OpenAI-Compatible Chat Completions requests against Google Gemini models.
"""

API_KEY_ENV_NAME = "GEMINI_API_KEY"

DEBUG = os.environ.get("DEBUG", "false").lower() != "false"
GEMINI_API_BASE = os.environ.get("GEMINI_API_BASE", "https://generativelanguage.googleapis.com/v1beta")
GEMINI_MODEL = os.environ.get("GEMINI_MODEL", "gemini-pro")


def parse_timeout(raw: str) -> float | None:
    """Parse ``GEMINI_TIMEOUT`` in seconds, an empty value means no timeout."""
    raw = raw.strip()
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"GEMINI_TIMEOUT must be a number of seconds, got {raw!r}") from None


GEMINI_TIMEOUT = parse_timeout(os.environ.get("GEMINI_TIMEOUT", ""))

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Authorization, Content-Type",
}


@dataclass(frozen=True)
class GatewayConfig:
    api_key: str | None
    api_base: str = GEMINI_API_BASE
    model: str = GEMINI_MODEL
    timeout: float | None = GEMINI_TIMEOUT

    @property
    def endpoint(self) -> str:
        return f"{self.api_base.rstrip('/')}/models/{self.model}:generateContent"


def get_gateway_config() -> GatewayConfig:
    """Build the gateway configuration for one request.

    The API key is read from the environment on every call so an operator can
    set it without restarting the process.
    """
    return GatewayConfig(api_key=os.environ.get(API_KEY_ENV_NAME) or None)
