"""
Error taxonomy for the gateway.

Every error carries the HTTP status and the JSON body the client receives;
``gemini_gateway.app`` renders them with a single exception handler.
"""

from typing import Any

from gemini_gateway.setting import API_KEY_ENV_NAME

UNSUPPORTED_FORMAT_MESSAGE = "Unsupported request format. This endpoint is for OpenAI compatibility."


class GatewayError(Exception):
    """Base class for errors returned to the client as structured JSON"""

    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    @property
    def body(self) -> Any:
        return {"error": self.message}


class MissingApiKeyError(GatewayError):
    """Raised when the upstream API key is not configured"""

    def __init__(self):
        super().__init__(f"{API_KEY_ENV_NAME} is not set")


class UnsupportedFormatError(GatewayError):
    """Raised when the inbound body is not an OpenAI chat completion request"""

    status_code = 400

    def __init__(self, message: str = UNSUPPORTED_FORMAT_MESSAGE):
        super().__init__(message)


class UpstreamTransportError(GatewayError):
    """Raised when the upstream call fails before a JSON payload is received"""


class UpstreamApplicationError(GatewayError):
    """Raised when upstream answers with an ``error`` payload.

    The payload is passed through to the client verbatim.
    """

    def __init__(self, payload: dict):
        self.payload = payload
        super().__init__(str(payload.get("error")))

    @property
    def body(self) -> Any:
        return self.payload


class MalformedUpstreamResponseError(GatewayError):
    """Raised when a successful upstream payload lacks the expected text"""

    def __init__(self, detail: str):
        super().__init__(f"Malformed upstream response: {detail}")
