import time
from abc import ABC, abstractmethod

from gemini_gateway.schema import ChatRequest, ChatResponse


class UpstreamClient(ABC):
    """Represent the transport used to reach the upstream provider.

    The gateway only needs a single JSON POST, so tests can substitute any
    implementation without touching the network.
    """

    @abstractmethod
    async def post_json(self, url: str, params: dict[str, str], body: dict) -> object:
        """Send one JSON POST request and return the decoded JSON payload.

        Implementations raise ``UpstreamTransportError`` when the request fails
        or the response is not JSON.
        """
        pass


class BaseChatModel(ABC):
    """Represent a basic chat model

    Currently, only Gemini is supported.
    """

    @abstractmethod
    async def chat(self, chat_request: ChatRequest) -> ChatResponse:
        """Handle a basic chat completion requests."""
        pass

    @staticmethod
    def generate_message_id() -> str:
        return "chatcmpl-" + str(int(time.time() * 1000))
