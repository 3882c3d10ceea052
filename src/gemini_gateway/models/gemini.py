import json
import logging

import httpx
from pydantic import ValidationError

from gemini_gateway.exceptions import (
    MalformedUpstreamResponseError,
    UpstreamApplicationError,
    UpstreamTransportError,
)
from gemini_gateway.models.base import BaseChatModel, UpstreamClient
from gemini_gateway.schema import (
    ChatRequest,
    ChatResponse,
    ChatResponseMessage,
    Choice,
    Content,
    GenerateContentRequest,
    GenerateContentResponse,
    Part,
    Usage,
)
from gemini_gateway.setting import DEBUG, GatewayConfig

logger = logging.getLogger(__name__)

# OpenAI role -> Gemini role, anything else is passed through.
ROLE_MAPPING = {"assistant": "model"}


class HttpxUpstreamClient(UpstreamClient):
    """Upstream transport backed by ``httpx.AsyncClient``."""

    def __init__(self, timeout: float | None = None, transport: httpx.AsyncBaseTransport | None = None):
        self.timeout = timeout
        self.transport = transport

    async def post_json(self, url: str, params: dict[str, str], body: dict) -> object:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(
                    url,
                    params=params,
                    json=body,
                    headers={"Content-Type": "application/json"},
                )
            return response.json()
        except httpx.HTTPError as e:
            logger.error("Upstream request failed: %s", e)
            raise UpstreamTransportError(str(e) or e.__class__.__name__)
        except ValueError as e:
            logger.error("Upstream returned a non-JSON body: %s", e)
            raise UpstreamTransportError(str(e))


class GeminiModel(BaseChatModel):
    def __init__(self, config: GatewayConfig, client: UpstreamClient):
        self.config = config
        self.client = client

    async def chat(self, chat_request: ChatRequest) -> ChatResponse:
        """Translate, call Gemini once and translate the answer back."""
        message_id = self.generate_message_id()
        payload = await self._invoke_gemini(chat_request)
        chat_response = self._create_response(
            model=self.config.model,
            message_id=message_id,
            content=self._extract_text(payload),
        )
        if DEBUG:
            logger.info("Proxy response :" + chat_response.model_dump_json())
        return chat_response

    async def _invoke_gemini(self, chat_request: ChatRequest) -> dict:
        args = self._parse_request(chat_request)
        if DEBUG:
            logger.info("Gemini request: " + args.model_dump_json())
            logger.info("Gemini endpoint: %s?key=***", self.config.endpoint)

        payload = await self.client.post_json(
            self.config.endpoint,
            params={"key": self.config.api_key},
            body=args.model_dump(),
        )
        if isinstance(payload, dict) and payload.get("error"):
            logger.error("Gemini returned an error: %s", json.dumps(payload["error"]))
            raise UpstreamApplicationError(payload)
        return payload

    def _parse_request(self, chat_request: ChatRequest) -> GenerateContentRequest:
        return GenerateContentRequest(contents=self._parse_messages(chat_request))

    def _parse_messages(self, chat_request: ChatRequest) -> list[Content]:
        """Convert the OpenAI message history to Gemini contents.

        One content entry per message, in conversation order, e.g.
        ``{"role": "assistant", "content": "Hi"}`` becomes
        ``{"role": "model", "parts": [{"text": "Hi"}]}``.
        """
        return [
            Content(
                role=ROLE_MAPPING.get(message.role, message.role),
                parts=[Part(text=message.content)],
            )
            for message in chat_request.messages
        ]

    @staticmethod
    def _extract_text(payload: object) -> str:
        """Return ``candidates[0].content.parts[0].text`` from a Gemini payload."""
        try:
            response = GenerateContentResponse.model_validate(payload)
        except ValidationError as e:
            logger.error("Unexpected Gemini payload: %s", payload)
            first = e.errors()[0]
            location = ".".join(str(p) for p in first["loc"]) or "payload"
            raise MalformedUpstreamResponseError(f"{location}: {first['msg']}")
        return response.candidates[0].content.parts[0].text

    def _create_response(self, model: str, message_id: str, content: str) -> ChatResponse:
        # Gemini does not report token counts here, usage stays at zero.
        return ChatResponse(
            id=message_id,
            model=model,
            choices=[
                Choice(
                    index=0,
                    message=ChatResponseMessage(role="assistant", content=content),
                    finish_reason="stop",
                )
            ],
            usage=Usage(),
        )
