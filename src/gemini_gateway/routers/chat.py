import json
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.routing import APIRoute
from pydantic import ValidationError
from starlette.routing import Match

from gemini_gateway.exceptions import MissingApiKeyError, UnsupportedFormatError
from gemini_gateway.models.base import UpstreamClient
from gemini_gateway.models.gemini import GeminiModel, HttpxUpstreamClient
from gemini_gateway.schema import ChatRequest, ChatResponse
from gemini_gateway.setting import GatewayConfig, get_gateway_config

logger = logging.getLogger(__name__)


class AnyMethodRoute(APIRoute):
    """Route that runs its endpoint for every HTTP method, including unlisted ones."""

    def matches(self, scope):
        match, child_scope = super().matches(scope)
        if match == Match.PARTIAL:
            return Match.FULL, child_scope
        return match, child_scope

    async def handle(self, scope, receive, send):
        await self.app(scope, receive, send)


router = APIRouter(route_class=AnyMethodRoute)


def get_upstream_client(
    config: Annotated[GatewayConfig, Depends(get_gateway_config)],
) -> UpstreamClient:
    return HttpxUpstreamClient(timeout=config.timeout)


def has_messages(data: dict) -> bool:
    """A ``messages`` field counts when it is a list or object, or any other truthy value."""
    messages = data.get("messages")
    return isinstance(messages, (list, dict)) or bool(messages)


async def parse_chat_request(request: Request) -> ChatRequest:
    """Accept only OpenAI chat completion bodies, i.e. JSON objects with ``messages``."""
    body = await request.body()
    try:
        data = json.loads(body) if body else None
    except ValueError:
        data = None

    if not isinstance(data, dict) or not has_messages(data):
        raise UnsupportedFormatError()

    try:
        return ChatRequest.model_validate(data)
    except ValidationError as e:
        logger.warning(
            "Request validation failed: %s %s - %s",
            request.method,
            request.url.path,
            str(e).split("\n")[0],
        )
        first = e.errors()[0]
        location = ".".join(str(p) for p in first["loc"])
        raise UnsupportedFormatError(f"Invalid messages: {location}: {first['msg']}")


# Every path and method runs the same pipeline (methods below are only the documented ones);
# OPTIONS is answered by the CORS middleware.
@router.api_route(
    "/{path:path}",
    methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
    response_model=ChatResponse,
)
async def chat_completions(
    request: Request,
    config: Annotated[GatewayConfig, Depends(get_gateway_config)],
    client: Annotated[UpstreamClient, Depends(get_upstream_client)],
):
    if not config.api_key:
        raise MissingApiKeyError()

    chat_request = await parse_chat_request(request)

    model = GeminiModel(config, client)
    return await model.chat(chat_request)
