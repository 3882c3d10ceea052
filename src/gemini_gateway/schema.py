import time
from typing import Literal

from pydantic import BaseModel, Field


class Message(BaseModel):
    role: Literal["system", "user", "assistant"]
    content: str


class ChatRequest(BaseModel):
    messages: list[Message]
    # Other OpenAI parameters (model, temperature, ...) are ignored.


class Part(BaseModel):
    text: str


class Content(BaseModel):
    role: Literal["user", "system", "model"]
    parts: list[Part]


class GenerateContentRequest(BaseModel):
    contents: list[Content]


class CandidateContent(BaseModel):
    parts: list[Part] = Field(min_length=1)
    role: str | None = None


class Candidate(BaseModel):
    content: CandidateContent


class GenerateContentResponse(BaseModel):
    candidates: list[Candidate] = Field(min_length=1)


class Usage(BaseModel):
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class ChatResponseMessage(BaseModel):
    role: Literal["assistant"] = "assistant"
    content: str


class Choice(BaseModel):
    index: int = 0
    message: ChatResponseMessage
    finish_reason: str = "stop"


class ChatResponse(BaseModel):
    id: str
    object: Literal["chat.completion"] = "chat.completion"
    created: int = Field(default_factory=lambda: int(time.time()))
    model: str
    choices: list[Choice]
    usage: Usage = Field(default_factory=Usage)


class Error(BaseModel):
    error: str
