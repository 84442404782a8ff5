"""
Pydantic models for the inbound request and the outbound chat-completion payload.
"""

import re
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator

CHAT_MODEL = "gpt-4"

SYSTEM_PROMPT = (
    "You are a conversational companion intended converse actively with the user, "
    "asking questions and providing appropriate reponses to statements and questions"
)

LONE_SURROGATE = re.compile("[\ud800-\udfff]")


class UserRequest(BaseModel):
    """Body posted by the caller."""

    model_config = ConfigDict(extra="ignore")

    gpt_message: StrictStr

    @field_validator("gpt_message")
    @classmethod
    def replace_lone_surrogates(cls, value: str) -> str:
        # Unpaired \uD800-\uDFFF escapes cannot be encoded as UTF-8 on the way out
        return LONE_SURROGATE.sub("\ufffd", value)


class ChatMessage(BaseModel):
    """One conversation turn sent to the chat-completions API."""

    role: Literal["system", "user"]
    content: str


class ChatCompletionRequest(BaseModel):
    """Outbound payload: the fixed model plus a system and a user turn."""

    model: str = CHAT_MODEL
    messages: list[ChatMessage] = Field(min_length=2, max_length=2)

    @classmethod
    def for_user_message(cls, user_message: str) -> "ChatCompletionRequest":
        return cls(
            model=CHAT_MODEL,
            messages=[
                ChatMessage(role="system", content=SYSTEM_PROMPT),
                ChatMessage(role="user", content=user_message),
            ],
        )
