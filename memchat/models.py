"""Message and wire models for the chat completion API."""
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from memchat.errors import NoChoicesError


class MessageRole(str, Enum):
    """Supported chat message roles."""
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class ChatMessage(BaseModel):
    """Individual message in a conversation."""
    role: MessageRole
    content: str


class Conversation(BaseModel):
    """Ordered, append-only message history for one session."""
    messages: List[ChatMessage] = Field(default_factory=list)

    def append_user_message(self, content: str) -> None:
        """Add user message to conversation."""
        self.messages.append(ChatMessage(role=MessageRole.USER, content=content))

    def append_assistant_message(self, content: str) -> None:
        """Add assistant message to conversation."""
        self.messages.append(ChatMessage(role=MessageRole.ASSISTANT, content=content))

    def __len__(self) -> int:
        return len(self.messages)


class ChatCompletionRequest(BaseModel):
    """Request body for the chat completions endpoint."""
    model: str
    messages: List[ChatMessage]


class CompletionMessage(BaseModel):
    role: str = MessageRole.ASSISTANT.value
    content: Optional[str] = None


class Choice(BaseModel):
    message: CompletionMessage


class ChatCompletionResponse(BaseModel):
    """Response body from the chat completions endpoint.

    Only the fields the client consumes are declared; the rest of the
    payload is ignored.
    """
    id: str = ""
    choices: List[Choice] = Field(default_factory=list)

    def first_content(self) -> str:
        """Return the text of the first completion choice.

        Raises:
            NoChoicesError: If the response carries no choices.
        """
        if not self.choices:
            raise NoChoicesError(
                f"Completion response {self.id or '(no id)'} contained no choices"
            )
        return self.choices[0].message.content or ""
