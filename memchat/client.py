"""Chat client exposing the plain and summarization call shapes."""
import logging
from typing import List, Sequence

from memchat.models import ChatMessage, MessageRole
from memchat.providers.base import ChatTransport

logger = logging.getLogger(__name__)

SUMMARY_INSTRUCTION = (
    "This is a conversation between an AI chat bot and a human, please extract "
    "the important information within the conversation in a format best suited "
    "for a chatbot, remove any duplicated information"
)


def build_summary_messages(messages: Sequence[ChatMessage]) -> List[ChatMessage]:
    """Return a copy of ``messages`` followed by the summarization instruction."""
    return list(messages) + [ChatMessage(role=MessageRole.USER, content=SUMMARY_INSTRUCTION)]


class ChatClient:
    """Thin front over a ChatTransport.

    Both call shapes go through the same ``transport.send``; summarization
    only pre-appends one instruction message to a copy of the history.
    """

    def __init__(self, transport: ChatTransport):
        self.transport = transport

    def complete(self, messages: Sequence[ChatMessage]) -> str:
        """Return the model's reply to ``messages``.

        Raises:
            ChatClientError: If the call fails.
        """
        return self.transport.send(list(messages))

    def summarize(self, messages: Sequence[ChatMessage]) -> str:
        """Compress the whole history into deduplicated facts.

        ``messages`` is not modified.

        Raises:
            ChatClientError: If the call fails.
        """
        summary_messages = build_summary_messages(messages)
        logger.info("Requesting summary of %d messages", len(messages))
        return self.transport.send(summary_messages)
