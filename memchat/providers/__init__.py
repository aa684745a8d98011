"""Chat transport implementations."""
from memchat.providers.base import ChatTransport
from memchat.providers.openai_http import OpenAIChatTransport

__all__ = ["ChatTransport", "OpenAIChatTransport"]
