"""Base chat transport interface."""
from abc import ABC, abstractmethod
from typing import Sequence

from memchat.models import ChatMessage


class ChatTransport(ABC):
    """Abstract capability for sending a message history to a model.

    Each transport wraps one remote API and translates between the
    ChatMessage sequence and the service's wire format.
    """

    @abstractmethod
    def send(self, messages: Sequence[ChatMessage]) -> str:
        """Return the text of the first completion for ``messages``.

        Raises:
            ChatClientError: On any failure. Nothing is retried.
        """
        ...
