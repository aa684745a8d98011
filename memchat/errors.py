"""Exception hierarchy for memchat."""


class MemchatError(Exception):
    """Base class for all memchat errors."""


class ConfigurationError(MemchatError):
    """Invalid configuration value."""


class ChatClientError(MemchatError):
    """A completion call failed. The current turn is abandoned."""


class RequestBuildError(ChatClientError):
    """The request could not be constructed or serialized."""


class ChatTransportError(ChatClientError):
    """Network, DNS, TLS or timeout failure."""


class ChatAPIError(ChatClientError):
    """The endpoint answered with an HTTP error status."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(f"HTTP {status_code}: {message}")


class ResponseDecodeError(ChatClientError):
    """The response body was not valid JSON or did not match the schema."""


class NoChoicesError(ChatClientError):
    """The response was well-formed but carried zero completion choices."""
