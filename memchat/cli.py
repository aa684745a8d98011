"""Command-line entry point for memchat."""
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from memchat.client import ChatClient
from memchat.config import Settings
from memchat.errors import ConfigurationError
from memchat.providers.openai_http import OpenAIChatTransport
from memchat.session import ChatSession
from memchat.storage import load_important_information

LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    """Send operational logs to stderr so they do not mix with the chat."""
    logging.basicConfig(
        level=getattr(logging, level),
        format=LOG_FORMAT,
        stream=sys.stderr,
    )


def load_environment() -> None:
    """Load a .env file from the working directory without overriding the environment."""
    env_path = Path.cwd() / ".env"
    if env_path.exists():
        load_dotenv(env_path, override=False)


def main() -> int:
    """Run one interactive chat session."""
    load_environment()
    try:
        settings = Settings.from_env()
    except ConfigurationError as e:
        configure_logging("WARNING")
        logger.error("Invalid configuration: %s", e)
        return 1

    configure_logging(settings.log_level)
    logger.info(
        "Config: endpoint=%s model=%s key_set=%s",
        settings.endpoint, settings.model, bool(settings.api_key),
    )
    if not settings.api_key:
        logger.warning("OPENAI_API_KEY is not set; requests will be rejected by the API")

    seed_messages = load_important_information(settings.important_info_path)

    with OpenAIChatTransport(
        api_key=settings.api_key,
        endpoint=settings.endpoint,
        model=settings.model,
        timeout=settings.timeout,
    ) as transport:
        session = ChatSession(
            client=ChatClient(transport),
            important_info_path=settings.important_info_path,
            conversation_log_path=settings.conversation_log_path,
            seed_messages=seed_messages,
        )
        session.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
