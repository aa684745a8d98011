"""Plain-text persistence for seed context and the conversation log.

Every writer opens its file in append mode, writes one record and closes it.
I/O failures are logged as warnings and never propagate to the caller.
"""
import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Union

from memchat.models import ChatMessage, MessageRole

logger = logging.getLogger(__name__)

# Go's time.RFC822 layout: "02 Jan 06 15:04 MST"; month names are always English
MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)

PathLike = Union[str, Path]


def load_important_information(path: PathLike) -> List[ChatMessage]:
    """Load seed context as one system message per non-blank line.

    Returns an empty list if the file cannot be read.
    """
    messages: List[ChatMessage] = []
    try:
        with open(path, "r", encoding="utf-8", errors="replace", newline="") as f:
            text = f.read()
    except OSError as e:
        logger.warning("Could not read important information file %s: %s", path, e)
        return []

    # Only "\n" ends a line; a bare "\r" stays part of the line
    for line in text.split("\n"):
        if line.endswith("\r"):
            line = line[:-1]
        if line.strip():
            messages.append(ChatMessage(role=MessageRole.SYSTEM, content=line))

    logger.info("Loaded %d seed messages from %s", len(messages), path)
    return messages


def _append(path: PathLike, record: str) -> bool:
    try:
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        with open(path, "a", encoding="utf-8") as f:
            f.write(record)
    except OSError as e:
        logger.warning("Could not write to %s: %s", path, e)
        return False
    return True


def write_important_information(path: PathLike, summary: str) -> bool:
    """Append ``summary`` as one line, even when it is empty."""
    return _append(path, f"{summary}\n")


def format_timestamp(now: Optional[datetime] = None) -> str:
    """Format ``now`` (default: current local time) in RFC 822 style."""
    if now is None:
        now = datetime.now().astimezone()
    elif now.tzinfo is None:
        now = now.astimezone()
    month = MONTH_ABBREVIATIONS[now.month - 1]
    return f"{now:%d} {month} {now:%y %H:%M %Z}"


def log_conversation(
    path: PathLike,
    user_message: str,
    bot_response: str,
    now: Optional[datetime] = None,
) -> bool:
    """Append one timestamped You/Bot exchange block."""
    entry = f"{format_timestamp(now)}\nYou: {user_message}\nBot: {bot_response}\n\n"
    return _append(path, entry)
