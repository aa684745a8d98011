"""Interactive conversation loop."""
import logging
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Union

from memchat.client import ChatClient
from memchat.errors import ChatClientError
from memchat.models import ChatMessage, Conversation
from memchat.storage import log_conversation, write_important_information

logger = logging.getLogger(__name__)

EXIT_SENTINEL = "exit"
USER_PROMPT = "You: "
BOT_LABEL = "Bot:"


class ChatSession:
    """One chat session: the message history plus where it is persisted.

    The loop reads a line, sends the whole history to the client and
    prints the reply until the exact line ``exit`` is read. On exit the
    history is summarized and the summary appended to the
    important-information file.
    """

    def __init__(
        self,
        client: ChatClient,
        important_info_path: Union[str, Path],
        conversation_log_path: Union[str, Path],
        seed_messages: Optional[Iterable[ChatMessage]] = None,
        input_fn: Optional[Callable[[str], str]] = None,
        output_fn: Optional[Callable[..., None]] = None,
    ):
        self.client = client
        self.important_info_path = important_info_path
        self.conversation_log_path = conversation_log_path
        self.conversation = Conversation(messages=list(seed_messages or []))
        self._input = input_fn or input
        self._output = output_fn or print

    @property
    def messages(self) -> List[ChatMessage]:
        return self.conversation.messages

    def handle_input(self, line: str) -> bool:
        """Process one input line.

        Returns False when the line is the exit sentinel, True otherwise.
        """
        if line == EXIT_SENTINEL:
            return False

        self.conversation.append_user_message(line)
        try:
            response = self.client.complete(self.conversation.messages)
        except ChatClientError as e:
            logger.debug("Turn abandoned: %s", e)
            self._output("Error getting response:", e)
            return True

        self._output(BOT_LABEL, response)
        self.conversation.append_assistant_message(response)
        log_conversation(self.conversation_log_path, line, response)
        return True

    def summarize_and_save(self) -> str:
        """Summarize the session and append the result to the important-information file.

        The summary line is written even if summarization failed, in which
        case an empty line is recorded.
        """
        summary = ""
        try:
            summary = self.client.summarize(self.conversation.messages)
        except ChatClientError as e:
            self._output("Error summarizing conversation:", e)
        else:
            self._output("Conversation Summary:\n", summary)
        write_important_information(self.important_info_path, summary)
        return summary

    def run(self) -> None:
        """Read lines until ``exit`` (or end of input), then summarize."""
        while True:
            try:
                line = self._input(USER_PROMPT)
            except EOFError:
                logger.info("End of input; treating as %r", EXIT_SENTINEL)
                break
            if not self.handle_input(line):
                break
        self.summarize_and_save()
