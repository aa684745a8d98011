"""Tests for the interactive ChatSession loop."""
import json
from unittest.mock import Mock

import httpx
import pytest

from memchat.client import SUMMARY_INSTRUCTION, ChatClient
from memchat.errors import ChatAPIError, NoChoicesError
from memchat.models import ChatMessage, MessageRole
from memchat.providers.openai_http import OpenAIChatTransport
from memchat.session import ChatSession

pytestmark = pytest.mark.unit


def scripted_input(lines):
    """Return an input function that replays ``lines`` then raises EOFError."""
    remaining = list(lines)
    prompts = []

    def _input(prompt):
        prompts.append(prompt)
        if not remaining:
            raise EOFError
        return remaining.pop(0)

    _input.prompts = prompts
    return _input


@pytest.fixture
def mock_client():
    client = Mock(spec=ChatClient)
    client.complete.return_value = "hi there"
    client.summarize.return_value = "- likes tea"
    return client


@pytest.fixture
def paths(tmp_path):
    return tmp_path / "important_information.txt", tmp_path / "conversations.log"


@pytest.fixture
def make_session(mock_client, paths):
    """Build a session with scripted input and captured output."""
    info_path, log_path = paths

    def _make(lines, seed_messages=None, client=None):
        output = []
        session = ChatSession(
            client=client or mock_client,
            important_info_path=info_path,
            conversation_log_path=log_path,
            seed_messages=seed_messages,
            input_fn=scripted_input(lines),
            output_fn=lambda *args: output.append(" ".join(str(a) for a in args)),
        )
        return session, output

    return _make


class TestHandleInput:
    """Test a single turn of the loop."""

    def test_exit_sentinel_stops(self, make_session, mock_client):
        session, _ = make_session([])
        assert session.handle_input("exit") is False
        mock_client.complete.assert_not_called()
        assert session.messages == []

    @pytest.mark.parametrize("line", [" exit", "exit ", "Exit", "EXIT", "exit\t", ""])
    def test_near_sentinels_are_normal_turns(self, make_session, mock_client, line):
        session, _ = make_session([])
        assert session.handle_input(line) is True
        mock_client.complete.assert_called_once()
        assert session.messages[0].content == line

    def test_successful_turn_appends_user_then_assistant(self, make_session, paths):
        session, output = make_session([])

        session.handle_input("hello")

        assert [(m.role, m.content) for m in session.messages] == [
            (MessageRole.USER, "hello"),
            (MessageRole.ASSISTANT, "hi there"),
        ]
        assert output == ["Bot: hi there"]
        log_text = paths[1].read_text()
        assert log_text.endswith("\nYou: hello\nBot: hi there\n\n")
        assert log_text.count("You: ") == 1

    def test_failed_turn_appends_user_only(self, make_session, mock_client, paths):
        mock_client.complete.side_effect = ChatAPIError(401, "Incorrect API key provided")
        session, output = make_session([])

        assert session.handle_input("hello") is True

        assert [(m.role, m.content) for m in session.messages] == [(MessageRole.USER, "hello")]
        assert output == ["Error getting response: HTTP 401: Incorrect API key provided"]
        assert not paths[1].exists()

    def test_no_choices_is_a_handled_failure(self, make_session, mock_client):
        mock_client.complete.side_effect = NoChoicesError("Completion response 1 contained no choices")
        session, output = make_session([])

        session.handle_input("hello")

        assert len(session.messages) == 1
        assert output[0].startswith("Error getting response:")

    def test_full_history_is_sent(self, make_session, mock_client):
        seed = [ChatMessage(role=MessageRole.SYSTEM, content="Name is Sam")]
        sent = []
        mock_client.complete.side_effect = lambda messages: sent.append(list(messages)) or "ok"
        session, _ = make_session([], seed_messages=seed)

        session.handle_input("first")
        session.handle_input("second")

        assert [m.content for m in sent[0]] == ["Name is Sam", "first"]
        assert [m.content for m in sent[1]] == ["Name is Sam", "first", "ok", "second"]


class TestRun:
    """Test the full loop including exit handling."""

    def test_exit_with_zero_turns_summarizes_and_saves(self, make_session, mock_client, paths):
        session, output = make_session(["exit"])

        session.run()

        mock_client.complete.assert_not_called()
        mock_client.summarize.assert_called_once()
        assert output == ["Conversation Summary:\n - likes tea"]
        assert paths[0].read_text() == "- likes tea\n"

    def test_prompts_each_turn(self, make_session):
        session, _ = make_session(["a", "b", "exit"])
        session.run()
        assert session._input.prompts == ["You: ", "You: ", "You: "]

    def test_summary_failure_writes_empty_line(self, make_session, mock_client, paths):
        mock_client.summarize.side_effect = ChatAPIError(500, "server error")
        session, output = make_session(["exit"])

        session.run()

        assert output == ["Error summarizing conversation: HTTP 500: server error"]
        assert paths[0].read_text() == "\n"

    def test_summary_appends_to_existing_file(self, make_session, paths):
        paths[0].write_text("older fact\n")
        session, _ = make_session(["hello", "exit"])

        session.run()

        assert paths[0].read_text() == "older fact\n- likes tea\n"

    def test_summarize_receives_history_and_does_not_change_it(self, make_session, mock_client):
        session, _ = make_session(["hello", "exit"])

        session.run()

        summarized = mock_client.summarize.call_args[0][0]
        assert [m.content for m in summarized] == ["hello", "hi there"]
        assert len(session.messages) == 2

    def test_end_of_input_behaves_like_exit(self, make_session, mock_client, paths):
        session, _ = make_session(["hello"])

        session.run()

        assert mock_client.complete.call_count == 1
        mock_client.summarize.assert_called_once()
        assert paths[0].read_text() == "- likes tea\n"

    def test_one_log_block_per_successful_turn(self, make_session, mock_client, paths):
        mock_client.complete.side_effect = ["one", ChatAPIError(503, "busy"), "three"]
        session, _ = make_session(["a", "b", "c", "exit"])

        session.run()

        log_text = paths[1].read_text()
        assert log_text.count("You: ") == 2
        assert "You: a\nBot: one\n\n" in log_text
        assert "You: c\nBot: three\n\n" in log_text
        assert "You: b" not in log_text
        assert [m.role for m in session.messages] == [
            MessageRole.USER, MessageRole.ASSISTANT,
            MessageRole.USER,
            MessageRole.USER, MessageRole.ASSISTANT,
        ]


class TestSessionOverHttp:
    """Run a session against a real transport with a mocked HTTP layer."""

    def test_summarize_request_has_history_plus_instruction(self, make_session, paths):
        bodies = []

        def handler(request):
            bodies.append(json.loads(request.content))
            reply = "summary" if len(bodies) == 2 else "pong"
            return httpx.Response(
                200, json={"id": str(len(bodies)), "choices": [{"message": {"role": "assistant", "content": reply}}]},
            )

        transport = OpenAIChatTransport(
            api_key="sk-test",
            endpoint="https://api.example.test/v1/chat/completions",
            model="gpt-3.5-turbo",
            http_client=httpx.Client(transport=httpx.MockTransport(handler)),
        )
        seed = [ChatMessage(role=MessageRole.SYSTEM, content="Name is Sam")]
        session, output = make_session(["ping", "exit"], seed_messages=seed, client=ChatClient(transport))

        session.run()

        assert bodies[0]["messages"] == [
            {"role": "system", "content": "Name is Sam"},
            {"role": "user", "content": "ping"},
        ]
        assert bodies[1]["messages"] == [
            {"role": "system", "content": "Name is Sam"},
            {"role": "user", "content": "ping"},
            {"role": "assistant", "content": "pong"},
            {"role": "user", "content": SUMMARY_INSTRUCTION},
        ]
        assert len(session.messages) == 3
        assert output == ["Bot: pong", "Conversation Summary:\n summary"]
        assert paths[0].read_text() == "summary\n"

    def test_empty_choices_does_not_crash_the_loop(self, make_session, paths):
        def handler(request):
            return httpx.Response(200, json={"id": "1", "choices": []})

        transport = OpenAIChatTransport(
            api_key="sk-test",
            endpoint="https://api.example.test/v1/chat/completions",
            model="gpt-3.5-turbo",
            http_client=httpx.Client(transport=httpx.MockTransport(handler)),
        )
        session, output = make_session(["hello", "exit"], client=ChatClient(transport))

        session.run()

        assert output[0].startswith("Error getting response:")
        assert output[1].startswith("Error summarizing conversation:")
        assert paths[0].read_text() == "\n"
