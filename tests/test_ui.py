"""Unit tests for TUI pieces that run without a terminal."""
import pytest

from chatline.timeline import Message, Role, TempMessage
from chatline.ui import ChatlineApp
from chatline.ui.widgets import PromptRecall


class TestPromptRecall:
    """Tests for recalling earlier prompts in the input bar."""

    def test_collects_user_prompts_in_order(self, conversation):
        recall = PromptRecall.from_messages(conversation)
        assert recall.back() == "Simpler please"
        assert recall.back() == "What is a monad?"

    def test_works_with_temporary_messages(self, temp_messages):
        recall = PromptRecall.from_messages(temp_messages)
        assert recall.back() == "tell me a joke"

    def test_back_stops_at_oldest(self):
        recall = PromptRecall(["one", "two"])
        recall.back()
        recall.back()
        assert recall.back() == "one"

    def test_forward_past_newest_clears(self):
        recall = PromptRecall(["one", "two"])
        recall.back()
        recall.back()

        assert recall.forward() == "two"
        assert recall.forward() == ""
        assert recall.recalling is False

    def test_forward_outside_recall_does_nothing(self):
        recall = PromptRecall(["one"])
        assert recall.forward() is None

    def test_no_prompts(self):
        recall = PromptRecall.from_messages([
            Message(id="a", role=Role.ASSISTANT, content="Welcome"),
            TempMessage(content="hi there", role=Role.ASSISTANT),
        ])
        assert recall.back() is None
        assert recall.recalling is False


class TestCompletionWorkers:
    """Tests for how the app schedules completion calls."""

    @pytest.mark.asyncio
    async def test_send_and_regenerate_do_not_cancel_each_other(self, store, context, monkeypatch):
        app = ChatlineApp(store, context=context)
        launched: list[dict] = []
        monkeypatch.setattr(app, "run_worker", lambda work, **kwargs: launched.append(kwargs))
        app._send("hi")
        app._regenerate("a1")

        assert [options["group"] for options in launched] == ["send", "regenerate"]
        assert not any(options["exclusive"] for options in launched)
