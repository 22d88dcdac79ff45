"""Tests for the command-line interface and settings."""
import sys

import pytest
from pydantic import TypeAdapter
from typer.testing import CliRunner

from chatline.cli.app import app
from chatline.config import load_settings
from chatline.store import InMemoryKeyValueStore
from chatline.timeline import Message, Role, Timeline

runner = CliRunner()


class TestSettings:
    """Tests for environment-driven settings."""

    def test_defaults(self, monkeypatch):
        for name in ("CHATLINE_STORE", "CHATLINE_MODEL", "CHATLINE_SESSION_SECONDS"):
            monkeypatch.delenv(name, raising=False)
        settings = load_settings()
        assert settings.store_backend == "memory"
        assert settings.model == "gpt-4o-mini"
        assert settings.session_seconds == 1800

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("CHATLINE_STORE", "sqlite")
        monkeypatch.setenv("CHATLINE_SESSION_SECONDS", "60")
        settings = load_settings()
        assert settings.store_backend == "sqlite"
        assert settings.session_seconds == 60

    def test_session_budget_must_be_positive(self, monkeypatch):
        monkeypatch.setenv("CHATLINE_SESSION_SECONDS", "0")
        with pytest.raises(ValueError):
            load_settings()


class TestCli:
    """Tests for CLI commands that do not start the TUI."""

    def test_render(self, tmp_path):
        source = tmp_path / "answer.md"
        source.write_text("# Result\n\n|a|b|\n\n|-|-|\n|1|2|\nDone.", encoding="utf-8")

        result = runner.invoke(app, ["render", str(source)])

        assert result.exit_code == 0
        assert "Result" in result.stdout
        assert "Done." in result.stdout

    def test_render_normalized(self, tmp_path):
        source = tmp_path / "answer.md"
        source.write_text("|a|\n|-|\ntext", encoding="utf-8")

        result = runner.invoke(app, ["render", "--normalized", str(source)])

        assert result.exit_code == 0
        assert "|-|\n\ntext" in result.stdout

    def test_render_missing_file(self, tmp_path):
        result = runner.invoke(app, ["render", str(tmp_path / "missing.md")])
        assert result.exit_code != 0

    def test_history_of_unknown_conversation(self):
        result = runner.invoke(app, ["history", "does-not-exist"])
        assert result.exit_code == 0
        assert "No messages" in result.stdout

    @pytest.fixture
    def saved_store(self, monkeypatch):
        """Point the CLI at an in-memory store holding conversation c1."""
        messages = [
            Message(id="u1", role=Role.USER, content="hi"),
            Message(id="a1", role=Role.ASSISTANT, content="hello"),
            Message(id="u2", role=Role.USER, content="again"),
            Message(id="a2", role=Role.ASSISTANT, content="hello twice", model="gpt-4o-mini"),
        ]
        payload = TypeAdapter(list[Message]).dump_json(messages).decode("utf-8")
        store = InMemoryKeyValueStore({Timeline.store_key("c1"): payload})
        monkeypatch.setattr(sys.modules["chatline.cli.app"], "get_store", lambda settings: store)
        return store

    def test_history_assistant_without_model(self, saved_store):
        result = runner.invoke(app, ["history", "c1"])

        assert result.exit_code == 0, result.output
        assert "hi" in result.stdout
        assert "hello" in result.stdout

    def test_history_shows_model_name(self, saved_store):
        result = runner.invoke(app, ["history", "c1"])

        assert result.exit_code == 0, result.output
        assert "GPT 4o Mini" in result.stdout

    def test_conversations_lists_saved(self, saved_store):
        result = runner.invoke(app, ["conversations"])

        assert result.exit_code == 0, result.output
        assert "c1" in result.stdout
