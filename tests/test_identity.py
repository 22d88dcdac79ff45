"""Unit tests for avatar identity resolution."""
import pytest

from chatline.identity import (
    FAMILY_DESCRIPTORS,
    USER_DESCRIPTOR,
    ModelFamily,
    model_family,
    resolve_identity,
)
from chatline.timeline import Role


class TestModelFamily:
    """Tests for mapping model identifiers to families."""

    @pytest.mark.parametrize("model,family", [
        ("gpt-4o-mini", ModelFamily.OPENAI),
        ("o1-mini", ModelFamily.OPENAI),
        ("gpt-5-turbo", ModelFamily.OPENAI),
        ("gemini-1.5-flash", ModelFamily.GEMINI),
        ("claude-3-5-haiku-20241022", ModelFamily.ANTHROPIC),
        ("llama3.3:latest", ModelFamily.LOCAL),
        ("qwen2:7b", ModelFamily.LOCAL),
        ("some-new-model", ModelFamily.UNKNOWN),
        ("", ModelFamily.UNKNOWN),
        (None, ModelFamily.UNKNOWN),
    ])
    def test_families(self, model, family):
        assert model_family(model) == family

    def test_lookup_ignores_case_and_whitespace(self):
        assert model_family("  GPT-4o ") == ModelFamily.OPENAI


class TestResolveIdentity:
    """Tests for avatar descriptors."""

    def test_user_messages_use_user_avatar(self):
        assert resolve_identity("gpt-4o", Role.USER) is USER_DESCRIPTOR
        assert resolve_identity(None, "user") is USER_DESCRIPTOR

    def test_assistant_uses_model_family(self):
        descriptor = resolve_identity("claude-3-opus-20240229", Role.ASSISTANT)
        assert descriptor == FAMILY_DESCRIPTORS[ModelFamily.ANTHROPIC]

    def test_unknown_model_gets_fallback(self):
        descriptor = resolve_identity("mystery", Role.ASSISTANT)
        assert descriptor.family == ModelFamily.UNKNOWN

    def test_agent_persona_overrides_model(self):
        descriptor = resolve_identity("gpt-4o", Role.ASSISTANT, agent_type="research")
        assert descriptor.label.startswith("Scott")

    def test_unknown_agent_type_falls_back_to_model(self):
        descriptor = resolve_identity("gpt-4o", Role.ASSISTANT, agent_type="none")
        assert descriptor.family == ModelFamily.OPENAI

    def test_every_family_has_descriptor(self):
        assert set(FAMILY_DESCRIPTORS) == set(ModelFamily)
