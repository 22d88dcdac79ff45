"""Avatar and identity resolution.

Maps a model identifier and a message role to a display descriptor. The
set of model families is closed; anything unrecognized resolves to the
UNKNOWN family.
"""

from dataclasses import dataclass
from enum import Enum

from .timeline.models import Role


class ModelFamily(str, Enum):
    """Closed set of generation backend families."""

    OPENAI = "openai"
    GEMINI = "gemini"
    ANTHROPIC = "anthropic"
    LOCAL = "local"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class IdentityDescriptor:
    """What a renderer needs to draw an avatar."""

    family: ModelFamily | None
    icon: str
    label: str


FAMILY_DESCRIPTORS: dict[ModelFamily, IdentityDescriptor] = {
    ModelFamily.OPENAI: IdentityDescriptor(ModelFamily.OPENAI, "openai_icon.svg", "OpenAI"),
    ModelFamily.GEMINI: IdentityDescriptor(ModelFamily.GEMINI, "gemini_icon.svg", "Gemini"),
    ModelFamily.ANTHROPIC: IdentityDescriptor(ModelFamily.ANTHROPIC, "anthropic_icon.svg", "Anthropic"),
    ModelFamily.LOCAL: IdentityDescriptor(ModelFamily.LOCAL, "ollama_icon.svg", "Local model"),
    ModelFamily.UNKNOWN: IdentityDescriptor(ModelFamily.UNKNOWN, "assistant_icon.svg", "Assistant"),
}

USER_DESCRIPTOR = IdentityDescriptor(None, "user_icon.svg", "You")

# Personas that replace the model avatar on assistant messages
AGENT_DESCRIPTORS: dict[str, IdentityDescriptor] = {
    "research": IdentityDescriptor(None, "research_agent_scott.png", "Scott (research agent)"),
    "tech": IdentityDescriptor(None, "tech_agent_jordan.png", "Jordan (tech agent)"),
}

MODEL_FAMILIES: dict[str, ModelFamily] = {
    "gpt-4o-mini": ModelFamily.OPENAI,
    "gpt-4o": ModelFamily.OPENAI,
    "chatgpt-4o-latest": ModelFamily.OPENAI,
    "o1": ModelFamily.OPENAI,
    "o1-mini": ModelFamily.OPENAI,
    "gpt-3.5-turbo-0125": ModelFamily.OPENAI,
    "gemini-2.0-flash-exp": ModelFamily.GEMINI,
    "gemini-1.5-pro": ModelFamily.GEMINI,
    "gemini-1.5-flash": ModelFamily.GEMINI,
    "claude-3-5-sonnet-20241022": ModelFamily.ANTHROPIC,
    "claude-3-5-haiku-20241022": ModelFamily.ANTHROPIC,
    "claude-3-opus-20240229": ModelFamily.ANTHROPIC,
    "mistral:latest": ModelFamily.LOCAL,
    "mixtral:8x7b": ModelFamily.LOCAL,
    "gemma2:9b": ModelFamily.LOCAL,
    "llama2:7b": ModelFamily.LOCAL,
    "llama3.3:latest": ModelFamily.LOCAL,
}

_PREFIX_FAMILIES: tuple[tuple[str, ModelFamily], ...] = (
    ("gpt-", ModelFamily.OPENAI),
    ("chatgpt-", ModelFamily.OPENAI),
    ("o1", ModelFamily.OPENAI),
    ("o3", ModelFamily.OPENAI),
    ("gemini-", ModelFamily.GEMINI),
    ("claude-", ModelFamily.ANTHROPIC),
)


def model_family(model: str | None) -> ModelFamily:
    """Family of a model identifier: table lookup first, then prefix rules."""
    if not model:
        return ModelFamily.UNKNOWN
    key = model.strip().lower()
    if key in MODEL_FAMILIES:
        return MODEL_FAMILIES[key]
    for prefix, family in _PREFIX_FAMILIES:
        if key.startswith(prefix):
            return family
    # Ollama-style "name:tag" identifiers
    if ":" in key:
        return ModelFamily.LOCAL
    return ModelFamily.UNKNOWN


def resolve_identity(
    model: str | None,
    role: Role | str,
    agent_type: str | None = None,
) -> IdentityDescriptor:
    """Descriptor for the avatar of a message."""
    if Role(role) == Role.USER:
        return USER_DESCRIPTOR
    if agent_type and agent_type in AGENT_DESCRIPTORS:
        return AGENT_DESCRIPTORS[agent_type]
    return FAMILY_DESCRIPTORS[model_family(model)]
