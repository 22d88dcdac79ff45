"""Text formatting utilities for message metadata.

Hides how response statistics and model identifiers are displayed.
"""

from ..timeline.models import Message, TempMessage


def format_response_time(response_time_ms: int) -> str:
    """Seconds with two decimals, or NA when unknown (0)."""
    if response_time_ms <= 0:
        return "NA"
    return f"{response_time_ms / 1000:.2f}s"


def format_response_meta(message: Message | TempMessage) -> str:
    """One-line summary of an assistant response.

    Example:
        "⏱️ 1.25s · 📝 42 chars · 📜 17 tokens"
    """
    tokens = message.response_tokens or 0
    return (
        f"⏱️ {format_response_time(message.response_time_ms)} · "
        f"📝 {len(message.content)} chars · "
        f"📜 {tokens} tokens"
    )


def format_model_name(name: str) -> str:
    """Display name for a model identifier ("gpt-4o-mini" -> "GPT 4o Mini")."""
    parts = []
    for part in name.split("-"):
        if part.lower() == "gpt":
            parts.append("GPT")
        elif part.isdigit():
            parts.append(part)
        else:
            parts.append(part[:1].upper() + part[1:])
    return " ".join(parts)
