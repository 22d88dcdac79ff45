"""Pytest configuration and shared fixtures."""
from datetime import datetime, timedelta, timezone

import pytest

from chatline.session import ManualTicker, SessionContext, TemporarySession
from chatline.store import InMemoryKeyValueStore
from chatline.timeline import Message, Role, TempMessage, Timeline


@pytest.fixture
def fixed_now():
    """A fixed local "now" used for day grouping."""
    return datetime(2025, 3, 10, 12, 0).astimezone()


@pytest.fixture
def store():
    """Return an empty in-memory key-value store."""
    return InMemoryKeyValueStore()


@pytest.fixture
def conversation():
    """Return a user/assistant/user/assistant conversation as messages."""
    base = datetime(2025, 3, 10, 9, 0, tzinfo=timezone.utc)
    return [
        Message(id="m1", role=Role.USER, content="What is a monad?", timestamp=base),
        Message(id="m2", role=Role.ASSISTANT, content="A monoid in the category of endofunctors.",
                timestamp=base + timedelta(seconds=5), model="gpt-4o-mini"),
        Message(id="m3", role=Role.USER, content="Simpler please", timestamp=base + timedelta(minutes=1)),
        Message(id="m4", role=Role.ASSISTANT, content="A wrapper with bind.",
                timestamp=base + timedelta(minutes=1, seconds=3), model="gpt-4o-mini"),
    ]


@pytest.fixture
def timeline(conversation):
    """Return a store-less durable timeline holding the sample conversation."""
    return Timeline("conv-1", conversation)


@pytest.fixture
def temp_messages():
    """Return temporary messages in user/assistant order."""
    return [
        TempMessage(content="hi", role=Role.USER),
        TempMessage(content="hello!", role=Role.ASSISTANT, model="gpt-4o"),
        TempMessage(content="tell me a joke", role=Role.USER),
        TempMessage(content="no", role=Role.ASSISTANT, model="gpt-4o"),
    ]


@pytest.fixture
def ticker():
    """Return a manually advanced ticker."""
    return ManualTicker()


@pytest.fixture
def session(ticker):
    """Return a temporary session with a 5 second budget."""
    return TemporarySession(ticker=ticker, budget_seconds=5)


@pytest.fixture
def context(session):
    """Return a session context around the short session."""
    return SessionContext(session)
