"""Unit tests for the durable timeline."""
import logging
from datetime import datetime, timedelta

import pytest
from hypothesis import given
from hypothesis import strategies as st

from chatline.errors import NotFoundError, TimelineError
from chatline.store import InMemoryKeyValueStore
from chatline.timeline import Message, MessageStatus, Role, Timeline, day_label, group_by_day


def _alternating(count: int) -> list[Message]:
    roles = (Role.USER, Role.ASSISTANT)
    return [Message(id=f"m{i}", role=roles[i % 2], content=f"message {i}") for i in range(count)]


class FailingStore(InMemoryKeyValueStore):
    """Store whose writes always fail."""

    async def set(self, key: str, value: str) -> None:
        raise ConnectionError("store unavailable")


class TestMessage:
    """Tests for the Message model."""

    def test_create_assigns_unique_ids(self):
        first = Message.create(Role.USER, "a")
        second = Message.create(Role.USER, "a")
        assert first.id != second.id

    def test_defaults(self):
        message = Message.create("assistant")
        assert message.role == Role.ASSISTANT
        assert message.content == ""
        assert message.status == MessageStatus.COMPLETE
        assert message.response_time_ms == 0
        assert message.timestamp.tzinfo is not None

    def test_messages_are_frozen(self):
        message = Message.create(Role.USER, "hi")
        with pytest.raises(Exception):
            message.content = "changed"  # type: ignore[misc]

    def test_negative_response_time_fails(self):
        with pytest.raises(ValueError):
            Message.create(Role.ASSISTANT, "x", response_time_ms=-1)


class TestTimelineQueries:
    """Tests for read access to a timeline."""

    def test_messages_in_append_order(self, timeline):
        assert [m.id for m in timeline] == ["m1", "m2", "m3", "m4"]
        assert len(timeline) == 4

    def test_contains_by_id(self, timeline):
        assert "m2" in timeline
        assert "nope" not in timeline

    def test_index_of_unknown_raises(self, timeline):
        with pytest.raises(NotFoundError) as exc_info:
            timeline.index_of("nope")
        assert exc_info.value.ref == "nope"

    def test_snapshot_is_immutable(self, timeline):
        snapshot = timeline.messages
        timeline.append(Message.create(Role.USER, "more"))
        assert len(snapshot) == 4
        assert len(timeline) == 5


class TestDeleteMessage:
    """Tests for single-message deletion."""

    def test_removes_exactly_one(self, timeline):
        assert timeline.delete_message("m2") is True
        assert [m.id for m in timeline] == ["m1", "m3", "m4"]

    def test_unknown_id_is_noop(self, timeline):
        assert timeline.delete_message("nope") is False
        assert len(timeline) == 4

    def test_deleting_twice_is_noop(self, timeline):
        timeline.delete_message("m3")
        assert timeline.delete_message("m3") is False
        assert len(timeline) == 3

    def test_deleted_message_absent_from_grouping(self, timeline, fixed_now):
        timeline.delete_message("m1")
        grouped = timeline.grouped_by_day(fixed_now)
        assert all(m.id != "m1" for bucket in grouped.values() for m in bucket)


class TestDeleteMessagesAfter:
    """Tests for cascading deletion."""

    def test_truncates_from_position(self, timeline):
        result = timeline.delete_messages_after("m2")
        assert result.removed_count == 3
        assert result.is_single_message is True
        assert [m.id for m in timeline] == ["m1"]

    def test_truncating_last_message(self, timeline):
        result = timeline.delete_messages_after("m4")
        assert result.removed_count == 1
        assert result.is_single_message is False
        assert [m.id for m in timeline] == ["m1", "m2", "m3"]

    def test_truncating_everything(self, timeline):
        result = timeline.delete_messages_after("m1")
        assert result.removed_count == 4
        assert result.is_single_message is False
        assert len(timeline) == 0

    def test_removing_only_answer_leaves_single_prompt(self):
        timeline = Timeline("conv-2", [
            Message(id="u1", role=Role.USER, content="Hi"),
            Message(id="a2", role=Role.ASSISTANT, content="Hello"),
        ])

        result = timeline.delete_messages_after("a2")

        assert [m.content for m in timeline] == ["Hi"]
        assert result.removed_count == 1
        assert result.is_single_message is True

    def test_unknown_id_raises_and_leaves_timeline(self, timeline):
        with pytest.raises(NotFoundError):
            timeline.delete_messages_after("nope")
        assert len(timeline) == 4

    @given(st.integers(min_value=1, max_value=30), st.data())
    def test_prefix_is_kept(self, count: int, data):
        """Property test: truncation keeps exactly the prefix before the position."""
        messages = _alternating(count)
        position = data.draw(st.integers(min_value=0, max_value=count - 1))
        timeline = Timeline("conv", messages)

        result = timeline.delete_messages_after(messages[position].id)

        assert result.removed_count == count - position
        assert list(timeline.messages) == messages[:position]
        assert result.is_single_message == (position == 1)


class TestStreaming:
    """Tests for pending messages and status transitions."""

    def test_update_content_while_pending(self, timeline):
        pending = Message.create(Role.ASSISTANT, "", status=MessageStatus.PENDING)
        timeline.append(pending)
        updated = timeline.update_content(pending.id, "partial")
        assert updated.content == "partial"
        assert timeline.get(pending.id).content == "partial"

    def test_update_content_after_complete_fails(self, timeline):
        with pytest.raises(TimelineError):
            timeline.update_content("m2", "rewritten")

    def test_complete_records_fields(self, timeline):
        pending = Message.create(Role.ASSISTANT, "done", status=MessageStatus.PENDING)
        timeline.append(pending)
        completed = timeline.complete(pending.id, response_time_ms=1250, response_tokens=17)
        assert completed.status == MessageStatus.COMPLETE
        assert completed.response_time_ms == 1250
        assert completed.response_tokens == 17

    def test_complete_twice_fails(self, timeline):
        pending = Message.create(Role.ASSISTANT, "", status=MessageStatus.PENDING)
        timeline.append(pending)
        timeline.complete(pending.id, MessageStatus.ERROR)
        with pytest.raises(TimelineError):
            timeline.complete(pending.id)

    def test_complete_requires_terminal_status(self, timeline):
        pending = Message.create(Role.ASSISTANT, "", status=MessageStatus.PENDING)
        timeline.append(pending)
        with pytest.raises(TimelineError):
            timeline.complete(pending.id, MessageStatus.PENDING)


class TestDayGrouping:
    """Tests for calendar-day labels and buckets."""

    def test_labels(self, fixed_now):
        assert day_label(fixed_now - timedelta(hours=1), fixed_now) == "Today"
        assert day_label(fixed_now - timedelta(days=1), fixed_now) == "Yesterday"
        assert day_label(datetime(2025, 1, 5, 12, 0).astimezone(), fixed_now) == "Jan 5, 2025"

    def test_naive_timestamps_are_local(self, fixed_now):
        naive = fixed_now.replace(tzinfo=None)
        assert day_label(naive, fixed_now) == "Today"

    def test_buckets_in_first_occurrence_order(self, fixed_now):
        older = fixed_now - timedelta(days=3)
        messages = [
            Message(id="a", role=Role.USER, timestamp=older),
            Message(id="b", role=Role.ASSISTANT, timestamp=older + timedelta(minutes=1)),
            Message(id="c", role=Role.USER, timestamp=fixed_now - timedelta(days=1)),
            Message(id="d", role=Role.USER, timestamp=fixed_now),
        ]
        grouped = group_by_day(messages, fixed_now)

        assert list(grouped) == [day_label(older, fixed_now), "Yesterday", "Today"]
        assert [m.id for m in grouped["Today"]] == ["d"]

    def test_empty_timeline_has_no_groups(self, fixed_now):
        assert Timeline("empty").grouped_by_day(fixed_now) == {}

    def test_grouping_does_not_mutate(self, timeline, fixed_now):
        before = timeline.messages
        timeline.grouped_by_day(fixed_now)
        assert timeline.messages == before

    @given(st.lists(st.integers(min_value=0, max_value=60 * 24 * 10), max_size=25))
    def test_concatenated_buckets_reproduce_timeline(self, offsets: list[int]):
        """Property test: with ordered timestamps, buckets concatenate back to the timeline."""
        now = datetime(2025, 3, 10, 23, 59).astimezone()
        start = now - timedelta(days=10)
        messages = [
            Message(id=f"m{i}", role=Role.USER, timestamp=start + timedelta(minutes=offset))
            for i, offset in enumerate(sorted(offsets))
        ]
        grouped = group_by_day(messages, now)

        flattened = [m for bucket in grouped.values() for m in bucket]
        assert flattened == messages


class TestPersistence:
    """Tests for the store mirror of a durable timeline."""

    @pytest.mark.asyncio
    async def test_mutations_are_mirrored(self, store, conversation):
        timeline = Timeline("conv-1", store=store)
        for message in conversation:
            timeline.append(message)
        timeline.delete_message("m3")
        await timeline.flush()

        loaded = await Timeline.load(store, "conv-1")
        assert [m.id for m in loaded] == ["m1", "m2", "m4"]
        assert loaded.get("m2").content == conversation[1].content

    @pytest.mark.asyncio
    async def test_store_key_prefix(self, store):
        timeline = Timeline("abc", store=store)
        timeline.append(Message.create(Role.USER, "hi"))
        await timeline.flush()
        assert await store.keys() == ["chatline_conversation:abc"]

    @pytest.mark.asyncio
    async def test_empty_timeline_deletes_key(self, store):
        timeline = Timeline("abc", store=store)
        message = Message.create(Role.USER, "hi")
        timeline.append(message)
        await timeline.flush()

        timeline.delete_message(message.id)
        await timeline.flush()

        assert await store.get(Timeline.store_key("abc")) is None

    @pytest.mark.asyncio
    async def test_unknown_conversation_loads_empty(self, store):
        loaded = await Timeline.load(store, "missing")
        assert len(loaded) == 0

    @pytest.mark.asyncio
    async def test_failed_write_is_logged_not_raised(self, caplog):
        timeline = Timeline("abc", store=FailingStore())
        with caplog.at_level(logging.WARNING, logger="chatline.timeline.durable"):
            timeline.append(Message.create(Role.USER, "hi"))
            await timeline.flush()

        assert len(timeline) == 1
        assert "Store write failed" in caplog.text

    def test_mutation_without_event_loop_skips_write(self, store):
        timeline = Timeline("abc", store=store)
        timeline.append(Message.create(Role.USER, "hi"))
        assert len(timeline) == 1
        assert store._data == {}
