"""Calendar-day grouping of messages.

Hides how day buckets are labeled ("Today", "Yesterday", "Jan 5, 2025").
"""

from collections.abc import Iterable
from datetime import date, datetime, timedelta

from ..config import TODAY_LABEL, YESTERDAY_LABEL
from .models import Message


def _local_date(moment: datetime) -> date:
    # Naive datetimes are taken to already be local time
    if moment.tzinfo is not None:
        moment = moment.astimezone()
    return moment.date()


def day_label(moment: datetime, now: datetime | None = None) -> str:
    """Label the local calendar day of a moment relative to now."""
    today = _local_date(now or datetime.now().astimezone())
    day = _local_date(moment)
    if day == today:
        return TODAY_LABEL
    if day == today - timedelta(days=1):
        return YESTERDAY_LABEL
    return f"{day:%b} {day.day}, {day.year}"


def group_by_day(
    messages: Iterable[Message],
    now: datetime | None = None
) -> dict[str, list[Message]]:
    """Partition messages into day buckets.

    Bucket order is the first-occurrence order of each day and messages
    keep their relative order inside a bucket.
    """
    groups: dict[str, list[Message]] = {}
    for message in messages:
        groups.setdefault(day_label(message.timestamp, now), []).append(message)
    return groups
