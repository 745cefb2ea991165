from __future__ import annotations

from datetime import datetime, timedelta, timezone

from hirelens.schemas.tracking import ActivityFeedItem, ActivityType
from hirelens.utils.ids import make_id
from hirelens.storage.kv_store import KeyValueStore, utc_now_iso

ACTIVITY_KEY = "hirelens_activity_feed"
MAX_ITEMS = 50
MIN_DISPLAYED = 5
MAX_DISPLAYED = 20

# (id, type, description, hours ago, score)
_SAMPLES: tuple[tuple[str, ActivityType, str, int, float | None], ...] = (
    ("sample_1", "resume_optimized", "Someone optimized their resume and improved their score by 15 points", 2, 85),
    ("sample_2", "score_improved", "A user achieved a new personal best score of 92", 5, 92),
    ("sample_3", "badge_earned", 'Someone earned the "Elite Performer" badge', 8, None),
    ("sample_4", "cover_letter_generated", "A user generated a tailored cover letter", 12, None),
    ("sample_5", "application_saved", "Someone saved a new job application to their tracker", 24, None),
)


def _sample_items(now: datetime) -> list[ActivityFeedItem]:
    return [
        ActivityFeedItem(
            id=item_id,
            type=kind,
            description=description,
            timestamp=(now - timedelta(hours=hours)).isoformat(),
            score=score,
        )
        for item_id, kind, description, hours, score in _SAMPLES
    ]


def _timestamp(item: ActivityFeedItem) -> datetime:
    try:
        parsed = datetime.fromisoformat(item.timestamp)
    except ValueError:
        return datetime.min.replace(tzinfo=timezone.utc)
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


class ActivityFeed:
    def __init__(self, store: KeyValueStore):
        self._store = store

    def items(self) -> list[ActivityFeedItem]:
        return [ActivityFeedItem.model_validate(item) for item in self._store.get(ACTIVITY_KEY)]

    def add(self, kind: ActivityType, description: str, score: float | None = None) -> ActivityFeedItem:
        item = ActivityFeedItem(
            id=make_id("activity"),
            type=kind,
            description=description,
            timestamp=utc_now_iso(),
            score=score,
        )
        self._store.prepend(ACTIVITY_KEY, item.model_dump(by_alias=True, exclude_none=True), keep_first=MAX_ITEMS)
        return item

    def clear(self) -> None:
        self._store.delete(ACTIVITY_KEY)

    def with_samples(self, now: datetime | None = None) -> list[ActivityFeedItem]:
        items = self.items()
        if len(items) >= MIN_DISPLAYED:
            return items[:MAX_DISPLAYED]
        combined = items + _sample_items(now or datetime.now(timezone.utc))
        combined.sort(key=_timestamp, reverse=True)
        return combined[:MAX_DISPLAYED]
