from __future__ import annotations

from hirelens.schemas.tracking import LeaderboardEntry
from hirelens.utils.ids import make_id
from hirelens.storage.kv_store import KeyValueStore

LEADERBOARD_KEY = "hirelens_leaderboard"
USER_ID_KEY = "hirelens_user_id"
MAX_ENTRIES = 100
MAX_DISPLAYED = 20

SAMPLE_BADGES = ("AB***", "CD***", "EF***", "GH***", "IJ***", "KL***", "MN***", "OP***", "QR***", "ST***")
SAMPLE_SCORES = (95, 92, 88, 85, 82, 80, 78, 75, 72, 70)


def badge_for(user_id: str) -> str:
    return user_id[5:7].upper() + "***"


def _ranked(entries: list[LeaderboardEntry]) -> list[LeaderboardEntry]:
    ordered = sorted(entries, key=lambda entry: entry.score, reverse=True)
    return [entry.model_copy(update={"rank": index}) for index, entry in enumerate(ordered, start=1)]


class Leaderboard:
    def __init__(self, store: KeyValueStore):
        self._store = store

    def user_id(self) -> str:
        user_id = self._store.load(USER_ID_KEY)
        if not isinstance(user_id, str) or not user_id:
            user_id = make_id("user")
            self._store.save(USER_ID_KEY, user_id)
        return user_id

    def user_badge(self) -> str:
        return badge_for(self.user_id())

    def entries(self) -> list[LeaderboardEntry]:
        badge = self.user_badge()
        entries = [LeaderboardEntry.model_validate(item) for item in self._store.get(LEADERBOARD_KEY)]
        return [
            entry.model_copy(update={"is_current_user": True}) if entry.badge == badge else entry
            for entry in entries
        ]

    def submit_score(self, score: float) -> list[LeaderboardEntry]:
        badge = self.user_badge()
        entries = [entry for entry in self.entries() if not entry.is_current_user]
        entries.append(LeaderboardEntry(rank=0, score=score, badge=badge, is_current_user=True))
        ranked = _ranked(entries)[:MAX_ENTRIES]
        self._store.set(LEADERBOARD_KEY, [entry.model_dump(by_alias=True, exclude_none=True) for entry in ranked])
        return ranked

    def with_samples(self) -> list[LeaderboardEntry]:
        entries = self.entries()
        if len(entries) < len(SAMPLE_BADGES):
            present = {entry.badge for entry in entries}
            entries.extend(
                LeaderboardEntry(rank=index, score=score, badge=badge)
                for index, (badge, score) in enumerate(zip(SAMPLE_BADGES, SAMPLE_SCORES), start=1)
                if badge not in present
            )
        return _ranked(entries)[:MAX_DISPLAYED]
