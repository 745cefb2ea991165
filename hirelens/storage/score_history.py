from __future__ import annotations

from hirelens.schemas.tracking import ResumeScoreHistory
from hirelens.storage.kv_store import KeyValueStore

SCORE_HISTORY_KEY = "hirelens_score_history"
MAX_ENTRIES = 100


class ScoreHistory:
    def __init__(self, store: KeyValueStore):
        self._store = store

    def entries(self) -> list[ResumeScoreHistory]:
        return [ResumeScoreHistory.model_validate(item) for item in self._store.get(SCORE_HISTORY_KEY)]

    def add(self, entry: ResumeScoreHistory) -> ResumeScoreHistory:
        self._store.append(
            SCORE_HISTORY_KEY,
            entry.model_dump(by_alias=True, exclude_none=True),
            keep_last=MAX_ENTRIES,
        )
        return entry

    def clear(self) -> None:
        self._store.delete(SCORE_HISTORY_KEY)
