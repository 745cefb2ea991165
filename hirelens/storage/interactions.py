from __future__ import annotations

import random

from hirelens.schemas.tracking import (
    ActiveJob,
    ActivityLevel,
    CompanyInteraction,
    CompanyReachOut,
    InteractionType,
    JobActivityLevel,
)
from hirelens.utils.ids import make_id
from hirelens.storage.kv_store import KeyValueStore, utc_now_iso

INTERACTIONS_KEY = "hirelens_company_interactions"
REACH_OUTS_KEY = "hirelens_company_reach_outs"
MAX_INTERACTIONS = 1000
MAX_REACH_OUTS = 100
REACH_OUT_MIN_SCORE = 80

REACH_OUT_TEMPLATES = (
    "Hi! We noticed your profile matches our {job_title} position perfectly. We'd love to discuss this opportunity with you.",
    "Hello! Your experience aligns well with our {job_title} role. Would you be interested in a conversation?",
    "We're impressed by your background for our {job_title} position. Let's connect!",
    "Your skills match our {job_title} opening. We'd like to invite you for an interview.",
)


def activity_level(count: int) -> ActivityLevel:
    if count >= 10:
        return "high"
    if count >= 5:
        return "medium"
    return "low"


class CompanyInteractions:
    def __init__(self, store: KeyValueStore, *, rng: random.Random | None = None):
        self._store = store
        self._rng = rng or random.Random()

    def interactions(self) -> list[CompanyInteraction]:
        return [CompanyInteraction.model_validate(item) for item in self._store.get(INTERACTIONS_KEY)]

    def track(self, job_id: str, job_title: str, company: str, interaction_type: InteractionType) -> CompanyInteraction:
        interaction = CompanyInteraction(
            job_id=job_id,
            job_title=job_title,
            company=company,
            interaction_type=interaction_type,
            timestamp=utc_now_iso(),
        )
        self._store.append(
            INTERACTIONS_KEY,
            interaction.model_dump(by_alias=True, exclude_none=True),
            keep_last=MAX_INTERACTIONS,
        )
        return interaction

    def job_activity(self, job_id: str) -> JobActivityLevel:
        matching = [item for item in self.interactions() if item.job_id == job_id]
        return JobActivityLevel(
            level=activity_level(len(matching)),
            interaction_count=len(matching),
            last_interaction=matching[-1].timestamp if matching else None,
        )

    def most_active_jobs(self, limit: int = 10) -> list[ActiveJob]:
        counts: dict[str, ActiveJob] = {}
        for item in self.interactions():
            existing = counts.get(item.job_id)
            if existing is None:
                counts[item.job_id] = ActiveJob(
                    job_id=item.job_id,
                    job_title=item.job_title,
                    company=item.company,
                    interaction_count=1,
                    level="low",
                )
            else:
                existing.interaction_count += 1
        jobs = [job.model_copy(update={"level": activity_level(job.interaction_count)}) for job in counts.values()]
        jobs.sort(key=lambda job: job.interaction_count, reverse=True)
        return jobs[:limit]

    def reach_outs(self) -> list[CompanyReachOut]:
        return [CompanyReachOut.model_validate(item) for item in self._store.get(REACH_OUTS_KEY)]

    def add_reach_out(
        self,
        company: str,
        job_title: str,
        message: str,
        match_score: float,
        *,
        location: str | None = None,
        salary: str | None = None,
    ) -> CompanyReachOut:
        reach_out = CompanyReachOut(
            id=make_id("reachout"),
            company=company,
            job_title=job_title,
            message=message,
            timestamp=utc_now_iso(),
            status="unread",
            match_score=match_score,
            location=location,
            salary=salary,
        )
        self._store.prepend(
            REACH_OUTS_KEY,
            reach_out.model_dump(by_alias=True, exclude_none=True),
            keep_first=MAX_REACH_OUTS,
        )
        return reach_out

    def mark_read(self, reach_out_id: str) -> bool:
        reach_outs = self.reach_outs()
        for index, reach_out in enumerate(reach_outs):
            if reach_out.id == reach_out_id:
                reach_outs[index] = reach_out.model_copy(update={"status": "read"})
                self._store.set(
                    REACH_OUTS_KEY,
                    [item.model_dump(by_alias=True, exclude_none=True) for item in reach_outs],
                )
                return True
        return False

    def simulate_reach_out(
        self,
        job_title: str,
        company: str,
        match_score: float,
        *,
        location: str | None = None,
        salary: str | None = None,
    ) -> CompanyReachOut | None:
        if match_score < REACH_OUT_MIN_SCORE:
            return None
        message = self._rng.choice(REACH_OUT_TEMPLATES).format(job_title=job_title)
        return self.add_reach_out(company, job_title, message, match_score, location=location, salary=salary)
