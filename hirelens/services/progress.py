from __future__ import annotations

import logging
import re
import sqlite3
from typing import Callable

from pydantic import ValidationError

from hirelens.schemas.analysis import AtsAnalysis, ScoredAnalysis
from hirelens.schemas.jobs import ResumeJobMatch
from hirelens.schemas.resume import ResumeOptimization, SkillGapAnalysis
from hirelens.schemas.tracking import Achievement, JobApplication, ResumeScoreHistory
from hirelens.storage.achievements import AchievementBook
from hirelens.storage.activity import ActivityFeed
from hirelens.storage.applications import ApplicationTracker
from hirelens.storage.interactions import CompanyInteractions
from hirelens.storage.kv_store import KeyValueStore, utc_now_iso
from hirelens.storage.leaderboard import Leaderboard
from hirelens.storage.score_history import ScoreHistory

logger = logging.getLogger(__name__)

_COMPANY_RE = re.compile(r"- ([^-]+) -")


def job_identity(job_text: str) -> tuple[str, str, str]:
    """(job id, title, company) guessed from the first line and a ``- Company -`` fragment."""
    title = next((line.strip() for line in job_text.splitlines() if line.strip()), "") or "Job Position"
    match = _COMPANY_RE.search(job_text)
    company = match.group(1).strip() if match else "Company"
    job_id = re.sub(r"\s+", "_", f"job_{title}_{company}").lower()
    return job_id, title, company


class ProgressRecorder:
    """Updates history, leaderboard, badges and activity after a successful analysis."""

    def __init__(self, store: KeyValueStore):
        self.applications = ApplicationTracker(store)
        self.achievements = AchievementBook(store)
        self.leaderboard = Leaderboard(store)
        self.activity = ActivityFeed(store)
        self.history = ScoreHistory(store)
        self.interactions = CompanyInteractions(store)

    def _guard(self, event: str, action: Callable[[], None]) -> None:
        try:
            action()
        except (sqlite3.Error, ValidationError):
            logger.warning("progress_record_failed event=%s", event, exc_info=True)

    def _announce(self, achievements: list[Achievement]) -> None:
        for achievement in achievements:
            self.activity.add("badge_earned", f"Earned badge: {achievement.name}")

    def _award(self, achievement_id: str) -> None:
        achievement = self.achievements.award(achievement_id)
        if achievement is not None:
            self._announce([achievement])

    def _record_score(self, score: float, job_title: str, company: str) -> None:
        self.history.add(
            ResumeScoreHistory(date=utc_now_iso(), overall_score=score, job_title=job_title, company=company)
        )
        self.leaderboard.submit_score(score)
        self._announce(self.achievements.award_for_score(score))

    def job_analyzed(self, job_text: str, analysis: ScoredAnalysis) -> None:
        def action() -> None:
            job_id, title, company = job_identity(job_text)
            overall = analysis.scores.overall
            self.interactions.track(job_id, title, company, "analyze")
            self._record_score(overall, analysis.job_city or "Job Analysis", analysis.job_state or "Company")
            self.activity.add("score_improved", f"Analyzed job posting with score of {overall}", overall)
            self.achievements.award("first_analysis")

        self._guard("job_analyzed", action)

    def resume_checked(self, job_description: str, result: AtsAnalysis) -> None:
        def action() -> None:
            job_id, title, company = job_identity(job_description)
            self.interactions.track(job_id, title, company, "analyze")
            self.interactions.simulate_reach_out(title, company, result.match_score)
            self._record_score(result.match_score, "Resume Analysis", "ATS Check")
            self.activity.add("score_improved", f"Resume match score: {result.match_score:g}", result.match_score)

        self._guard("resume_checked", action)

    def bullets_optimized(self, result: ResumeOptimization) -> None:
        def action() -> None:
            self.activity.add(
                "resume_optimized",
                f"Optimized {len(result.optimized_bullets)} resume bullets",
                result.estimated_ats_increase,
            )
            self._award("resume_optimized")

        self._guard("bullets_optimized", action)

    def cover_letter_generated(self) -> None:
        def action() -> None:
            self.activity.add("cover_letter_generated", "Generated a tailored cover letter")
            self._award("cover_letter_master")

        self._guard("cover_letter_generated", action)

    def skill_gap_analyzed(self, result: SkillGapAnalysis) -> None:
        def action() -> None:
            self.activity.add(
                "score_improved",
                f"Analyzed skill gaps with gap score of {result.overall_gap_score:g}",
                result.overall_gap_score,
            )
            self._award("skill_gap_analyzed")

        self._guard("skill_gap_analyzed", action)

    def salary_negotiated(self) -> None:
        self._guard("salary_negotiated", lambda: self._award("salary_negotiated"))

    def jobs_matched(self, matches: list[ResumeJobMatch]) -> None:
        def action() -> None:
            for match in matches:
                self.interactions.track(match.job_id, match.job_title, match.company, "view")
                self.interactions.simulate_reach_out(
                    match.job_title,
                    match.company,
                    match.match_score,
                    location=match.location,
                    salary=match.salary,
                )
            plural = "" if len(matches) == 1 else "s"
            self.activity.add("score_improved", f"Matched resume to {len(matches)} job{plural}")

        self._guard("jobs_matched", action)

    def application_saved(self, application: JobApplication) -> None:
        def action() -> None:
            job_id = re.sub(r"\s+", "_", f"job_{application.job_title}_{application.company}").lower()
            self.interactions.track(job_id, application.job_title, application.company, "apply")
            self.activity.add(
                "application_saved",
                f"Saved application for {application.job_title} at {application.company}",
            )
            count = len(self.applications.applications())
            self._announce(self.achievements.award_for_application_count(count))

        self._guard("application_saved", action)
