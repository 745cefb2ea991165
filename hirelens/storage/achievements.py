from __future__ import annotations

from hirelens.schemas.tracking import Achievement
from hirelens.storage.kv_store import KeyValueStore, utc_now_iso

ACHIEVEMENTS_KEY = "hirelens_achievements"

ACHIEVEMENT_DEFINITIONS: tuple[Achievement, ...] = (
    Achievement(id="first_analysis", name="First Analysis", description="Analyzed your first job posting", icon="🎯", category="milestone"),
    Achievement(id="resume_optimized", name="Resume Optimizer", description="Optimized your first resume bullet", icon="✨", category="resume"),
    Achievement(id="cover_letter_master", name="Cover Letter Master", description="Generated your first cover letter", icon="📝", category="application"),
    Achievement(id="high_score_80", name="High Achiever", description="Achieved a resume score of 80+", icon="🏆", category="improvement"),
    Achievement(id="high_score_90", name="Elite Performer", description="Achieved a resume score of 90+", icon="⭐", category="improvement"),
    Achievement(id="perfect_score", name="Perfect Match", description="Achieved a perfect resume score of 100", icon="💯", category="improvement"),
    Achievement(id="five_applications", name="Job Hunter", description="Tracked 5 job applications", icon="🎯", category="application"),
    Achievement(id="ten_applications", name="Application Pro", description="Tracked 10 job applications", icon="🚀", category="application"),
    Achievement(id="skill_gap_analyzed", name="Skill Builder", description="Analyzed your skill gaps", icon="📚", category="improvement"),
    Achievement(id="salary_negotiated", name="Negotiator", description="Used salary negotiation advisor", icon="💰", category="milestone"),
)


class AchievementBook:
    def __init__(self, store: KeyValueStore):
        self._store = store

    @staticmethod
    def definitions() -> list[Achievement]:
        return list(ACHIEVEMENT_DEFINITIONS)

    def earned(self) -> list[Achievement]:
        return [Achievement.model_validate(item) for item in self._store.get(ACHIEVEMENTS_KEY)]

    def award(self, achievement_id: str) -> Achievement | None:
        """Record an achievement; ``None`` when unknown or already earned."""
        if any(item.id == achievement_id for item in self.earned()):
            return None
        definition = next((item for item in ACHIEVEMENT_DEFINITIONS if item.id == achievement_id), None)
        if definition is None:
            return None
        achievement = definition.model_copy(update={"earned_date": utc_now_iso()})
        self._store.append(ACHIEVEMENTS_KEY, achievement.model_dump(by_alias=True, exclude_none=True))
        return achievement

    def award_for_score(self, score: float) -> list[Achievement]:
        awarded: list[Achievement] = []
        for threshold, achievement_id in ((80, "high_score_80"), (90, "high_score_90"), (100, "perfect_score")):
            if score >= threshold:
                achievement = self.award(achievement_id)
                if achievement is not None:
                    awarded.append(achievement)
        return awarded

    def award_for_application_count(self, count: int) -> list[Achievement]:
        awarded: list[Achievement] = []
        for threshold, achievement_id in ((5, "five_applications"), (10, "ten_applications")):
            if count >= threshold:
                achievement = self.award(achievement_id)
                if achievement is not None:
                    awarded.append(achievement)
        return awarded
