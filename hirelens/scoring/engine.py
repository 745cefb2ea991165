from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Mapping

WORK_LOCATION_TYPES = ("remote", "hybrid", "onsite", "unspecified")


@dataclass(frozen=True)
class ExtractedAttributes:
    salary_min: float | None = None
    salary_max: float | None = None
    work_location_type: str = "unspecified"
    cost_of_living_score: float | None = None
    posting_age_in_days: float | None = None


@dataclass(frozen=True)
class ScoreBreakdown:
    overall: int
    salary: float
    location: float
    cost_of_living: float
    red_flags: float

    def as_dict(self) -> dict[str, float]:
        return {
            "overall": self.overall,
            "salary": self.salary,
            "location": self.location,
            "costOfLiving": self.cost_of_living,
            "redFlags": self.red_flags,
        }


@dataclass(frozen=True)
class ScoringRules:
    """Weights and thresholds of the job-posting quality score.

    The spread and age thresholds are business rules with no derivation
    behind them; they are kept configurable rather than hard-coded.
    """

    salary_base: float = 25.0
    salary_tight_spread: float = 0.15
    salary_tight_bonus: float = 10.0
    salary_moderate_spread: float = 0.30
    salary_moderate_bonus: float = 5.0
    location_points: tuple[tuple[str, float], ...] = (
        ("remote", 20.0),
        ("hybrid", 15.0),
        ("onsite", 5.0),
        ("unspecified", 0.0),
    )
    cost_of_living_max: float = 30.0
    # (exclusive upper bound in days, points); ages past the last tier score 0.
    freshness_tiers: tuple[tuple[float, float], ...] = (
        (7.0, 15.0),
        (14.0, 12.0),
        (30.0, 7.5),
        (60.0, 3.0),
    )

    @property
    def max_total(self) -> float:
        location_max = max((points for _, points in self.location_points), default=0.0)
        freshness_max = max((points for _, points in self.freshness_tiers), default=0.0)
        return (
            self.salary_base
            + max(self.salary_tight_bonus, self.salary_moderate_bonus, 0.0)
            + location_max
            + self.cost_of_living_max
            + freshness_max
        )


DEFAULT_RULES = ScoringRules()


def _finite(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def salary_score(salary_min: Any, salary_max: Any, rules: ScoringRules = DEFAULT_RULES) -> float:
    low = _finite(salary_min)
    high = _finite(salary_max)
    if low is None or high is None:
        return 0.0

    score = rules.salary_base
    if high == 0:
        return score

    spread = (high - low) / high
    if spread < rules.salary_tight_spread:
        score += rules.salary_tight_bonus
    elif spread < rules.salary_moderate_spread:
        score += rules.salary_moderate_bonus
    return score


def location_score(work_location_type: Any, rules: ScoringRules = DEFAULT_RULES) -> float:
    key = str(work_location_type or "").strip().lower()
    for name, points in rules.location_points:
        if name == key:
            return points
    return 0.0


def cost_of_living_score(value: Any, rules: ScoringRules = DEFAULT_RULES) -> float:
    number = _finite(value)
    if number is None:
        return 0.0
    return _clamp(number, 0.0, 100.0) / 100 * rules.cost_of_living_max


def freshness_score(posting_age_in_days: Any, rules: ScoringRules = DEFAULT_RULES) -> float:
    age = _finite(posting_age_in_days)
    if age is None:
        return 0.0
    age = max(age, 0.0)
    for upper_bound, points in rules.freshness_tiers:
        if age < upper_bound:
            return points
    return 0.0


def compute_score(attrs: ExtractedAttributes, rules: ScoringRules = DEFAULT_RULES) -> ScoreBreakdown:
    salary = salary_score(attrs.salary_min, attrs.salary_max, rules)
    location = location_score(attrs.work_location_type, rules)
    cost_of_living = cost_of_living_score(attrs.cost_of_living_score, rules)
    red_flags = freshness_score(attrs.posting_age_in_days, rules)

    overall = round_half_up(salary + location + cost_of_living + red_flags)
    return ScoreBreakdown(
        overall=overall,
        salary=salary,
        location=location,
        cost_of_living=cost_of_living,
        red_flags=red_flags,
    )


def attributes_from_mapping(data: Mapping[str, Any]) -> ExtractedAttributes:
    """Build attributes from an ExtractedData-shaped payload (camelCase keys)."""
    col = data.get("costOfLivingAnalysis") or {}
    col_score = col.get("costOfLivingScore") if isinstance(col, Mapping) else None
    if col_score is None:
        col_score = data.get("costOfLivingScore")
    return ExtractedAttributes(
        salary_min=_finite(data.get("salaryMin")),
        salary_max=_finite(data.get("salaryMax")),
        work_location_type=str(data.get("workLocationType") or "unspecified"),
        cost_of_living_score=_finite(col_score),
        posting_age_in_days=_finite(data.get("postingAgeInDays")),
    )
