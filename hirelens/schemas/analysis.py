from __future__ import annotations

from typing import Any

from pydantic import Field, field_validator

from hirelens.schemas.common import MAX_TEXT_CHARS, CamelModel, WorkLocationType


class CostOfLivingAnalysis(CamelModel):
    cost_of_living_score: float | None = None
    reasoning: str = ""


class ExtractedData(CamelModel):
    salary_min: float | None = None
    salary_max: float | None = None
    work_location_type: WorkLocationType = "unspecified"
    job_city: str | None = None
    job_state: str | None = None
    job_country: str | None = None
    posting_age_in_days: float | None = None
    cost_of_living_analysis: CostOfLivingAnalysis = Field(default_factory=CostOfLivingAnalysis)
    overall_summary: str = ""

    @field_validator("work_location_type", mode="before")
    @classmethod
    def _normalize_location_type(cls, value: Any) -> str:
        normalized = str(value or "").strip().lower()
        if normalized not in {"remote", "hybrid", "onsite", "unspecified"}:
            return "unspecified"
        return normalized


class Scores(CamelModel):
    overall: int = Field(ge=0, le=100)
    salary: float
    location: float
    cost_of_living: float
    red_flags: float


class ScoredAnalysis(ExtractedData):
    scores: Scores


class AtsAnalysis(CamelModel):
    match_score: float = Field(ge=0, le=100)
    matching_keywords: list[str] = Field(default_factory=list)
    missing_keywords: list[str] = Field(default_factory=list)
    summary: str = ""
    suggestions: str = ""


class JobPostingRequest(CamelModel):
    job_text: str = Field(min_length=1, max_length=MAX_TEXT_CHARS)


class AtsRequest(CamelModel):
    resume_text: str = Field(min_length=1, max_length=MAX_TEXT_CHARS)
    job_description: str = Field(min_length=1, max_length=MAX_TEXT_CHARS)


class ScoreComputeRequest(CamelModel):
    salary_min: float | None = None
    salary_max: float | None = None
    work_location_type: str = "unspecified"
    cost_of_living_score: float | None = None
    posting_age_in_days: float | None = None
