from __future__ import annotations

from typing import Literal

from pydantic import Field

from hirelens.schemas.common import MAX_TEXT_CHARS, CamelModel, Priority


class ExtractTextResponse(CamelModel):
    filename: str
    source_type: Literal["pdf", "docx", "txt"]
    text: str
    characters: int = Field(ge=0)
    warnings: list[str] = Field(default_factory=list)


class ResumeTextRequest(CamelModel):
    resume_text: str = Field(min_length=1, max_length=MAX_TEXT_CHARS)


class BulletList(CamelModel):
    bullets: list[str] = Field(default_factory=list)


class BulletSelectRequest(CamelModel):
    bullets: list[str] = Field(min_length=1, max_length=200)
    job_description: str = Field(min_length=1, max_length=MAX_TEXT_CHARS)
    max_bullets: int = Field(default=20, ge=1, le=50)


class BulletSelection(CamelModel):
    selected_bullets: list[str] = Field(default_factory=list)
    reasoning: str = ""


class OptimizeBulletsRequest(CamelModel):
    bullets: list[str] = Field(min_length=1, max_length=100)
    job_description: str | None = Field(default=None, max_length=MAX_TEXT_CHARS)
    full_resume_text: str | None = Field(default=None, max_length=MAX_TEXT_CHARS)


class OptimizedResumeBullet(CamelModel):
    original: str
    optimized: str
    improvement_reason: str = ""
    ats_score_increase: float = 0


class SkillRecommendation(CamelModel):
    skill: str
    example_bullet: str = ""
    reason: str = ""
    priority: Priority = "medium"


class ResumeOptimization(CamelModel):
    original_bullets: list[str] = Field(default_factory=list)
    optimized_bullets: list[OptimizedResumeBullet] = Field(default_factory=list)
    overall_improvement: str = ""
    estimated_ats_increase: float = 0
    skill_recommendations: list[SkillRecommendation] = Field(default_factory=list)


class CoverLetterRequest(CamelModel):
    resume_text: str = Field(min_length=1, max_length=MAX_TEXT_CHARS)
    job_description: str = Field(min_length=1, max_length=MAX_TEXT_CHARS)
    applicant_name: str | None = Field(default=None, max_length=200)
    company_name: str | None = Field(default=None, max_length=200)


class CoverLetter(CamelModel):
    content: str
    tone: str = ""
    highlights: list[str] = Field(default_factory=list)


class ResumeVersion(CamelModel):
    id: str = Field(min_length=1, max_length=100)
    name: str = Field(min_length=1, max_length=200)
    content: str = Field(min_length=1, max_length=MAX_TEXT_CHARS)


class ResumeCompareRequest(CamelModel):
    resumes: list[ResumeVersion] = Field(min_length=1, max_length=5)
    job_description: str = Field(min_length=1, max_length=MAX_TEXT_CHARS)


class ResumeComparison(CamelModel):
    resume_id: str = ""
    resume_name: str = ""
    match_score: float = Field(default=0, ge=0, le=100)
    strengths: list[str] = Field(default_factory=list)
    weaknesses: list[str] = Field(default_factory=list)
    recommendation: str = ""


class SkillGapRequest(CamelModel):
    resume_text: str = Field(min_length=1, max_length=MAX_TEXT_CHARS)
    job_description: str = Field(min_length=1, max_length=MAX_TEXT_CHARS)


class LearningRecommendation(CamelModel):
    skill: str
    resources: list[str] = Field(default_factory=list)
    priority: Priority = "medium"


class SkillGapAnalysis(CamelModel):
    current_skills: list[str] = Field(default_factory=list)
    required_skills: list[str] = Field(default_factory=list)
    missing_skills: list[str] = Field(default_factory=list)
    learning_recommendations: list[LearningRecommendation] = Field(default_factory=list)
    overall_gap_score: float
