from __future__ import annotations

from typing import Literal

from pydantic import Field

from hirelens.schemas.common import MAX_TEXT_CHARS, CamelModel

ApplicationStatus = Literal["applied", "interview", "offer", "rejected", "withdrawn"]
AchievementCategory = Literal["resume", "application", "improvement", "milestone"]
ActivityType = Literal[
    "resume_optimized",
    "cover_letter_generated",
    "application_saved",
    "score_improved",
    "badge_earned",
]
InteractionType = Literal["view", "apply", "save", "analyze", "reach_out"]
ReachOutStatus = Literal["unread", "read", "responded"]
ActivityLevel = Literal["high", "medium", "low"]


class JobApplication(CamelModel):
    id: str
    job_title: str
    company: str
    job_description: str = ""
    applied_date: str
    status: ApplicationStatus = "applied"
    resume_score: float | None = None
    cover_letter_generated: bool | None = None
    notes: str | None = None
    follow_up_date: str | None = None
    interview_date: str | None = None


class ApplicationCreateRequest(CamelModel):
    job_title: str = Field(min_length=1, max_length=300)
    company: str = Field(min_length=1, max_length=300)
    job_description: str = Field(default="", max_length=MAX_TEXT_CHARS)
    resume_score: float | None = Field(default=None, ge=0, le=100)
    notes: str | None = Field(default=None, max_length=5000)


class ApplicationStatusUpdate(CamelModel):
    status: ApplicationStatus
    interview_date: str | None = None
    follow_up_date: str | None = None


class Achievement(CamelModel):
    id: str
    name: str
    description: str
    icon: str
    earned_date: str | None = None
    category: AchievementCategory


class LeaderboardEntry(CamelModel):
    rank: int
    score: float
    badge: str
    is_current_user: bool | None = None


class ScoreSubmitRequest(CamelModel):
    score: float = Field(ge=0, le=100)


class ActivityFeedItem(CamelModel):
    id: str
    type: ActivityType
    description: str
    timestamp: str
    score: float | None = None


class ActivityCreateRequest(CamelModel):
    type: ActivityType
    description: str = Field(min_length=1, max_length=500)
    score: float | None = None


class ResumeScoreHistory(CamelModel):
    date: str
    overall_score: float
    job_title: str | None = None
    company: str | None = None
    resume_version: str | None = None


class CompanyInteraction(CamelModel):
    job_id: str
    job_title: str
    company: str
    interaction_type: InteractionType
    timestamp: str
    applicant_id: str | None = None


class InteractionRequest(CamelModel):
    job_id: str = Field(min_length=1, max_length=300)
    job_title: str = Field(min_length=1, max_length=300)
    company: str = Field(min_length=1, max_length=300)
    interaction_type: InteractionType


class JobActivityLevel(CamelModel):
    level: ActivityLevel
    interaction_count: int
    last_interaction: str | None = None


class ActiveJob(CamelModel):
    job_id: str
    job_title: str
    company: str
    interaction_count: int
    level: ActivityLevel


class CompanyReachOut(CamelModel):
    id: str
    company: str
    job_title: str
    message: str
    timestamp: str
    status: ReachOutStatus = "unread"
    match_score: float
    salary: str | None = None
    location: str | None = None


class ReachOutSimulationRequest(CamelModel):
    job_title: str = Field(min_length=1, max_length=300)
    company: str = Field(min_length=1, max_length=300)
    match_score: float = Field(ge=0, le=100)
    location: str | None = None
    salary: str | None = None


class ScoreHistoryCreateRequest(CamelModel):
    overall_score: float = Field(ge=0, le=100)
    job_title: str | None = Field(default=None, max_length=300)
    company: str | None = Field(default=None, max_length=300)
    resume_version: str | None = Field(default=None, max_length=200)
