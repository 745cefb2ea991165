from __future__ import annotations

from pydantic import Field

from hirelens.schemas.common import MAX_TEXT_CHARS, CamelModel, WorkType


class JobPosting(CamelModel):
    id: str = Field(min_length=1, max_length=200)
    title: str = Field(min_length=1, max_length=300)
    company: str = Field(default="", max_length=300)
    location: str = Field(default="", max_length=300)
    description: str = Field(min_length=1, max_length=MAX_TEXT_CHARS)
    salary: str | None = None
    posted_date: str = ""


class JobMatchRequest(CamelModel):
    resume_text: str = Field(min_length=1, max_length=MAX_TEXT_CHARS)
    job_postings: list[JobPosting] = Field(min_length=1, max_length=10)


class ResumeJobMatch(CamelModel):
    job_id: str
    job_title: str
    company: str
    location: str
    match_score: float
    salary: str | None = None
    job_description: str
    strengths: list[str] = Field(default_factory=list)
    weaknesses: list[str] = Field(default_factory=list)
    recommendation: str = ""
    posted_date: str = ""
    source: str | None = None
    url: str | None = None


class UserPreferences(CamelModel):
    job_titles: list[str] = Field(default_factory=list)
    locations: list[str] = Field(default_factory=list)
    min_quality_score: float = Field(default=50, ge=0, le=100)


class JobAlertRequest(CamelModel):
    job_postings: list[str] = Field(min_length=1, max_length=50)
    preferences: UserPreferences = Field(default_factory=UserPreferences)


class JobAlert(CamelModel):
    id: str
    job_title: str
    company: str
    location: str
    salary: str | None = None
    job_description: str
    quality_score: int
    match_score: float
    posted_date: str
    source: str
    url: str | None = None


class SalaryRangeFilter(CamelModel):
    min: float | None = None
    max: float | None = None


class JobSearchCriteria(CamelModel):
    job_title: str | None = Field(default=None, max_length=200)
    location: str | None = Field(default=None, max_length=200)
    skills: list[str] = Field(default_factory=list, max_length=30)
    experience: str | None = Field(default=None, max_length=100)
    salary_range: SalaryRangeFilter | None = None
    work_type: WorkType | None = None


class ResumeJobSearchRequest(CamelModel):
    resume_text: str = Field(min_length=1, max_length=MAX_TEXT_CHARS)


class WebJobSearchResult(CamelModel):
    title: str
    company: str = ""
    location: str = ""
    description: str = ""
    salary: str | None = None
    url: str | None = None
    posted_date: str | None = None
    source: str | None = None


class WebJobSearchResults(CamelModel):
    jobs: list[WebJobSearchResult] = Field(default_factory=list)
