from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from hirelens.ai.errors import ModelCallError
from hirelens.ai.gateway import ModelGateway
from hirelens.schemas.analysis import AtsAnalysis, ExtractedData, ScoredAnalysis, Scores
from hirelens.schemas.jobs import (
    JobAlert,
    JobPosting,
    JobSearchCriteria,
    ResumeJobMatch,
    UserPreferences,
    WebJobSearchResult,
    WebJobSearchResults,
)
from hirelens.schemas.resume import (
    BulletList,
    BulletSelection,
    CoverLetter,
    ResumeComparison,
    ResumeOptimization,
    ResumeVersion,
    SkillGapAnalysis,
)
from hirelens.schemas.salary import SalaryNegotiation, SalarySpread
from hirelens.scoring.engine import DEFAULT_RULES, ExtractedAttributes, ScoringRules, compute_score
from hirelens.services import prompts
from hirelens.utils.ids import make_id
from hirelens.utils.url_validator import extract_source_from_url, is_valid_job_url

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

MAX_ALERT_POSTINGS = 10
TOP_KEYWORDS = 5
MIN_COVER_LETTER_CHARS = 50
MIN_DESCRIPTION_CHARS = 200
MIN_DESCRIPTION_WORDS = 50
GENERIC_DESCRIPTION_MARKERS = ("example", "placeholder", "lorem ipsum")
GENERIC_COMPANY_NAMES = {"abc company", "tech corp", "xyz corp"}

_COMPANY_RE = re.compile(r"- ([^-]+) -")


def _invalid(message: str) -> ModelCallError:
    return ModelCallError(message, code="llm_invalid", status_code=502)


def _validate(model: type[ModelT], payload: dict[str, Any], tool_slug: str) -> ModelT:
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        logger.warning("model_response_invalid tool=%s errors=%s", tool_slug, exc.error_count())
        raise _invalid("The AI response did not match the expected format. Please try again.") from exc


def _drop_nulls(payload: dict[str, Any]) -> dict[str, Any]:
    cleaned = {key: value for key, value in payload.items() if value is not None}
    col = cleaned.get("costOfLivingAnalysis")
    if isinstance(col, dict):
        cleaned["costOfLivingAnalysis"] = {key: value for key, value in col.items() if value is not None}
    elif col is None:
        cleaned["costOfLivingAnalysis"] = {}
    return cleaned


def score_extracted_data(data: ExtractedData, rules: ScoringRules = DEFAULT_RULES) -> ScoredAnalysis:
    breakdown = compute_score(
        ExtractedAttributes(
            salary_min=data.salary_min,
            salary_max=data.salary_max,
            work_location_type=data.work_location_type,
            cost_of_living_score=data.cost_of_living_analysis.cost_of_living_score,
            posting_age_in_days=data.posting_age_in_days,
        ),
        rules,
    )
    return ScoredAnalysis(
        **data.model_dump(),
        scores=Scores(
            overall=breakdown.overall,
            salary=breakdown.salary,
            location=breakdown.location,
            cost_of_living=breakdown.cost_of_living,
            red_flags=breakdown.red_flags,
        ),
    )


async def analyze_job_posting(
    gateway: ModelGateway,
    job_text: str,
    rules: ScoringRules = DEFAULT_RULES,
) -> ScoredAnalysis:
    payload = await gateway.call(
        prompts.job_posting_prompt(job_text),
        prompts.JOB_POSTING_SCHEMA,
        tool_slug="job_analysis",
    )
    data = _validate(ExtractedData, _drop_nulls(payload), "job_analysis")
    return score_extracted_data(data, rules)


async def analyze_resume_against_job(gateway: ModelGateway, resume_text: str, job_description: str) -> AtsAnalysis:
    payload = await gateway.call_with_retry(
        prompts.ats_prompt(resume_text, job_description),
        prompts.ATS_SCHEMA,
        tool_slug="ats_analysis",
        max_attempts=3,
    )
    return _validate(AtsAnalysis, payload, "ats_analysis")


async def extract_bullets_from_resume(gateway: ModelGateway, resume_text: str) -> list[str]:
    payload = await gateway.call(
        prompts.extract_bullets_prompt(resume_text),
        prompts.EXTRACT_BULLETS_SCHEMA,
        tool_slug="bullet_extraction",
    )
    result = _validate(BulletList, payload, "bullet_extraction")
    bullets = [bullet.strip() for bullet in result.bullets if bullet and bullet.strip()]
    if not bullets:
        raise _invalid("No bullet points found in the resume. Please ensure your resume contains bullet points.")
    return bullets


async def select_relevant_bullets(
    gateway: ModelGateway,
    bullets: list[str],
    job_description: str,
    max_bullets: int = 20,
) -> BulletSelection:
    payload = await gateway.call(
        prompts.select_bullets_prompt(bullets, job_description, max_bullets),
        prompts.SELECT_BULLETS_SCHEMA,
        tool_slug="bullet_selection",
    )
    selection = _validate(BulletSelection, payload, "bullet_selection")
    if not selection.selected_bullets:
        raise _invalid("No relevant bullet points were selected. Please try again.")
    return selection.model_copy(update={"selected_bullets": selection.selected_bullets[:max_bullets]})


async def optimize_resume_bullets(
    gateway: ModelGateway,
    bullets: list[str],
    job_description: str | None = None,
    full_resume_text: str | None = None,
) -> ResumeOptimization:
    payload = await gateway.call(
        prompts.optimize_bullets_prompt(bullets, job_description, full_resume_text),
        prompts.RESUME_OPTIMIZATION_SCHEMA,
        tool_slug="resume_optimizer",
    )
    optimization = _validate(ResumeOptimization, payload, "resume_optimizer")
    if not optimization.optimized_bullets:
        raise _invalid("Invalid response format. Please try again.")
    if not job_description and optimization.skill_recommendations:
        optimization = optimization.model_copy(update={"skill_recommendations": []})
    return optimization


async def generate_cover_letter(
    gateway: ModelGateway,
    resume_text: str,
    job_description: str,
    applicant_name: str | None = None,
    company_name: str | None = None,
) -> CoverLetter:
    payload = await gateway.call(
        prompts.cover_letter_prompt(resume_text, job_description, applicant_name, company_name),
        prompts.COVER_LETTER_SCHEMA,
        tool_slug="cover_letter",
    )
    letter = _validate(CoverLetter, payload, "cover_letter")
    if len(letter.content.strip()) < MIN_COVER_LETTER_CHARS:
        raise _invalid("Generated cover letter is too short. Please try again.")
    return letter


async def analyze_salary_negotiation(
    gateway: ModelGateway,
    current_offer: float,
    job_title: str,
    location: str | None = None,
    years_of_experience: float | None = None,
) -> SalaryNegotiation:
    payload = await gateway.call(
        prompts.salary_negotiation_prompt(current_offer, job_title, location, years_of_experience),
        prompts.SALARY_NEGOTIATION_SCHEMA,
        tool_slug="salary_negotiation",
    )
    if not payload.get("marketAnalysis") or not payload.get("recommendedRange"):
        raise _invalid("Invalid response format. Please try again.")
    return _validate(SalaryNegotiation, payload, "salary_negotiation")


async def analyze_salary_spread(
    gateway: ModelGateway,
    job_title: str,
    location: str | None = None,
    years_of_experience: float | None = None,
) -> SalarySpread:
    payload = await gateway.call(
        prompts.salary_spread_prompt(job_title, location, years_of_experience),
        prompts.SALARY_SPREAD_SCHEMA,
        tool_slug="salary_spread",
    )
    if not payload.get("data"):
        raise _invalid("Invalid salary spread data. Please try again.")
    spread = _validate(SalarySpread, payload, "salary_spread")
    return spread.model_copy(update={"job_title": job_title, "location": location})


async def compare_resume_versions(
    gateway: ModelGateway,
    resumes: list[ResumeVersion],
    job_description: str,
) -> list[ResumeComparison]:
    comparisons: list[ResumeComparison] = []
    for resume in resumes:
        try:
            payload = await gateway.call(
                prompts.resume_comparison_prompt(resume.name, resume.content, job_description),
                prompts.RESUME_COMPARISON_SCHEMA,
                tool_slug="resume_comparison",
            )
            comparison = _validate(ResumeComparison, payload, "resume_comparison")
        except ModelCallError as exc:
            logger.warning("resume_comparison_failed resume=%s code=%s", resume.id, exc.code)
            comparison = ResumeComparison(
                match_score=0,
                strengths=[],
                weaknesses=["Error analyzing this resume"],
                recommendation="Unable to analyze this resume version",
            )
        comparisons.append(comparison.model_copy(update={"resume_id": resume.id, "resume_name": resume.name}))
    return comparisons


async def analyze_skill_gap(gateway: ModelGateway, resume_text: str, job_description: str) -> SkillGapAnalysis:
    payload = await gateway.call(
        prompts.skill_gap_prompt(resume_text, job_description),
        prompts.SKILL_GAP_SCHEMA,
        tool_slug="skill_gap",
    )
    score = payload.get("overallGapScore")
    if not isinstance(score, (int, float)) or isinstance(score, bool) or not 0 <= score <= 100:
        raise _invalid("Invalid gap score. Please try again.")
    return _validate(SkillGapAnalysis, payload, "skill_gap")


def _first_line(text: str) -> str:
    for line in text.splitlines():
        if line.strip():
            return line.strip()
    return ""


def _format_money(value: float) -> str:
    return f"${value:,.0f}"


def _preference_match(job_text: str, preferences: UserPreferences) -> float:
    """Share of the given preference groups (titles, locations) the posting mentions."""
    haystack = job_text.lower()
    groups = [group for group in (preferences.job_titles, preferences.locations) if group]
    if not groups:
        return 100.0
    hits = sum(1 for group in groups if any(term.strip().lower() in haystack for term in group if term.strip()))
    return round(hits / len(groups) * 100, 1)


async def filter_job_postings(
    gateway: ModelGateway,
    job_postings: list[str],
    preferences: UserPreferences | None = None,
    rules: ScoringRules = DEFAULT_RULES,
) -> list[JobAlert]:
    preferences = preferences or UserPreferences()
    alerts: list[JobAlert] = []
    for job_text in job_postings[:MAX_ALERT_POSTINGS]:
        try:
            analysis = await analyze_job_posting(gateway, job_text, rules)
        except ModelCallError as exc:
            logger.warning("job_alert_analysis_failed code=%s: %s", exc.code, exc)
            continue

        quality = analysis.scores.overall
        if quality < preferences.min_quality_score:
            continue

        company = _COMPANY_RE.search(job_text)
        place = ", ".join(part for part in (analysis.job_city, analysis.job_state) if part)
        salary = None
        if analysis.salary_min and analysis.salary_max:
            salary = f"{_format_money(analysis.salary_min)} - {_format_money(analysis.salary_max)}"
        alerts.append(
            JobAlert(
                id=make_id("alert"),
                job_title=_first_line(job_text) or "Job Position",
                company=company.group(1).strip() if company else "Company",
                location=place or "Location TBD",
                salary=salary,
                job_description=job_text,
                quality_score=quality,
                match_score=_preference_match(job_text, preferences),
                posted_date=datetime.now(timezone.utc).isoformat(),
                source="Hirelens",
            )
        )
    alerts.sort(key=lambda alert: alert.quality_score, reverse=True)
    return alerts


async def match_resume_to_jobs(
    gateway: ModelGateway,
    resume_text: str,
    job_postings: list[JobPosting],
) -> list[ResumeJobMatch]:
    matches: list[ResumeJobMatch] = []
    for job in job_postings:
        try:
            analysis = await analyze_resume_against_job(gateway, resume_text, job.description)
        except ModelCallError as exc:
            logger.warning("job_match_failed job=%s code=%s", job.id, exc.code)
            continue
        matches.append(
            ResumeJobMatch(
                job_id=job.id,
                job_title=job.title,
                company=job.company,
                location=job.location,
                match_score=analysis.match_score,
                salary=job.salary,
                job_description=job.description,
                strengths=analysis.matching_keywords[:TOP_KEYWORDS],
                weaknesses=analysis.missing_keywords[:TOP_KEYWORDS],
                recommendation=analysis.summary,
                posted_date=job.posted_date,
            )
        )
    matches.sort(key=lambda match: match.match_score, reverse=True)
    return matches


def is_generic_description(description: str) -> bool:
    lowered = description.lower()
    return (
        len(description) < MIN_DESCRIPTION_CHARS
        or len(description.split()) < MIN_DESCRIPTION_WORDS
        or any(marker in lowered for marker in GENERIC_DESCRIPTION_MARKERS)
    )


def is_generic_company(company: str) -> bool:
    name = company.strip()
    if not name:
        return True
    lowered = name.lower()
    return lowered in GENERIC_COMPANY_NAMES or ("company" in lowered and len(name) < 15)


def validate_search_results(jobs: list[WebJobSearchResult]) -> list[WebJobSearchResult]:
    accepted: list[WebJobSearchResult] = []
    for job in jobs:
        if not is_valid_job_url(job.url):
            logger.info("job_search_rejected reason=url title=%r", job.title)
            continue
        if is_generic_description(job.description):
            logger.info("job_search_rejected reason=description title=%r", job.title)
            continue
        if is_generic_company(job.company):
            logger.info("job_search_rejected reason=company title=%r", job.title)
            continue
        accepted.append(job.model_copy(update={"source": job.source or extract_source_from_url(job.url or "")}))
    return accepted


async def _search(gateway: ModelGateway, prompt: str, tool_slug: str) -> list[WebJobSearchResult]:
    payload = await gateway.call(prompt, prompts.JOB_SEARCH_SCHEMA, tool_slug=tool_slug)
    results = _validate(WebJobSearchResults, payload, tool_slug)
    if not results.jobs:
        raise ModelCallError("No jobs found. Try adjusting your search criteria.", code="no_results", status_code=404)
    accepted = validate_search_results(results.jobs)
    logger.info("job_search_results tool=%s total=%s accepted=%s", tool_slug, len(results.jobs), len(accepted))
    if not accepted:
        raise ModelCallError(
            "No jobs with valid URLs and real descriptions were found.",
            code="no_results",
            status_code=404,
        )
    return accepted


async def search_jobs_for_criteria(gateway: ModelGateway, criteria: JobSearchCriteria) -> list[WebJobSearchResult]:
    salary = criteria.salary_range
    prompt = prompts.job_search_prompt(
        job_title=criteria.job_title,
        location=criteria.location,
        work_type=criteria.work_type,
        skills=criteria.skills,
        experience=criteria.experience,
        salary_min=salary.min if salary else None,
        salary_max=salary.max if salary else None,
    )
    return await _search(gateway, prompt, "job_search")


async def search_jobs_for_resume(gateway: ModelGateway, resume_text: str) -> list[WebJobSearchResult]:
    return await _search(gateway, prompts.resume_job_search_prompt(resume_text), "resume_job_search")
