from fastapi import APIRouter, Depends, Request

from hirelens.ai.errors import ModelCallError
from hirelens.ai.gateway import ModelGateway
from hirelens.api.deps import get_gateway, get_progress, get_scoring_rules, raise_model_http_error
from hirelens.core.rate_limit import rate_limit
from hirelens.schemas.analysis import JobPostingRequest, ScoredAnalysis
from hirelens.schemas.jobs import (
    JobAlert,
    JobAlertRequest,
    JobMatchRequest,
    JobSearchCriteria,
    ResumeJobMatch,
    ResumeJobSearchRequest,
    WebJobSearchResult,
)
from hirelens.scoring.engine import ScoringRules
from hirelens.services import analysis_service
from hirelens.services.progress import ProgressRecorder

router = APIRouter()


@router.post("/jobs/analyze", response_model=ScoredAnalysis)
@rate_limit()
async def analyze_job(
    request: Request,
    payload: JobPostingRequest,
    gateway: ModelGateway = Depends(get_gateway),
    rules: ScoringRules = Depends(get_scoring_rules),
    progress: ProgressRecorder = Depends(get_progress),
):
    _ = request
    try:
        analysis = await analysis_service.analyze_job_posting(gateway, payload.job_text, rules)
    except ModelCallError as exc:
        raise_model_http_error(exc)
    progress.job_analyzed(payload.job_text, analysis)
    return analysis


@router.post("/jobs/alerts", response_model=list[JobAlert])
@rate_limit()
async def job_alerts(
    request: Request,
    payload: JobAlertRequest,
    gateway: ModelGateway = Depends(get_gateway),
    rules: ScoringRules = Depends(get_scoring_rules),
):
    _ = request
    return await analysis_service.filter_job_postings(gateway, payload.job_postings, payload.preferences, rules)


@router.post("/jobs/match", response_model=list[ResumeJobMatch])
@rate_limit()
async def match_jobs(
    request: Request,
    payload: JobMatchRequest,
    gateway: ModelGateway = Depends(get_gateway),
    progress: ProgressRecorder = Depends(get_progress),
):
    _ = request
    matches = await analysis_service.match_resume_to_jobs(gateway, payload.resume_text, payload.job_postings)
    progress.jobs_matched(matches)
    return matches


@router.post("/jobs/search", response_model=list[WebJobSearchResult])
@rate_limit()
async def search_jobs(
    request: Request,
    payload: JobSearchCriteria,
    gateway: ModelGateway = Depends(get_gateway),
):
    _ = request
    try:
        return await analysis_service.search_jobs_for_criteria(gateway, payload)
    except ModelCallError as exc:
        raise_model_http_error(exc)


@router.post("/jobs/search-for-resume", response_model=list[WebJobSearchResult])
@rate_limit()
async def search_jobs_for_resume(
    request: Request,
    payload: ResumeJobSearchRequest,
    gateway: ModelGateway = Depends(get_gateway),
):
    _ = request
    try:
        return await analysis_service.search_jobs_for_resume(gateway, payload.resume_text)
    except ModelCallError as exc:
        raise_model_http_error(exc)
