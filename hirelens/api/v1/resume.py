from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile, status

from hirelens.ai.errors import ModelCallError
from hirelens.ai.gateway import ModelGateway
from hirelens.api.deps import get_gateway, get_progress, raise_extraction_http_error, raise_model_http_error
from hirelens.core.config import settings
from hirelens.core.rate_limit import rate_limit
from hirelens.parsing.extract import DocumentExtractionError, extract_document_text
from hirelens.schemas.analysis import AtsAnalysis, AtsRequest
from hirelens.schemas.resume import (
    BulletList,
    BulletSelectRequest,
    BulletSelection,
    CoverLetter,
    CoverLetterRequest,
    ExtractTextResponse,
    OptimizeBulletsRequest,
    ResumeCompareRequest,
    ResumeComparison,
    ResumeOptimization,
    ResumeTextRequest,
    SkillGapAnalysis,
    SkillGapRequest,
)
from hirelens.services import analysis_service
from hirelens.services.progress import ProgressRecorder

router = APIRouter()

ALLOWED_EXTENSIONS = {"pdf", "docx", "txt"}


@router.post("/resume/ats", response_model=AtsAnalysis)
@rate_limit()
async def resume_ats(
    request: Request,
    payload: AtsRequest,
    gateway: ModelGateway = Depends(get_gateway),
    progress: ProgressRecorder = Depends(get_progress),
):
    _ = request
    try:
        result = await analysis_service.analyze_resume_against_job(gateway, payload.resume_text, payload.job_description)
    except ModelCallError as exc:
        raise_model_http_error(exc)
    progress.resume_checked(payload.job_description, result)
    return result


@router.post("/resume/extract-text", response_model=ExtractTextResponse)
@rate_limit()
async def resume_extract_text(request: Request, file: UploadFile = File(...)):
    _ = request
    filename = file.filename or "uploaded-file"
    ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
    if ext not in ALLOWED_EXTENSIONS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unsupported file type '.{ext}'. Allowed: {', '.join(sorted(ALLOWED_EXTENSIONS))}.",
        )

    limit = settings.max_upload_bytes
    chunks: list[bytes] = []
    total = 0
    while True:
        chunk = await file.read(1024 * 64)
        if not chunk:
            break
        total += len(chunk)
        if total > limit:
            raise HTTPException(
                status_code=413,
                detail=f"File too large. Maximum allowed size is {limit // (1024 * 1024)} MB.",
            )
        chunks.append(chunk)

    try:
        document = extract_document_text(filename, b"".join(chunks), max_bytes=limit)
    except DocumentExtractionError as exc:
        raise_extraction_http_error(exc)
    return ExtractTextResponse(
        filename=filename,
        source_type=document.source_type,
        text=document.text,
        characters=len(document.text),
        warnings=document.warnings,
    )


@router.post("/resume/bullets/extract", response_model=BulletList)
@rate_limit()
async def resume_bullets_extract(
    request: Request,
    payload: ResumeTextRequest,
    gateway: ModelGateway = Depends(get_gateway),
):
    _ = request
    try:
        bullets = await analysis_service.extract_bullets_from_resume(gateway, payload.resume_text)
    except ModelCallError as exc:
        raise_model_http_error(exc)
    return BulletList(bullets=bullets)


@router.post("/resume/bullets/select", response_model=BulletSelection)
@rate_limit()
async def resume_bullets_select(
    request: Request,
    payload: BulletSelectRequest,
    gateway: ModelGateway = Depends(get_gateway),
):
    _ = request
    try:
        return await analysis_service.select_relevant_bullets(
            gateway, payload.bullets, payload.job_description, payload.max_bullets
        )
    except ModelCallError as exc:
        raise_model_http_error(exc)


@router.post("/resume/bullets/optimize", response_model=ResumeOptimization)
@rate_limit()
async def resume_bullets_optimize(
    request: Request,
    payload: OptimizeBulletsRequest,
    gateway: ModelGateway = Depends(get_gateway),
    progress: ProgressRecorder = Depends(get_progress),
):
    _ = request
    try:
        result = await analysis_service.optimize_resume_bullets(
            gateway, payload.bullets, payload.job_description, payload.full_resume_text
        )
    except ModelCallError as exc:
        raise_model_http_error(exc)
    progress.bullets_optimized(result)
    return result


@router.post("/resume/compare", response_model=list[ResumeComparison])
@rate_limit()
async def resume_compare(
    request: Request,
    payload: ResumeCompareRequest,
    gateway: ModelGateway = Depends(get_gateway),
):
    _ = request
    return await analysis_service.compare_resume_versions(gateway, payload.resumes, payload.job_description)


@router.post("/resume/skill-gap", response_model=SkillGapAnalysis)
@rate_limit()
async def resume_skill_gap(
    request: Request,
    payload: SkillGapRequest,
    gateway: ModelGateway = Depends(get_gateway),
    progress: ProgressRecorder = Depends(get_progress),
):
    _ = request
    try:
        result = await analysis_service.analyze_skill_gap(gateway, payload.resume_text, payload.job_description)
    except ModelCallError as exc:
        raise_model_http_error(exc)
    progress.skill_gap_analyzed(result)
    return result


@router.post("/cover-letter", response_model=CoverLetter)
@rate_limit()
async def cover_letter(
    request: Request,
    payload: CoverLetterRequest,
    gateway: ModelGateway = Depends(get_gateway),
    progress: ProgressRecorder = Depends(get_progress),
):
    _ = request
    try:
        result = await analysis_service.generate_cover_letter(
            gateway,
            payload.resume_text,
            payload.job_description,
            payload.applicant_name,
            payload.company_name,
        )
    except ModelCallError as exc:
        raise_model_http_error(exc)
    progress.cover_letter_generated()
    return result
