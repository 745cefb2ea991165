from fastapi import APIRouter, Depends, Request

from hirelens.ai.errors import ModelCallError
from hirelens.ai.gateway import ModelGateway
from hirelens.api.deps import get_gateway, get_progress, raise_model_http_error
from hirelens.core.rate_limit import rate_limit
from hirelens.schemas.salary import SalaryNegotiation, SalaryNegotiationRequest, SalarySpread, SalarySpreadRequest
from hirelens.services import analysis_service
from hirelens.services.progress import ProgressRecorder

router = APIRouter()


@router.post("/salary/negotiation", response_model=SalaryNegotiation)
@rate_limit()
async def salary_negotiation(
    request: Request,
    payload: SalaryNegotiationRequest,
    gateway: ModelGateway = Depends(get_gateway),
    progress: ProgressRecorder = Depends(get_progress),
):
    _ = request
    try:
        result = await analysis_service.analyze_salary_negotiation(
            gateway,
            payload.current_offer,
            payload.job_title,
            payload.location,
            payload.years_of_experience,
        )
    except ModelCallError as exc:
        raise_model_http_error(exc)
    progress.salary_negotiated()
    return result


@router.post("/salary/spread", response_model=SalarySpread)
@rate_limit()
async def salary_spread(
    request: Request,
    payload: SalarySpreadRequest,
    gateway: ModelGateway = Depends(get_gateway),
):
    _ = request
    try:
        return await analysis_service.analyze_salary_spread(
            gateway,
            payload.job_title,
            payload.location,
            payload.years_of_experience,
        )
    except ModelCallError as exc:
        raise_model_http_error(exc)
