from fastapi import APIRouter, Depends

from hirelens.api.deps import get_scoring_rules
from hirelens.schemas.analysis import ScoreComputeRequest, Scores
from hirelens.scoring.engine import ExtractedAttributes, ScoringRules, compute_score

router = APIRouter()


@router.post("/scores/compute", response_model=Scores)
def compute(payload: ScoreComputeRequest, rules: ScoringRules = Depends(get_scoring_rules)):
    breakdown = compute_score(
        ExtractedAttributes(
            salary_min=payload.salary_min,
            salary_max=payload.salary_max,
            work_location_type=payload.work_location_type,
            cost_of_living_score=payload.cost_of_living_score,
            posting_age_in_days=payload.posting_age_in_days,
        ),
        rules,
    )
    return Scores(
        overall=breakdown.overall,
        salary=breakdown.salary,
        location=breakdown.location,
        cost_of_living=breakdown.cost_of_living,
        red_flags=breakdown.red_flags,
    )
