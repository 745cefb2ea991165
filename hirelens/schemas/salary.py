from __future__ import annotations

from pydantic import Field

from hirelens.schemas.common import CamelModel


class SalaryNegotiationRequest(CamelModel):
    current_offer: float = Field(gt=0)
    job_title: str = Field(min_length=1, max_length=200)
    location: str | None = Field(default=None, max_length=200)
    years_of_experience: float | None = Field(default=None, ge=0, le=70)


class CurrentOffer(CamelModel):
    salary: float
    location: str | None = None


class MarketAnalysis(CamelModel):
    market_rate: float
    percentile: float
    comparison: str = ""


class RecommendedRange(CamelModel):
    min: float
    max: float
    target: float


class SalaryNegotiation(CamelModel):
    current_offer: CurrentOffer
    market_analysis: MarketAnalysis
    cost_of_living_adjustment: float = 0
    recommended_range: RecommendedRange
    negotiation_script: str = ""
    talking_points: list[str] = Field(default_factory=list)
    risks: list[str] = Field(default_factory=list)


class SalarySpreadRequest(CamelModel):
    job_title: str = Field(min_length=1, max_length=200)
    location: str | None = Field(default=None, max_length=200)
    years_of_experience: float | None = Field(default=None, ge=0, le=70)


class SalaryPercentile(CamelModel):
    percentile: float
    salary: float


class SalaryRange(CamelModel):
    min: float
    max: float


class SalarySpread(CamelModel):
    job_title: str = ""
    location: str | None = None
    data: list[SalaryPercentile] = Field(default_factory=list)
    market_average: float
    market_median: float
    range: SalaryRange
    sample_size: float = 0
