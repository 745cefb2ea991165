import logging

import sentry_sdk
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from hirelens.api.v1.analytics import router as analytics_router
from hirelens.api.v1.health import router as health_router
from hirelens.api.v1.jobs import router as jobs_router
from hirelens.api.v1.resume import router as resume_router
from hirelens.api.v1.salary import router as salary_router
from hirelens.api.v1.scores import router as scores_router
from hirelens.api.v1.tracker import router as tracker_router
from hirelens.core.config import settings
from hirelens.core.cors import cors_allow_origin_regex, cors_allowed_origins
from hirelens.core.lifespan import lifespan
from hirelens.core.rate_limit import limiter

load_dotenv()
logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s %(message)s")
if settings.sentry_dsn:
    sentry_sdk.init(dsn=settings.sentry_dsn)

app = FastAPI(title="Hirelens API", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_allowed_origins(),
    allow_origin_regex=cors_allow_origin_regex(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)

app.include_router(health_router, prefix="/v1", tags=["Health"])
app.include_router(scores_router, prefix="/v1", tags=["Scores"])
app.include_router(jobs_router, prefix="/v1", tags=["Jobs"])
app.include_router(resume_router, prefix="/v1", tags=["Resume"])
app.include_router(salary_router, prefix="/v1", tags=["Salary"])
app.include_router(tracker_router, prefix="/v1", tags=["Tracker"])
app.include_router(analytics_router, prefix="/v1", tags=["Analytics"])
