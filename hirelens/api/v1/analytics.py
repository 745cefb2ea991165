from fastapi import APIRouter, Depends, Query

from hirelens.analytics import db as analytics_db
from hirelens.api.deps import require_admin

router = APIRouter()


@router.get("/analytics/summary")
def summary(_: None = Depends(require_admin)):
    return analytics_db.get_summary()


@router.get("/analytics/latest")
def latest(
    limit: int = Query(default=20, ge=1, le=200),
    _: None = Depends(require_admin),
):
    return analytics_db.get_latest(limit=limit)
