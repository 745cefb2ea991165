from fastapi import APIRouter, Depends, Query, Response, status

from hirelens.api.deps import get_progress, not_found
from hirelens.schemas.tracking import (
    Achievement,
    ActiveJob,
    ActivityCreateRequest,
    ActivityFeedItem,
    ApplicationCreateRequest,
    ApplicationStatusUpdate,
    CompanyInteraction,
    CompanyReachOut,
    InteractionRequest,
    JobActivityLevel,
    JobApplication,
    LeaderboardEntry,
    ReachOutSimulationRequest,
    ResumeScoreHistory,
    ScoreHistoryCreateRequest,
    ScoreSubmitRequest,
)
from hirelens.services.progress import ProgressRecorder
from hirelens.storage.kv_store import utc_now_iso

router = APIRouter()


@router.get("/applications", response_model=list[JobApplication])
def list_applications(progress: ProgressRecorder = Depends(get_progress)):
    return progress.applications.applications()


@router.post("/applications", response_model=JobApplication, status_code=status.HTTP_201_CREATED)
def create_application(payload: ApplicationCreateRequest, progress: ProgressRecorder = Depends(get_progress)):
    application = progress.applications.create(
        payload.job_title,
        payload.company,
        payload.job_description,
        resume_score=payload.resume_score,
        notes=payload.notes,
    )
    progress.application_saved(application)
    return application


@router.patch("/applications/{application_id}/status", response_model=JobApplication)
def update_application_status(
    application_id: str,
    payload: ApplicationStatusUpdate,
    progress: ProgressRecorder = Depends(get_progress),
):
    application = progress.applications.update_status(
        application_id,
        payload.status,
        interview_date=payload.interview_date,
        follow_up_date=payload.follow_up_date,
    )
    if application is None:
        raise not_found("Application")
    return application


@router.delete("/applications/{application_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_application(application_id: str, progress: ProgressRecorder = Depends(get_progress)):
    if not progress.applications.delete(application_id):
        raise not_found("Application")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/achievements")
def list_achievements(progress: ProgressRecorder = Depends(get_progress)):
    return {
        "earned": [item.model_dump(by_alias=True) for item in progress.achievements.earned()],
        "definitions": [item.model_dump(by_alias=True) for item in progress.achievements.definitions()],
    }


@router.post("/achievements/{achievement_id}", response_model=Achievement | None)
def award_achievement(achievement_id: str, progress: ProgressRecorder = Depends(get_progress)):
    return progress.achievements.award(achievement_id)


@router.get("/leaderboard", response_model=list[LeaderboardEntry])
def leaderboard(progress: ProgressRecorder = Depends(get_progress)):
    return progress.leaderboard.with_samples()


@router.post("/leaderboard", response_model=list[LeaderboardEntry])
def submit_score(payload: ScoreSubmitRequest, progress: ProgressRecorder = Depends(get_progress)):
    return progress.leaderboard.submit_score(payload.score)


@router.get("/activity", response_model=list[ActivityFeedItem])
def activity_feed(
    samples: bool = Query(default=True),
    progress: ProgressRecorder = Depends(get_progress),
):
    if samples:
        return progress.activity.with_samples()
    return progress.activity.items()


@router.post("/activity", response_model=ActivityFeedItem, status_code=status.HTTP_201_CREATED)
def add_activity(payload: ActivityCreateRequest, progress: ProgressRecorder = Depends(get_progress)):
    return progress.activity.add(payload.type, payload.description, payload.score)


@router.delete("/activity", status_code=status.HTTP_204_NO_CONTENT)
def clear_activity(progress: ProgressRecorder = Depends(get_progress)):
    progress.activity.clear()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/score-history", response_model=list[ResumeScoreHistory])
def score_history(progress: ProgressRecorder = Depends(get_progress)):
    return progress.history.entries()


@router.post("/score-history", response_model=ResumeScoreHistory, status_code=status.HTTP_201_CREATED)
def add_score_history(payload: ScoreHistoryCreateRequest, progress: ProgressRecorder = Depends(get_progress)):
    return progress.history.add(
        ResumeScoreHistory(
            date=utc_now_iso(),
            overall_score=payload.overall_score,
            job_title=payload.job_title,
            company=payload.company,
            resume_version=payload.resume_version,
        )
    )


@router.delete("/score-history", status_code=status.HTTP_204_NO_CONTENT)
def clear_score_history(progress: ProgressRecorder = Depends(get_progress)):
    progress.history.clear()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/interactions", response_model=CompanyInteraction, status_code=status.HTTP_201_CREATED)
def track_interaction(payload: InteractionRequest, progress: ProgressRecorder = Depends(get_progress)):
    return progress.interactions.track(payload.job_id, payload.job_title, payload.company, payload.interaction_type)


@router.get("/interactions/jobs/{job_id}/activity", response_model=JobActivityLevel)
def job_activity(job_id: str, progress: ProgressRecorder = Depends(get_progress)):
    return progress.interactions.job_activity(job_id)


@router.get("/interactions/most-active", response_model=list[ActiveJob])
def most_active_jobs(
    limit: int = Query(default=10, ge=1, le=100),
    progress: ProgressRecorder = Depends(get_progress),
):
    return progress.interactions.most_active_jobs(limit)


@router.get("/reach-outs", response_model=list[CompanyReachOut])
def reach_outs(progress: ProgressRecorder = Depends(get_progress)):
    return progress.interactions.reach_outs()


@router.post("/reach-outs/simulate", response_model=CompanyReachOut | None)
def simulate_reach_out(payload: ReachOutSimulationRequest, progress: ProgressRecorder = Depends(get_progress)):
    return progress.interactions.simulate_reach_out(
        payload.job_title,
        payload.company,
        payload.match_score,
        location=payload.location,
        salary=payload.salary,
    )


@router.post("/reach-outs/{reach_out_id}/read", status_code=status.HTTP_204_NO_CONTENT)
def mark_reach_out_read(reach_out_id: str, progress: ProgressRecorder = Depends(get_progress)):
    if not progress.interactions.mark_read(reach_out_id):
        raise not_found("Reach-out")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
