from __future__ import annotations

from hirelens.schemas.tracking import ApplicationStatus, JobApplication
from hirelens.utils.ids import make_id
from hirelens.storage.kv_store import KeyValueStore, utc_now_iso

APPLICATIONS_KEY = "hirelens_applications"


class ApplicationTracker:
    def __init__(self, store: KeyValueStore):
        self._store = store

    def applications(self) -> list[JobApplication]:
        return [JobApplication.model_validate(item) for item in self._store.get(APPLICATIONS_KEY)]

    def get(self, application_id: str) -> JobApplication | None:
        return next((app for app in self.applications() if app.id == application_id), None)

    def save(self, application: JobApplication) -> JobApplication:
        applications = self.applications()
        for index, existing in enumerate(applications):
            if existing.id == application.id:
                applications[index] = application
                break
        else:
            applications.append(application)
        self._store.set(APPLICATIONS_KEY, [_dump(app) for app in applications])
        return application

    def delete(self, application_id: str) -> bool:
        applications = self.applications()
        remaining = [app for app in applications if app.id != application_id]
        self._store.set(APPLICATIONS_KEY, [_dump(app) for app in remaining])
        return len(remaining) != len(applications)

    def create(
        self,
        job_title: str,
        company: str,
        job_description: str = "",
        *,
        resume_score: float | None = None,
        notes: str | None = None,
    ) -> JobApplication:
        application = JobApplication(
            id=make_id("app"),
            job_title=job_title,
            company=company,
            job_description=job_description,
            applied_date=utc_now_iso(),
            status="applied",
            resume_score=resume_score,
            notes=notes,
        )
        return self.save(application)

    def update_status(
        self,
        application_id: str,
        status: ApplicationStatus,
        *,
        interview_date: str | None = None,
        follow_up_date: str | None = None,
    ) -> JobApplication | None:
        application = self.get(application_id)
        if application is None:
            return None
        updates: dict[str, object] = {"status": status}
        if interview_date:
            updates["interview_date"] = interview_date
        if follow_up_date:
            updates["follow_up_date"] = follow_up_date
        return self.save(application.model_copy(update=updates))


def _dump(application: JobApplication) -> dict:
    return application.model_dump(by_alias=True, exclude_none=True)
