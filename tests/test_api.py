import json
import os
import shutil
import sys
import tempfile
import unittest
from dataclasses import replace
from pathlib import Path
from unittest.mock import patch

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# Keep API tests deterministic and offline.
os.environ.setdefault("ANALYTICS_ENABLED", "0")
os.environ.setdefault("RATE_LIMIT_ENABLED", "0")
os.environ.setdefault("AI_PROVIDER", "gemini")

from fastapi.testclient import TestClient  # noqa: E402

from hirelens.ai.gateway import ModelGateway  # noqa: E402
from hirelens.api.deps import get_gateway, get_store  # noqa: E402
from hirelens.core import security  # noqa: E402
from hirelens.core.throttle import RequestThrottle, ThrottleConfig  # noqa: E402
from hirelens.main import app  # noqa: E402
from hirelens.storage.kv_store import KeyValueStore  # noqa: E402

JOB_TEXT = "Backend Engineer - Acme - Austin\nRemote Python role."


class ScriptedClient:
    def __init__(self, *payloads):
        self.payloads = [json.dumps(item) if isinstance(item, dict) else item for item in payloads]
        self.calls = 0

    async def generate(self, prompt, schema):
        self.calls += 1
        outcome = self.payloads.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


class ApiTestCase(unittest.TestCase):
    def setUp(self):
        self.tmp_dir = tempfile.mkdtemp()
        self.store = KeyValueStore(str(Path(self.tmp_dir) / "store.db"))
        self.client_script = ScriptedClient()
        throttle = RequestThrottle(ThrottleConfig(min_delay_ms=0))
        self.gateway = ModelGateway(self.client_script, throttle, model_name="test-model")
        app.dependency_overrides[get_gateway] = lambda: self.gateway
        app.dependency_overrides[get_store] = lambda: self.store
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()
        self.store.close()
        shutil.rmtree(self.tmp_dir, ignore_errors=True)

    def script(self, *payloads):
        self.client_script.payloads.extend(
            json.dumps(item) if isinstance(item, dict) else item for item in payloads
        )


class HealthAndScoreTests(ApiTestCase):
    def test_health_reports_throttle_state(self):
        response = self.client.get("/v1/health")
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["status"], "healthy")
        self.assertEqual(body["throttle"]["pending"], 0)
        self.assertFalse(body["throttle"]["processing"])
        self.assertEqual(body["throttle"]["requestsPerMinute"], 12)

    def test_compute_score_without_model(self):
        response = self.client.post(
            "/v1/scores/compute",
            json={
                "salaryMin": 95000,
                "salaryMax": 100000,
                "workLocationType": "remote",
                "costOfLivingScore": 100,
                "postingAgeInDays": 0,
            },
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["overall"], 100)
        self.assertEqual(self.client_script.calls, 0)


class JobAnalysisApiTests(ApiTestCase):
    def test_analyze_succeeds_when_stored_progress_is_malformed(self):
        self.store.set("hirelens_leaderboard", [{"rank": 1, "badge": "ZZ***"}])
        self.script({"workLocationType": "remote", "postingAgeInDays": 2})

        response = self.client.post("/v1/jobs/analyze", json={"jobText": JOB_TEXT})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["scores"]["overall"], 35)

    def test_analyze_scores_and_records_progress(self):
        self.script(
            {
                "salaryMin": 120000,
                "salaryMax": 130000,
                "workLocationType": "remote",
                "jobCity": "Austin",
                "jobState": "TX",
                "postingAgeInDays": 2,
                "costOfLivingAnalysis": {"costOfLivingScore": 80, "reasoning": "ok"},
                "overallSummary": "Good role",
            }
        )

        response = self.client.post("/v1/jobs/analyze", json={"jobText": JOB_TEXT})

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["scores"]["overall"], 94)
        self.assertEqual(body["jobCity"], "Austin")

        history = self.client.get("/v1/score-history").json()
        self.assertEqual(history[0]["overallScore"], 94)
        earned = {item["id"] for item in self.client.get("/v1/achievements").json()["earned"]}
        self.assertIn("first_analysis", earned)
        self.assertIn("high_score_90", earned)
        activity = self.client.get("/v1/interactions/jobs/job_backend_engineer_-_acme_-_austin_acme/activity").json()
        self.assertEqual(activity["interactionCount"], 1)

    def test_invalid_model_output_is_bad_gateway(self):
        self.script("not json at all")
        response = self.client.post("/v1/jobs/analyze", json={"jobText": JOB_TEXT})
        self.assertEqual(response.status_code, 502)

    def test_empty_job_text_is_rejected(self):
        response = self.client.post("/v1/jobs/analyze", json={"jobText": ""})
        self.assertEqual(response.status_code, 422)
        self.assertEqual(self.client_script.calls, 0)

    def test_search_without_valid_results_is_not_found(self):
        self.script({"jobs": [{"title": "Engineer", "company": "ABC Company", "description": "Example"}]})
        response = self.client.post("/v1/jobs/search", json={"jobTitle": "Engineer"})
        self.assertEqual(response.status_code, 404)


class ResumeApiTests(ApiTestCase):
    def test_ats_check_records_reach_out_for_strong_match(self):
        self.script({"matchScore": 88, "matchingKeywords": ["python"], "missingKeywords": [], "summary": "Strong"})

        response = self.client.post("/v1/resume/ats", json={"resumeText": "Python dev", "jobDescription": JOB_TEXT})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["matchScore"], 88)
        reach_outs = self.client.get("/v1/reach-outs").json()
        self.assertEqual(len(reach_outs), 1)
        self.assertEqual(reach_outs[0]["status"], "unread")

    def test_ats_rate_limit_after_retry_budget(self):
        from hirelens.ai.errors import QuotaExhaustedError

        self.script(*(QuotaExhaustedError("quota", retry_after_ms=1) for _ in range(3)))

        response = self.client.post("/v1/resume/ats", json={"resumeText": "Python dev", "jobDescription": JOB_TEXT})

        self.assertEqual(response.status_code, 429)
        self.assertIn("Rate limit exceeded", response.json()["detail"])
        self.assertEqual(self.client_script.calls, 3)

    def test_extract_text_from_plain_upload(self):
        response = self.client.post(
            "/v1/resume/extract-text",
            files={"file": ("resume.txt", b"Jane Doe\n- Built APIs", "text/plain")},
        )
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["sourceType"], "txt")
        self.assertEqual(body["characters"], len("Jane Doe\n- Built APIs"))

    def test_extract_text_rejects_unsupported_and_empty_files(self):
        response = self.client.post(
            "/v1/resume/extract-text",
            files={"file": ("resume.png", b"\x89PNG", "image/png")},
        )
        self.assertEqual(response.status_code, 400)

        response = self.client.post(
            "/v1/resume/extract-text",
            files={"file": ("resume.pdf", b"", "application/pdf")},
        )
        self.assertEqual(response.status_code, 400)

    def test_bullet_extraction_without_bullets_is_bad_gateway(self):
        self.script({"bullets": []})
        response = self.client.post("/v1/resume/bullets/extract", json={"resumeText": "Jane Doe"})
        self.assertEqual(response.status_code, 502)
        self.assertIn("No bullet points found", response.json()["detail"])


class TrackerApiTests(ApiTestCase):
    def test_application_lifecycle(self):
        created = self.client.post("/v1/applications", json={"jobTitle": "Engineer", "company": "Acme"})
        self.assertEqual(created.status_code, 201)
        app_id = created.json()["id"]

        updated = self.client.patch(f"/v1/applications/{app_id}/status", json={"status": "interview"})
        self.assertEqual(updated.status_code, 200)
        self.assertEqual(updated.json()["status"], "interview")

        listed = self.client.get("/v1/applications").json()
        self.assertEqual([item["id"] for item in listed], [app_id])

        self.assertEqual(self.client.delete(f"/v1/applications/{app_id}").status_code, 204)
        self.assertEqual(self.client.delete(f"/v1/applications/{app_id}").status_code, 404)
        missing = self.client.patch("/v1/applications/app_missing/status", json={"status": "offer"})
        self.assertEqual(missing.status_code, 404)

    def test_fifth_application_earns_badge(self):
        for index in range(5):
            self.client.post("/v1/applications", json={"jobTitle": f"Role {index}", "company": "Acme"})
        earned = {item["id"] for item in self.client.get("/v1/achievements").json()["earned"]}
        self.assertIn("five_applications", earned)
        self.assertNotIn("ten_applications", earned)

    def test_leaderboard_and_activity_samples(self):
        board = self.client.post("/v1/leaderboard", json={"score": 99}).json()
        self.assertEqual(board[0]["rank"], 1)
        self.assertTrue(board[0]["isCurrentUser"])

        shown = self.client.get("/v1/leaderboard").json()
        self.assertEqual(shown[0]["score"], 99)
        self.assertEqual(len(shown), 11)

        feed = self.client.get("/v1/activity").json()
        self.assertEqual(len(feed), 5)
        self.assertEqual(self.client.get("/v1/activity", params={"samples": "false"}).json(), [])

        added = self.client.post("/v1/activity", json={"type": "score_improved", "description": "New best", "score": 91})
        self.assertEqual(added.status_code, 201)
        self.assertEqual(self.client.delete("/v1/activity").status_code, 204)

    def test_reach_out_simulation_and_read(self):
        weak = self.client.post("/v1/reach-outs/simulate", json={"jobTitle": "Engineer", "company": "Acme", "matchScore": 50})
        self.assertEqual(weak.status_code, 200)
        self.assertIsNone(weak.json())

        strong = self.client.post("/v1/reach-outs/simulate", json={"jobTitle": "Engineer", "company": "Acme", "matchScore": 92})
        reach_out_id = strong.json()["id"]
        self.assertEqual(self.client.post(f"/v1/reach-outs/{reach_out_id}/read").status_code, 204)
        self.assertEqual(self.client.get("/v1/reach-outs").json()[0]["status"], "read")
        self.assertEqual(self.client.post("/v1/reach-outs/reachout_missing/read").status_code, 404)

    def test_interactions_most_active(self):
        for _ in range(3):
            self.client.post(
                "/v1/interactions",
                json={"jobId": "job_a", "jobTitle": "Engineer", "company": "Acme", "interactionType": "view"},
            )
        ranked = self.client.get("/v1/interactions/most-active", params={"limit": 5}).json()
        self.assertEqual(ranked[0]["jobId"], "job_a")
        self.assertEqual(ranked[0]["interactionCount"], 3)
        self.assertEqual(ranked[0]["level"], "low")


class AnalyticsApiTests(ApiTestCase):
    def test_summary_reports_disabled_analytics(self):
        response = self.client.get("/v1/analytics/summary")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"enabled": False})

    def test_admin_key_is_enforced_when_configured(self):
        with patch.object(security, "settings", replace(security.settings, api_key="secret")):
            self.assertEqual(self.client.get("/v1/analytics/latest").status_code, 401)
            ok = self.client.get("/v1/analytics/latest", headers={"X-API-Key": "secret"})
            self.assertEqual(ok.status_code, 200)
            self.assertEqual(ok.json(), [])


if __name__ == "__main__":
    unittest.main()
