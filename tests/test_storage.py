import random
import shutil
import sys
import tempfile
import unittest
from datetime import datetime, timezone
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from hirelens.schemas.tracking import ResumeScoreHistory  # noqa: E402
from hirelens.storage.achievements import AchievementBook  # noqa: E402
from hirelens.storage.activity import ActivityFeed  # noqa: E402
from hirelens.storage.applications import ApplicationTracker  # noqa: E402
from hirelens.storage.interactions import CompanyInteractions, activity_level  # noqa: E402
from hirelens.storage.kv_store import KeyValueStore  # noqa: E402
from hirelens.storage.leaderboard import SAMPLE_BADGES, Leaderboard, badge_for  # noqa: E402
from hirelens.storage.score_history import ScoreHistory  # noqa: E402
from hirelens.utils.ids import make_id  # noqa: E402


class StoreTestCase(unittest.TestCase):
    def setUp(self):
        self.tmp_dir = tempfile.mkdtemp()
        self.store = KeyValueStore(str(Path(self.tmp_dir) / "store.db"))

    def tearDown(self):
        self.store.close()
        shutil.rmtree(self.tmp_dir, ignore_errors=True)


class KeyValueStoreTests(StoreTestCase):
    def test_missing_key_reads_as_empty_list(self):
        self.assertEqual(self.store.get("nothing"), [])
        self.assertIsNone(self.store.load("nothing"))
        self.assertEqual(self.store.load("nothing", "fallback"), "fallback")

    def test_set_replaces_whole_value(self):
        self.store.set("items", [1, 2, 3])
        self.store.set("items", [4])
        self.assertEqual(self.store.get("items"), [4])

    def test_non_list_value_reads_as_empty_list(self):
        self.store.save("scalar", {"a": 1})
        self.assertEqual(self.store.get("scalar"), [])
        self.assertEqual(self.store.load("scalar"), {"a": 1})

    def test_append_keeps_newest_tail(self):
        for value in range(5):
            self.store.append("log", value, keep_last=3)
        self.assertEqual(self.store.get("log"), [2, 3, 4])

    def test_prepend_keeps_newest_head(self):
        for value in range(5):
            self.store.prepend("feed", value, keep_first=3)
        self.assertEqual(self.store.get("feed"), [4, 3, 2])

    def test_values_survive_reopen(self):
        self.store.set("persisted", [{"name": "café"}])
        self.store.close()
        reopened = KeyValueStore(self.store.db_path)
        try:
            self.assertEqual(reopened.get("persisted"), [{"name": "café"}])
        finally:
            reopened.close()

    def test_delete_and_clear(self):
        self.store.set("a", [1])
        self.store.set("b", [2])
        self.store.delete("a")
        self.assertEqual(self.store.get("a"), [])
        self.store.clear()
        self.assertEqual(self.store.get("b"), [])


class IdTests(unittest.TestCase):
    def test_id_shape(self):
        parts = make_id("app").split("_")
        self.assertEqual(parts[0], "app")
        self.assertTrue(parts[1].isdigit())
        self.assertEqual(len(parts[2]), 9)


class ApplicationTrackerTests(StoreTestCase):
    def test_create_update_delete(self):
        tracker = ApplicationTracker(self.store)
        created = tracker.create("Backend Engineer", "Acme", resume_score=82)
        self.assertEqual(created.status, "applied")
        self.assertTrue(created.id.startswith("app_"))

        updated = tracker.update_status(created.id, "interview", interview_date="2026-11-02")
        self.assertEqual(updated.status, "interview")
        self.assertEqual(tracker.get(created.id).interview_date, "2026-11-02")
        self.assertEqual(len(tracker.applications()), 1)

        self.assertTrue(tracker.delete(created.id))
        self.assertFalse(tracker.delete(created.id))
        self.assertEqual(tracker.applications(), [])

    def test_update_missing_application_returns_none(self):
        self.assertIsNone(ApplicationTracker(self.store).update_status("app_missing", "offer"))


class AchievementBookTests(StoreTestCase):
    def test_award_is_idempotent(self):
        book = AchievementBook(self.store)
        first = book.award("first_analysis")
        self.assertIsNotNone(first)
        self.assertIsNotNone(first.earned_date)
        self.assertIsNone(book.award("first_analysis"))
        self.assertIsNone(book.award("no_such_badge"))
        self.assertEqual([item.id for item in book.earned()], ["first_analysis"])

    def test_score_thresholds(self):
        book = AchievementBook(self.store)
        self.assertEqual([item.id for item in book.award_for_score(79)], [])
        self.assertEqual([item.id for item in book.award_for_score(91)], ["high_score_80", "high_score_90"])
        self.assertEqual([item.id for item in book.award_for_score(100)], ["perfect_score"])

    def test_application_count_thresholds(self):
        book = AchievementBook(self.store)
        self.assertEqual([item.id for item in book.award_for_application_count(4)], [])
        self.assertEqual([item.id for item in book.award_for_application_count(5)], ["five_applications"])
        self.assertEqual([item.id for item in book.award_for_application_count(12)], ["ten_applications"])


class LeaderboardTests(StoreTestCase):
    def test_badge_from_user_id(self):
        self.assertEqual(badge_for("user_17abc"), "17***")

    def test_user_id_is_stable(self):
        board = Leaderboard(self.store)
        self.assertEqual(board.user_id(), board.user_id())

    def test_submit_replaces_previous_score(self):
        board = Leaderboard(self.store)
        board.submit_score(70)
        ranked = board.submit_score(88)
        self.assertEqual(len(ranked), 1)
        self.assertEqual(ranked[0].score, 88)
        self.assertEqual(ranked[0].rank, 1)
        self.assertTrue(board.entries()[0].is_current_user)

    def test_sparse_board_is_padded_with_samples(self):
        board = Leaderboard(self.store)
        board.submit_score(93)
        shown = board.with_samples()

        self.assertEqual(len(shown), len(SAMPLE_BADGES) + 1)
        self.assertEqual([entry.rank for entry in shown], list(range(1, len(shown) + 1)))
        scores = [entry.score for entry in shown]
        self.assertEqual(scores, sorted(scores, reverse=True))
        current = [entry for entry in shown if entry.is_current_user]
        self.assertEqual(len(current), 1)
        self.assertEqual(current[0].rank, 2)


class ActivityFeedTests(StoreTestCase):
    def test_sparse_feed_is_padded_with_samples(self):
        feed = ActivityFeed(self.store)
        feed.add("score_improved", "Resume match score: 88", 88)

        shown = feed.with_samples(now=datetime.now(timezone.utc))

        self.assertEqual(len(shown), 6)
        self.assertEqual(shown[0].description, "Resume match score: 88")
        self.assertTrue(all(item.id.startswith("sample_") for item in shown[1:]))

    def test_busy_feed_shows_only_real_items(self):
        feed = ActivityFeed(self.store)
        for index in range(25):
            feed.add("application_saved", f"Saved application {index}")

        shown = feed.with_samples()
        self.assertEqual(len(shown), 20)
        self.assertEqual(shown[0].description, "Saved application 24")
        self.assertFalse(any(item.id.startswith("sample_") for item in shown))

    def test_feed_keeps_fifty_newest(self):
        feed = ActivityFeed(self.store)
        for index in range(55):
            feed.add("application_saved", f"Saved application {index}")
        items = feed.items()
        self.assertEqual(len(items), 50)
        self.assertEqual(items[-1].description, "Saved application 5")


class ScoreHistoryTests(StoreTestCase):
    def test_history_appends_and_clears(self):
        history = ScoreHistory(self.store)
        history.add(ResumeScoreHistory(date="2026-10-01T00:00:00+00:00", overall_score=64, job_title="Job Analysis"))
        history.add(ResumeScoreHistory(date="2026-10-02T00:00:00+00:00", overall_score=71))
        self.assertEqual([entry.overall_score for entry in history.entries()], [64, 71])
        history.clear()
        self.assertEqual(history.entries(), [])


class CompanyInteractionsTests(StoreTestCase):
    def test_activity_levels(self):
        self.assertEqual(activity_level(0), "low")
        self.assertEqual(activity_level(4), "low")
        self.assertEqual(activity_level(5), "medium")
        self.assertEqual(activity_level(10), "high")

    def test_job_activity_and_most_active(self):
        interactions = CompanyInteractions(self.store)
        for _ in range(5):
            interactions.track("job_a", "Engineer", "Acme", "view")
        interactions.track("job_b", "Designer", "Globex", "apply")

        activity = interactions.job_activity("job_a")
        self.assertEqual(activity.level, "medium")
        self.assertEqual(activity.interaction_count, 5)
        self.assertIsNotNone(activity.last_interaction)
        self.assertEqual(interactions.job_activity("job_missing").interaction_count, 0)

        ranked = interactions.most_active_jobs(limit=1)
        self.assertEqual([job.job_id for job in ranked], ["job_a"])

    def test_reach_out_requires_high_match(self):
        interactions = CompanyInteractions(self.store, rng=random.Random(7))
        self.assertIsNone(interactions.simulate_reach_out("Engineer", "Acme", 79))

        reach_out = interactions.simulate_reach_out("Engineer", "Acme", 85, location="Austin, TX")
        self.assertIsNotNone(reach_out)
        self.assertEqual(reach_out.status, "unread")
        self.assertIn("Engineer", reach_out.message)

        self.assertTrue(interactions.mark_read(reach_out.id))
        self.assertFalse(interactions.mark_read("reachout_missing"))
        self.assertEqual(interactions.reach_outs()[0].status, "read")


if __name__ == "__main__":
    unittest.main()
