import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from hirelens.scoring.engine import (  # noqa: E402
    DEFAULT_RULES,
    ExtractedAttributes,
    ScoringRules,
    attributes_from_mapping,
    compute_score,
    cost_of_living_score,
    freshness_score,
    location_score,
    round_half_up,
    salary_score,
)


class SalaryScoreTests(unittest.TestCase):
    def test_missing_bound_scores_zero(self):
        self.assertEqual(salary_score(None, 120000), 0.0)
        self.assertEqual(salary_score(100000, None), 0.0)

    def test_spread_bonus_bands(self):
        # spread = (max - min) / max
        self.assertEqual(salary_score(90000, 100000), 35.0)
        self.assertEqual(salary_score(80000, 100000), 30.0)
        self.assertEqual(salary_score(50000, 100000), 25.0)

    def test_band_edges_are_exclusive(self):
        self.assertEqual(salary_score(85000, 100000), 30.0)
        self.assertEqual(salary_score(70000, 100000), 25.0)

    def test_published_examples(self):
        self.assertEqual(salary_score(100000, 105000), 35.0)
        self.assertEqual(salary_score(80000, 120000), 25.0)

    def test_zero_max_gets_base_only(self):
        self.assertEqual(salary_score(0, 0), 25.0)


class ComponentScoreTests(unittest.TestCase):
    def test_location_points(self):
        self.assertEqual(location_score("remote"), 20.0)
        self.assertEqual(location_score("Hybrid"), 15.0)
        self.assertEqual(location_score("onsite"), 5.0)
        self.assertEqual(location_score("unspecified"), 0.0)
        self.assertEqual(location_score("on the moon"), 0.0)

    def test_cost_of_living_is_proportional_and_clamped(self):
        self.assertEqual(cost_of_living_score(50), 15.0)
        self.assertEqual(cost_of_living_score(100), 30.0)
        self.assertEqual(cost_of_living_score(140), 30.0)
        self.assertEqual(cost_of_living_score(-10), 0.0)
        self.assertEqual(cost_of_living_score(None), 0.0)

    def test_freshness_tiers(self):
        self.assertEqual(freshness_score(0), 15.0)
        self.assertEqual(freshness_score(6), 15.0)
        self.assertEqual(freshness_score(7), 12.0)
        self.assertEqual(freshness_score(20), 7.5)
        self.assertEqual(freshness_score(45), 3.0)
        self.assertEqual(freshness_score(60), 0.0)
        self.assertEqual(freshness_score(None), 0.0)

    def test_freshness_clamps_negative_age_and_drops_stale_postings(self):
        self.assertEqual(freshness_score(-3), 15.0)
        self.assertEqual(freshness_score(100), 0.0)

    def test_round_half_up(self):
        self.assertEqual(round_half_up(72.5), 73)
        self.assertEqual(round_half_up(72.49), 72)
        self.assertEqual(round_half_up(0.5), 1)


class ComputeScoreTests(unittest.TestCase):
    def test_best_case_posting_reaches_100(self):
        attrs = ExtractedAttributes(
            salary_min=95000,
            salary_max=100000,
            work_location_type="remote",
            cost_of_living_score=100,
            posting_age_in_days=1,
        )
        breakdown = compute_score(attrs)
        self.assertEqual(breakdown.overall, 100)
        self.assertEqual(DEFAULT_RULES.max_total, 100.0)

    def test_empty_posting_scores_zero(self):
        breakdown = compute_score(ExtractedAttributes())
        self.assertEqual(breakdown.as_dict(), {
            "overall": 0,
            "salary": 0.0,
            "location": 0.0,
            "costOfLiving": 0.0,
            "redFlags": 0.0,
        })

    def test_overall_is_rounded_sum_of_components(self):
        attrs = ExtractedAttributes(
            salary_min=60000,
            salary_max=100000,
            work_location_type="hybrid",
            cost_of_living_score=55,
            posting_age_in_days=20,
        )
        breakdown = compute_score(attrs)
        # 25 + 15 + 16.5 + 7.5 = 64
        self.assertEqual(breakdown.salary, 25.0)
        self.assertAlmostEqual(breakdown.cost_of_living, 16.5)
        self.assertEqual(breakdown.red_flags, 7.5)
        self.assertEqual(breakdown.overall, 64)

    def test_half_point_total_rounds_up(self):
        attrs = ExtractedAttributes(work_location_type="onsite", posting_age_in_days=20)
        # 5 + 7.5 = 12.5
        self.assertEqual(compute_score(attrs).overall, 13)

    def test_negative_age_counts_as_fresh(self):
        breakdown = compute_score(ExtractedAttributes(posting_age_in_days=-3))
        self.assertEqual(breakdown.red_flags, 15.0)
        self.assertEqual(breakdown.overall, 15)

    def test_same_input_gives_same_breakdown(self):
        attrs = ExtractedAttributes(
            salary_min=100000,
            salary_max=105000,
            work_location_type="hybrid",
            cost_of_living_score=63,
            posting_age_in_days=10,
        )
        self.assertEqual(compute_score(attrs), compute_score(attrs))
        self.assertEqual(compute_score(attrs).as_dict(), compute_score(attrs).as_dict())

    def test_custom_rules_change_weights(self):
        rules = ScoringRules(location_points=(("remote", 40.0),))
        attrs = ExtractedAttributes(work_location_type="remote")
        self.assertEqual(compute_score(attrs, rules).location, 40.0)


class AttributesFromMappingTests(unittest.TestCase):
    def test_reads_camel_case_payload(self):
        attrs = attributes_from_mapping({
            "salaryMin": 100000,
            "salaryMax": "120000",
            "workLocationType": "remote",
            "costOfLivingAnalysis": {"costOfLivingScore": 72},
            "postingAgeInDays": 3,
        })
        self.assertEqual(attrs.salary_min, 100000.0)
        self.assertEqual(attrs.salary_max, 120000.0)
        self.assertEqual(attrs.work_location_type, "remote")
        self.assertEqual(attrs.cost_of_living_score, 72.0)
        self.assertEqual(attrs.posting_age_in_days, 3.0)

    def test_non_numeric_values_become_missing(self):
        attrs = attributes_from_mapping({"salaryMin": "n/a", "salaryMax": float("nan"), "postingAgeInDays": True})
        self.assertIsNone(attrs.salary_min)
        self.assertIsNone(attrs.salary_max)
        self.assertIsNone(attrs.posting_age_in_days)
        self.assertEqual(attrs.work_location_type, "unspecified")


if __name__ == "__main__":
    unittest.main()
