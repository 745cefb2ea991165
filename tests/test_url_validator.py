import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from hirelens.utils.url_validator import (  # noqa: E402
    extract_source_from_url,
    is_valid_job_url,
    validate_job_data,
)


class JobUrlTests(unittest.TestCase):
    def test_board_posting_urls(self):
        self.assertTrue(is_valid_job_url("https://www.linkedin.com/jobs/view/123456"))
        self.assertTrue(is_valid_job_url("https://www.indeed.com/viewjob?jk=abc"))
        self.assertTrue(is_valid_job_url("https://www.indeed.com/rc/clk?jk=abc&from=serp"))
        self.assertTrue(is_valid_job_url("https://www.glassdoor.com/job-listing/engineer-acme-JV_123.htm"))
        self.assertTrue(is_valid_job_url("https://www.dice.com/job-detail/abc"))

    def test_board_pages_that_are_not_postings(self):
        self.assertFalse(is_valid_job_url("https://www.linkedin.com/in/someone"))
        self.assertFalse(is_valid_job_url("https://www.indeed.com/companies"))
        self.assertFalse(is_valid_job_url("https://www.glassdoor.com/Reviews/acme.htm"))

    def test_company_career_pages(self):
        self.assertTrue(is_valid_job_url("https://acme.com/careers/backend-engineer"))
        self.assertTrue(is_valid_job_url("https://jobs.acme.io/openings/42"))
        self.assertFalse(is_valid_job_url("https://acme.com/about"))

    def test_rejects_non_https_and_garbage(self):
        self.assertFalse(is_valid_job_url("http://www.linkedin.com/jobs/view/1"))
        self.assertFalse(is_valid_job_url("not a url"))
        self.assertFalse(is_valid_job_url(""))
        self.assertFalse(is_valid_job_url(None))

    def test_lookalike_domains_are_not_boards(self):
        self.assertFalse(is_valid_job_url("https://notlinkedin.com/about"))
        self.assertEqual(extract_source_from_url("https://notlinkedin.com/jobs/1"), "Notlinkedin")


class SourceTests(unittest.TestCase):
    def test_known_sources(self):
        self.assertEqual(extract_source_from_url("https://uk.linkedin.com/jobs/view/1"), "LinkedIn")
        self.assertEqual(extract_source_from_url("https://www.ziprecruiter.com/job/1"), "ZipRecruiter")
        self.assertEqual(extract_source_from_url("https://weworkremotely.com/remote-jobs/1"), "We Work Remotely")

    def test_company_domain_fallback(self):
        self.assertEqual(extract_source_from_url("https://careers.acme.com/jobs/1"), "Acme")
        self.assertEqual(extract_source_from_url("not a url"), "Web Search")

    def test_validate_job_data(self):
        with_url = validate_job_data(url="https://www.linkedin.com/jobs/view/1")
        self.assertTrue(with_url.is_valid)
        self.assertEqual(with_url.source, "LinkedIn")

        by_source = validate_job_data(url="https://example.com/", source="Indeed")
        self.assertTrue(by_source.is_valid)
        self.assertIsNone(by_source.url)

        self.assertFalse(validate_job_data(url="https://example.com/", source="Blog").is_valid)
        self.assertFalse(validate_job_data().is_valid)


if __name__ == "__main__":
    unittest.main()
