from __future__ import annotations

import re
from dataclasses import dataclass
from urllib.parse import parse_qs, urlparse

KNOWN_SOURCES = ("LinkedIn", "Indeed", "Glassdoor", "Monster", "ZipRecruiter")

# (domain, source name) in lookup order.
_SOURCE_NAMES: tuple[tuple[str, str], ...] = (
    ("linkedin.com", "LinkedIn"),
    ("indeed.com", "Indeed"),
    ("glassdoor.com", "Glassdoor"),
    ("monster.com", "Monster"),
    ("ziprecruiter.com", "ZipRecruiter"),
    ("dice.com", "Dice"),
    ("simplyhired.com", "SimplyHired"),
    ("careerbuilder.com", "CareerBuilder"),
    ("stackoverflow.com", "Stack Overflow"),
    ("github.com", "GitHub Jobs"),
    ("angel.co", "AngelList"),
    ("remote.co", "Remote.co"),
    ("weworkremotely.com", "We Work Remotely"),
    ("flexjobs.com", "FlexJobs"),
)

_OTHER_BOARDS = (
    "dice.com",
    "simplyhired.com",
    "careerbuilder.com",
    "jobs.com",
    "snagajob.com",
    "flexjobs.com",
    "remote.co",
    "weworkremotely.com",
    "angel.co",
    "stackoverflow.com",
    "github.com",
)

_BOARD_PATHS: dict[str, tuple[str, ...]] = {
    "linkedin.com": ("/jobs/view/", "/jobs/collection/", "/jobs/search/"),
    "glassdoor.com": ("/job-listing/", "/job/"),
    "monster.com": ("/jobs/", "/job/"),
    "ziprecruiter.com": ("/job/", "/jobs/"),
}

_CAREER_PATH_RE = re.compile(r"/(jobs?|careers?|opportunities?|openings?)")


@dataclass(frozen=True)
class JobDataValidation:
    is_valid: bool
    url: str | None = None
    source: str | None = None


def _host_matches(hostname: str, domain: str) -> bool:
    return hostname == domain or hostname.endswith(f".{domain}")


def is_valid_job_url(url: str | None) -> bool:
    """True when ``url`` looks like a real HTTPS job-posting link."""
    if not url or not isinstance(url, str):
        return False
    try:
        parsed = urlparse(url.strip())
    except ValueError:
        return False
    if parsed.scheme != "https" or not parsed.hostname:
        return False

    hostname = parsed.hostname.lower()
    path = (parsed.path or "").lower()

    for domain, markers in _BOARD_PATHS.items():
        if _host_matches(hostname, domain):
            return any(marker in path for marker in markers)

    if _host_matches(hostname, "indeed.com"):
        query = parse_qs(parsed.query or "")
        return "/viewjob" in path or "/jobs/view" in path or ("jk" in query and "from" in query)

    if any(_host_matches(hostname, domain) for domain in _OTHER_BOARDS):
        return any(marker in path for marker in ("/job", "/career"))

    if _CAREER_PATH_RE.search(path):
        return path not in {"", "/"}
    return False


def extract_source_from_url(url: str) -> str:
    try:
        hostname = (urlparse(url).hostname or "").lower()
    except ValueError:
        return "Web Search"
    if not hostname:
        return "Web Search"

    for domain, name in _SOURCE_NAMES:
        if _host_matches(hostname, domain):
            return name

    parts = hostname.split(".")
    if len(parts) >= 2 and parts[-2] and parts[-2] != "www":
        return parts[-2].capitalize()
    return "Company Website"


def validate_job_data(*, url: str | None = None, source: str | None = None) -> JobDataValidation:
    if url and is_valid_job_url(url):
        return JobDataValidation(is_valid=True, url=url, source=source or extract_source_from_url(url))
    if source and source in KNOWN_SOURCES:
        return JobDataValidation(is_valid=True, source=source)
    return JobDataValidation(is_valid=False)
