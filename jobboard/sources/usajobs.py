"""USAJOBS source connector.

Docs: https://developer.usajobs.gov/api-reference/get-api-search

Requests need an API key in the `Authorization-Key` header and an app name or
contact email as `User-Agent`. Results come back deeply nested under
`SearchResult.SearchResultItems[].MatchedObjectDescriptor`; we flatten each
item into a `USAJob` here so normalization only deals with flat records.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from ..models import USAJob, USAJobsParams, USAJobsResponse
from .base import JobSource

logger = logging.getLogger(__name__)

TECH_KEYWORDS = "software OR developer OR programmer OR engineer OR IT OR technology OR data OR analyst OR computer OR systems"
SOFTWARE_ENGINEER_KEYWORDS = (
    "software engineer OR software developer OR application developer OR systems engineer OR computer engineer"
)

# Shared by every preset: open to the public, last 30 days, newest first.
_PRESET_BASE: Dict[str, Any] = {
    "who_may_apply": "public",
    "date_posted": 30,
    "sort_field": "DatePosted",
    "sort_direction": "Desc",
}


def _is_true(value: Any) -> bool:
    # Upstream types these flags inconsistently: true, "true", "True".
    return value is True or (isinstance(value, str) and value.strip().lower() == "true")


def _first(values: Any) -> Dict[str, Any]:
    if isinstance(values, list) and values and isinstance(values[0], dict):
        return values[0]
    return {}


def flatten_position(item: Dict[str, Any]) -> USAJob:
    """Flatten one `SearchResultItems` entry into a `USAJob`."""
    job = item.get("MatchedObjectDescriptor") or {}
    details = (job.get("UserArea") or {}).get("Details") or {}
    pay = _first(job.get("PositionRemuneration"))
    apply_uris: List[str] = job.get("ApplyURI") or []

    low_grade = details.get("LowGrade")
    high_grade = details.get("HighGrade")

    return USAJob(
        id=job.get("PositionID") or item.get("MatchedObjectId"),
        title=job.get("PositionTitle") or "",
        agency=job.get("OrganizationName") or "",
        department=job.get("DepartmentName") or "",
        location=job.get("PositionLocationDisplay") or "",
        salary_min=pay.get("MinimumRange"),
        salary_max=pay.get("MaximumRange"),
        schedule=_first(job.get("PositionSchedule")).get("Name") or "Full-time",
        remote=_is_true(details.get("RemoteIndicator")),
        telework_eligible=_is_true(details.get("TeleworkEligible")),
        apply_url=(apply_uris[0] if apply_uris else None) or details.get("ApplyOnlineUrl") or job.get("PositionURI") or "",
        details_url=job.get("PositionURI") or "",
        posted_date=job.get("PublicationStartDate") or "",
        close_date=job.get("ApplicationCloseDate") or "",
        summary=details.get("JobSummary") or job.get("QualificationSummary") or "",
        grade=f"{low_grade}-{high_grade}" if low_grade and high_grade else None,
        openings=details.get("TotalOpenings") or "1",
        category=_first(job.get("JobCategory")).get("Name") or "General",
    )


class USAJobsSource(JobSource[USAJobsParams, USAJobsResponse]):
    """Search federal job postings on USAJOBS."""

    name = "usajobs"
    base_url = "https://data.usajobs.gov/api/search"
    params_model = USAJobsParams
    response_model = USAJobsResponse
    default_params = {
        "results_per_page": 25,
        "sort_field": "DatePosted",
        "sort_direction": "Desc",
        "date_posted": 30,
    }

    @property
    def cache_ttl_s(self) -> float:
        return self.settings.usajobs_cache_ttl_s

    @property
    def enabled(self) -> bool:
        return bool(self.settings.usajobs_api_key)

    def headers(self) -> Dict[str, str]:
        return {
            "Host": "data.usajobs.gov",
            "User-Agent": self.settings.usajobs_user_agent,
            "Authorization-Key": self.settings.usajobs_api_key,
            "Accept": "application/json",
        }

    def parse(self, payload: Dict[str, Any]) -> USAJobsResponse:
        result = payload.get("SearchResult") or {}
        items = result.get("SearchResultItems") or []

        jobs: List[USAJob] = []
        for item in items:
            if not isinstance(item, dict):
                continue
            try:
                jobs.append(flatten_position(item))
            except ValidationError as exc:
                logger.warning(f"Skipping malformed usajobs record: {exc.error_count()} validation error(s)")

        total = int(result.get("SearchResultCount") or 0)
        return USAJobsResponse(jobs=jobs, total_count=total, has_more=total > len(jobs))

    # ---- Presets ---------------------------------------------------------------

    async def _preset(self, **overrides: Any) -> USAJobsResponse:
        return await self.search(USAJobsParams(**{**_PRESET_BASE, **overrides}))

    async def get_remote_jobs(self) -> USAJobsResponse:
        return await self._preset(remote_indicator=True, results_per_page=20)

    async def get_tech_jobs(self) -> USAJobsResponse:
        return await self._preset(keyword=TECH_KEYWORDS, results_per_page=20)

    async def get_remote_tech_jobs(self) -> USAJobsResponse:
        return await self._preset(keyword=TECH_KEYWORDS, remote_indicator=True, results_per_page=15)

    async def get_high_paying_jobs(self, min_salary: int = 80000) -> USAJobsResponse:
        return await self._preset(remuneration_minimum_amount=min_salary, results_per_page=20)

    async def get_entry_level_jobs(self) -> USAJobsResponse:
        return await self._preset(pay_grade_low="05", pay_grade_high="09", results_per_page=20)

    async def get_jobs_by_location(self, location: str) -> USAJobsResponse:
        return await self._preset(location_name=location, results_per_page=20)

    async def get_full_time_remote_jobs(self) -> USAJobsResponse:
        return await self._preset(remote_indicator=True, position_schedule_type_code="1", results_per_page=20)

    async def get_software_engineer_jobs(self) -> USAJobsResponse:
        return await self._preset(keyword=SOFTWARE_ENGINEER_KEYWORDS, results_per_page=20)

    async def search_by_keyword(
        self,
        keyword: str,
        location: Optional[str] = None,
        remote: bool = False,
        results_per_page: int = 12,
    ) -> USAJobsResponse:
        """Keyword search as used by the combined search form."""
        return await self._preset(
            keyword=keyword,
            location_name=location or None,
            remote_indicator=True if remote else None,
            results_per_page=results_per_page,
        )
