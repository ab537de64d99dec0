"""Jobicy jobs source connector.

Docs: https://jobicy.com/jobs-rss-feed

Jobicy publishes remote positions only. The feed is public (no auth) and asks
clients not to poll more than a few times per hour, hence the longer cache TTL.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from ..models import JobicyJob, JobicyParams, JobicyResponse
from .base import JobSource


TECH_TAGS = "software developer programmer engineer IT technology data analyst computer systems"

# Location text -> Jobicy geo code. First match wins.
GEO_KEYWORDS = (
    (("usa", "united states", "america"), "usa"),
    (("canada",), "canada"),
    (("europe", "uk", "germany", "france"), "europe"),
)


def geo_for_location(location: Optional[str]) -> Optional[str]:
    """Map free-form location text onto one of Jobicy's geo codes."""
    if not location:
        return None
    text = location.lower()
    for needles, geo in GEO_KEYWORDS:
        if any(needle in text for needle in needles):
            return geo
    return None


class JobicySource(JobSource[JobicyParams, JobicyResponse]):
    """Fetch remote jobs from Jobicy."""

    name = "jobicy"
    base_url = "https://jobicy.com/api/v2/remote-jobs"
    params_model = JobicyParams
    response_model = JobicyResponse
    default_params = {"count": 50}

    @property
    def cache_ttl_s(self) -> float:
        return self.settings.jobicy_cache_ttl_s

    def parse(self, payload: Dict[str, Any]) -> JobicyResponse:
        jobs = self._parse_items(JobicyJob, payload.get("jobs") or [])
        count = payload.get("count") or payload.get("jobCount") or 0
        return JobicyResponse(jobs=jobs, count=int(count))

    # ---- Presets ---------------------------------------------------------------

    async def get_tech_jobs(self) -> JobicyResponse:
        return await self.search(JobicyParams(tag=TECH_TAGS, count=30))

    async def get_usa_jobs(self) -> JobicyResponse:
        return await self.search(JobicyParams(geo="usa", count=30))

    async def get_marketing_jobs(self) -> JobicyResponse:
        return await self.search(JobicyParams(industry="marketing", count=20))

    async def get_design_jobs(self) -> JobicyResponse:
        return await self.search(JobicyParams(tag="designer ui ux graphic web design", count=20))

    async def get_writing_jobs(self) -> JobicyResponse:
        return await self.search(
            JobicyParams(industry="copywriting", tag="writer content copywriter editor", count=20)
        )

    async def get_support_jobs(self) -> JobicyResponse:
        return await self.search(JobicyParams(industry="supporting", count=20))

    async def search_by_keyword(self, keyword: str, location: Optional[str] = None) -> JobicyResponse:
        """Keyword search; the location is only used to pick a geo code."""
        return await self.search(JobicyParams(tag=keyword or None, geo=geo_for_location(location), count=30))
