"""Joinrise jobs source connector.

Public, unauthenticated and paginated (`page`, `limit`). Responses carry the
page metadata alongside the jobs: `{jobs, total, page, limit}`.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from ..models import JoinriseJob, JoinriseParams, JoinriseResponse
from .base import JobSource


TECH_QUERY = "software developer programmer engineer IT technology data analyst computer systems"
REMOTE_TECH_QUERY = "software developer programmer engineer IT technology"


class JoinriseSource(JobSource[JoinriseParams, JoinriseResponse]):
    """Fetch jobs from the Joinrise public API."""

    name = "joinrise"
    base_url = "https://api.joinrise.io/api/v1/jobs/public"
    params_model = JoinriseParams
    response_model = JoinriseResponse
    default_params = {
        "page": 1,
        "limit": 20,
        "sort": "desc",
        "sorted_by": "createdAt",
    }

    @property
    def cache_ttl_s(self) -> float:
        return self.settings.joinrise_cache_ttl_s

    def parse(self, payload: Dict[str, Any]) -> JoinriseResponse:
        return JoinriseResponse(
            jobs=self._parse_items(JoinriseJob, payload.get("jobs") or []),
            total=int(payload.get("total") or 0),
            page=int(payload.get("page") or 1),
            limit=int(payload.get("limit") or 10),
        )

    # ---- Presets ---------------------------------------------------------------

    async def get_tech_jobs(self) -> JoinriseResponse:
        return await self.search(JoinriseParams(q=TECH_QUERY, limit=30))

    async def get_remote_jobs(self) -> JoinriseResponse:
        return await self.search(JoinriseParams(job_loc="Remote", limit=30))

    async def get_remote_tech_jobs(self) -> JoinriseResponse:
        return await self.search(JoinriseParams(q=REMOTE_TECH_QUERY, job_loc="Remote", limit=25))

    async def get_design_jobs(self) -> JoinriseResponse:
        return await self.search(JoinriseParams(q="designer ui ux graphic web design creative", limit=20))

    async def get_marketing_jobs(self) -> JoinriseResponse:
        return await self.search(JoinriseParams(q="marketing manager social media content digital marketing", limit=20))

    async def get_writing_jobs(self) -> JoinriseResponse:
        return await self.search(JoinriseParams(q="writer content copywriter editor technical writing", limit=20))

    async def get_sales_jobs(self) -> JoinriseResponse:
        return await self.search(JoinriseParams(q="sales manager account executive business development", limit=20))

    async def get_data_jobs(self) -> JoinriseResponse:
        return await self.search(
            JoinriseParams(q="data scientist analyst machine learning AI artificial intelligence", limit=20)
        )

    async def search_by_keyword(self, keyword: str, location: Optional[str] = None) -> JoinriseResponse:
        """Keyword search; any location mentioning "remote" becomes `jobLoc=Remote`."""
        job_loc = None
        if location:
            job_loc = "Remote" if "remote" in location.lower() else location
        return await self.search(JoinriseParams(q=keyword or None, job_loc=job_loc, limit=30))

    async def get_jobs_by_location(self, location: str) -> JoinriseResponse:
        return await self.search(JoinriseParams(job_loc=location, limit=25))
