"""Adzuna jobs source connector.

Docs: https://developer.adzuna.com/docs/search

Adzuna paginates with integer pages in the URL path (`/{country}/search/1`)
and authenticates with `app_id` / `app_key` query parameters. Without both
credentials the source reports itself disabled and is left out of combined
searches.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from ..models import AdzunaJob, AdzunaParams, AdzunaResponse
from .base import JobSource


TECH_QUERY = "software engineer developer programmer"


class AdzunaSource(JobSource[AdzunaParams, AdzunaResponse]):
    """Search Adzuna's job index for one country."""

    name = "adzuna"
    base_url = "https://api.adzuna.com/v1/api/jobs"
    params_model = AdzunaParams
    response_model = AdzunaResponse
    default_params = {
        "results_per_page": 20,
        "sort_by": "date",
        "page": 1,
    }

    @property
    def cache_ttl_s(self) -> float:
        return self.settings.adzuna_cache_ttl_s

    @property
    def enabled(self) -> bool:
        return bool(self.settings.adzuna_app_id and self.settings.adzuna_app_key)

    def defaults(self) -> Dict[str, Any]:
        return {**self.default_params, "country": self.settings.adzuna_country}

    def auth_params(self) -> Dict[str, str]:
        return {
            "app_id": self.settings.adzuna_app_id,
            "app_key": self.settings.adzuna_app_key,
        }

    def url_for(self, params: AdzunaParams) -> str:
        return f"{self.base_url}/{params.country.lower()}/search/{params.page}"

    def parse(self, payload: Dict[str, Any]) -> AdzunaResponse:
        mean = payload.get("mean")
        return AdzunaResponse(
            results=self._parse_items(AdzunaJob, payload.get("results") or []),
            count=int(payload.get("count") or 0),
            mean=float(mean) if mean is not None else None,
        )

    # ---- Presets ---------------------------------------------------------------

    async def get_tech_jobs(self, country: Optional[str] = None) -> AdzunaResponse:
        return await self.search(AdzunaParams(what=TECH_QUERY, results_per_page=25, country=country))

    async def get_remote_jobs(self, country: Optional[str] = None) -> AdzunaResponse:
        return await self.search(AdzunaParams(where="Remote", results_per_page=25, country=country))

    async def get_remote_tech_jobs(self, country: Optional[str] = None) -> AdzunaResponse:
        return await self.search(AdzunaParams(what=TECH_QUERY, where="Remote", results_per_page=20, country=country))

    async def get_design_jobs(self, country: Optional[str] = None) -> AdzunaResponse:
        return await self.search(AdzunaParams(what="designer ui ux graphic web design", country=country))

    async def get_marketing_jobs(self, country: Optional[str] = None) -> AdzunaResponse:
        return await self.search(AdzunaParams(what="marketing manager social media digital marketing", country=country))

    async def get_data_jobs(self, country: Optional[str] = None) -> AdzunaResponse:
        return await self.search(AdzunaParams(what="data scientist analyst machine learning", country=country))

    async def get_sales_jobs(self, country: Optional[str] = None) -> AdzunaResponse:
        return await self.search(AdzunaParams(what="sales manager account executive", country=country))

    async def get_high_paying_jobs(self, min_salary: int = 80000, country: Optional[str] = None) -> AdzunaResponse:
        return await self.search(AdzunaParams(salary_min=min_salary, country=country))

    async def search_by_keyword(
        self,
        keyword: str,
        location: Optional[str] = None,
        country: Optional[str] = None,
    ) -> AdzunaResponse:
        return await self.search(
            AdzunaParams(what=keyword or None, where=location or None, results_per_page=25, country=country)
        )

    async def get_jobs_by_location(self, location: str, country: Optional[str] = None) -> AdzunaResponse:
        return await self.search(AdzunaParams(where=location, results_per_page=25, country=country))
