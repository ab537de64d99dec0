"""FastAPI endpoint for job listings.

`GET /api/jobs` runs a combined search across all sources by default. A
`source` parameter bypasses aggregation and queries one source directly; a
`type` parameter selects one of the canned presets.

Run locally with:
    uvicorn jobboard.api:app --reload
"""

import logging
from typing import Any, Awaitable, Callable, Dict, Literal, Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from .aggregator import PRESETS, CombinedJobSearch
from .config import Settings, configure_logging, get_settings
from .models import AdzunaResponse, SourceResponse, USAJobsParams, USAJobsResponse
from .sources import AdzunaSource, JobicySource, JoinriseSource, USAJobsSource

logger = logging.getLogger(__name__)

CACHE_CONTROL = "public, s-maxage=1800, stale-while-revalidate=3600"
MAX_COMBINED_LIMIT = 60
MAX_USAJOBS_LIMIT = 50
MAX_DAYS_POSTED = 60

SOURCES = ("all", "usajobs", "jobicy", "joinrise", "adzuna")

USAJOBS_TYPES: Dict[str, Callable[[USAJobsSource], Awaitable[SourceResponse]]] = {
    "remote": lambda s: s.get_remote_jobs(),
    "tech": lambda s: s.get_tech_jobs(),
    "remote-tech": lambda s: s.get_remote_tech_jobs(),
    "software-engineer": lambda s: s.get_software_engineer_jobs(),
    "entry-level": lambda s: s.get_entry_level_jobs(),
    "full-time-remote": lambda s: s.get_full_time_remote_jobs(),
}

JOBICY_TYPES: Dict[str, Callable[[JobicySource], Awaitable[SourceResponse]]] = {
    "tech": lambda s: s.get_tech_jobs(),
    "usa": lambda s: s.get_usa_jobs(),
    "marketing": lambda s: s.get_marketing_jobs(),
    "design": lambda s: s.get_design_jobs(),
    "writing": lambda s: s.get_writing_jobs(),
    "support": lambda s: s.get_support_jobs(),
}

JOINRISE_TYPES: Dict[str, Callable[[JoinriseSource], Awaitable[SourceResponse]]] = {
    "tech": lambda s: s.get_tech_jobs(),
    "remote": lambda s: s.get_remote_jobs(),
    "remote-tech": lambda s: s.get_remote_tech_jobs(),
    "design": lambda s: s.get_design_jobs(),
    "marketing": lambda s: s.get_marketing_jobs(),
    "writing": lambda s: s.get_writing_jobs(),
    "sales": lambda s: s.get_sales_jobs(),
    "data": lambda s: s.get_data_jobs(),
}

ADZUNA_TYPES: Dict[str, Callable[[AdzunaSource], Awaitable[SourceResponse]]] = {
    "tech": lambda s: s.get_tech_jobs(),
    "remote": lambda s: s.get_remote_jobs(),
    "remote-tech": lambda s: s.get_remote_tech_jobs(),
    "design": lambda s: s.get_design_jobs(),
    "marketing": lambda s: s.get_marketing_jobs(),
    "data": lambda s: s.get_data_jobs(),
    "sales": lambda s: s.get_sales_jobs(),
}


def _dump(model: BaseModel) -> Dict[str, Any]:
    return model.model_dump(mode="json", by_alias=True, exclude_none=True)


def _truncate(result: SourceResponse, limit: int) -> SourceResponse:
    """Cap a single-source response's job list at `limit`."""
    field_name = "results" if isinstance(result, AdzunaResponse) else "jobs"
    items = result.items
    if len(items) <= limit:
        return result
    return result.model_copy(update={field_name: items[:limit]})


def get_search(request: Request) -> CombinedJobSearch:
    return request.app.state.search


def create_app(search: Optional[CombinedJobSearch] = None, settings: Optional[Settings] = None) -> FastAPI:
    """Build the API around one long-lived `CombinedJobSearch` (and so one set of caches)."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(title="Remote Job Board", version="0.1.0")
    app.state.search = search or CombinedJobSearch(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    @app.get("/api/jobs")
    async def list_jobs(
        search: CombinedJobSearch = Depends(get_search),
        keyword: Optional[str] = None,
        location: Optional[str] = None,
        remote: bool = False,
        limit: int = Query(default=10, ge=1),
        job_type: Optional[str] = Query(default=None, alias="type"),
        source: str = "all",
        position_title: Optional[str] = Query(default=None, alias="positionTitle"),
        organization: Optional[str] = None,
        job_category: Optional[str] = Query(default=None, alias="jobCategory"),
        pay_grade_low: Optional[str] = Query(default=None, alias="payGradeLow"),
        pay_grade_high: Optional[str] = Query(default=None, alias="payGradeHigh"),
        min_salary: Optional[int] = Query(default=None, alias="minSalary"),
        max_salary: Optional[int] = Query(default=None, alias="maxSalary"),
        full_time: bool = Query(default=False, alias="fullTime"),
        who_may_apply: Optional[Literal["public", "internal", "all"]] = Query(default=None, alias="whoMayApply"),
        days_posted: int = Query(default=30, ge=0, alias="daysPosted"),
        sort_field: Optional[
            Literal["DatePosted", "Relevance", "PositionTitle", "Department", "JobCategory", "PayGrade"]
        ] = Query(default=None, alias="sortField"),
        sort_direction: Optional[Literal["Asc", "Desc"]] = Query(default=None, alias="sortDirection"),
    ) -> JSONResponse:
        if source not in SOURCES:
            raise HTTPException(status_code=400, detail=f"Unknown source: {source}")

        try:
            if source == "all":
                preset = job_type[len("combined-"):] if job_type and job_type.startswith("combined-") else None
                if preset in PRESETS:
                    result: BaseModel = await search.run_preset(preset)
                else:
                    result = await search.search_all(
                        keyword=keyword,
                        location=location,
                        remote_only=remote,
                        limit=min(limit, MAX_COMBINED_LIMIT),
                    )

            elif source == "usajobs":
                usajobs = search.usajobs
                if job_type in USAJOBS_TYPES:
                    result = await USAJOBS_TYPES[job_type](usajobs)
                elif job_type == "high-paying":
                    result = await usajobs.get_high_paying_jobs(min_salary or 80000)
                elif job_type == "by-location" and location:
                    result = await usajobs.get_jobs_by_location(location)
                else:
                    params = USAJobsParams(
                        keyword=keyword or None,
                        position_title=position_title,
                        location_name=location or None,
                        organization=organization,
                        job_category_code=job_category,
                        pay_grade_low=pay_grade_low,
                        pay_grade_high=pay_grade_high,
                        remuneration_minimum_amount=min_salary,
                        remuneration_maximum_amount=max_salary,
                        remote_indicator=True if remote else None,
                        position_schedule_type_code="1" if full_time else None,
                        who_may_apply=who_may_apply,
                        date_posted=min(days_posted, MAX_DAYS_POSTED),
                        results_per_page=min(limit, MAX_USAJOBS_LIMIT),
                        sort_field=sort_field,
                        sort_direction=sort_direction,
                    )
                    result = await usajobs.search(params)
                    if remote and job_type is None and isinstance(result, USAJobsResponse):
                        # Telework-eligible positions count as remote in plain searches.
                        result = result.model_copy(
                            update={"jobs": [j for j in result.jobs if j.remote or j.telework_eligible]}
                        )

            elif source == "jobicy":
                if job_type in JOBICY_TYPES:
                    result = await JOBICY_TYPES[job_type](search.jobicy)
                else:
                    result = await search.jobicy.search_by_keyword(keyword or "", location)

            elif source == "joinrise":
                if job_type in JOINRISE_TYPES:
                    result = await JOINRISE_TYPES[job_type](search.joinrise)
                elif job_type == "by-location" and location:
                    result = await search.joinrise.get_jobs_by_location(location)
                else:
                    result = await search.joinrise.search_by_keyword(keyword or "", location)

            else:
                if job_type in ADZUNA_TYPES:
                    result = await ADZUNA_TYPES[job_type](search.adzuna)
                elif job_type == "high-paying":
                    result = await search.adzuna.get_high_paying_jobs(min_salary or 80000)
                elif job_type == "by-location" and location:
                    result = await search.adzuna.get_jobs_by_location(location)
                else:
                    result = await search.adzuna.search_by_keyword(keyword or "", location)

            if isinstance(result, SourceResponse):
                result = _truncate(result, limit)

        except Exception:
            logger.exception("Error in jobs API route")
            return JSONResponse(
                status_code=500,
                content={
                    "jobs": [],
                    "totalCount": 0,
                    "hasMore": False,
                    "error": "Failed to fetch job listings",
                },
            )

        return JSONResponse(content=_dump(result), headers={"Cache-Control": CACHE_CONTROL})

    return app


app = create_app()
