"""Combined job search across every configured source.

Usage:
    search = CombinedJobSearch()
    result = await search.search_all(keyword="python", remote_only=True, limit=40)

All sources are queried concurrently and the join waits for every one of
them: a slow or failing source never aborts the others, and total latency is
bounded by the slowest source (capped by `source_timeout_s`). Upstream
failures turn into zero-count contributions; `CombinedResponse.error` is only
set when every queried source failed.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional

from .config import Settings, get_settings
from .models import CombinedResponse, SourceResponse, UnifiedJob
from .normalize import normalize_job
from .sources import AdzunaSource, JobicySource, JobSource, JoinriseSource, USAJobsSource
from .utils import posted_sort_key

logger = logging.getLogger(__name__)

ALL_SOURCES_FAILED = "Failed to fetch jobs from all sources"
NO_SOURCES_ENABLED = "No job sources are configured"
SEARCH_FAILED = "Failed to search jobs"

DEFAULT_LIMIT = 40


@dataclass(frozen=True)
class SourceOutcome:
    """Result of querying one source: normalized jobs, or the reason it failed."""

    source: str
    jobs: List[UnifiedJob] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class Preset:
    """A canned combined search."""

    keyword: Optional[str] = None
    remote_only: bool = False
    limit: int = 48


PRESETS: Dict[str, Preset] = {
    "tech": Preset(keyword="software developer engineer programmer", limit=60),
    "remote": Preset(remote_only=True, limit=60),
    "design": Preset(keyword="designer ui ux graphic web design"),
    "marketing": Preset(keyword="marketing manager social media content"),
    "writing": Preset(keyword="writer content copywriter editor technical writing"),
    "data": Preset(keyword="data scientist analyst machine learning AI"),
    "sales": Preset(keyword="sales manager account executive business development"),
    "high-paying": Preset(keyword="senior manager director executive"),
}


def merge_jobs(outcomes: Iterable[SourceOutcome], limit: int, remote_only: bool = False) -> List[UnifiedJob]:
    """Merge per-source jobs: dedupe by id, newest first, optional remote filter, truncate.

    The sort is stable, so jobs with equal dates keep their source order. The
    remote filter runs before truncation so up to `limit` remote jobs come back
    whenever that many exist.
    """
    seen = set()
    merged: List[UnifiedJob] = []
    for outcome in outcomes:
        for job in outcome.jobs:
            if job.id in seen:
                continue
            seen.add(job.id)
            merged.append(job)

    merged.sort(key=lambda job: posted_sort_key(job.posted_date), reverse=True)

    if remote_only:
        merged = [job for job in merged if job.remote]

    return merged[: max(limit, 0)]


def normalize_all(source: str, items: Iterable[Any]) -> List[UnifiedJob]:
    out: List[UnifiedJob] = []
    for item in items:
        try:
            out.append(normalize_job(source, item))
        except ValueError as exc:
            logger.warning(f"Skipping {source} record that failed normalization: {exc}")
    return out


class CombinedJobSearch:
    """Fans a search out to every enabled source and merges the results."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        usajobs: Optional[USAJobsSource] = None,
        jobicy: Optional[JobicySource] = None,
        joinrise: Optional[JoinriseSource] = None,
        adzuna: Optional[AdzunaSource] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.usajobs = usajobs or USAJobsSource(self.settings)
        self.jobicy = jobicy or JobicySource(self.settings)
        self.joinrise = joinrise or JoinriseSource(self.settings)
        self.adzuna = adzuna or AdzunaSource(self.settings)

    @property
    def sources(self) -> Dict[str, JobSource]:
        return {
            "usajobs": self.usajobs,
            "jobicy": self.jobicy,
            "joinrise": self.joinrise,
            "adzuna": self.adzuna,
        }

    def clear_caches(self) -> None:
        for source in self.sources.values():
            source.clear_cache()

    def _requests(
        self,
        keyword: Optional[str],
        location: Optional[str],
        remote_only: bool,
        limit: int,
    ) -> Dict[str, Callable[[], Awaitable[SourceResponse]]]:
        """One request factory per source; without a keyword each source uses its tech preset."""
        if keyword:
            per_page = min(max(limit // 4, 1), 12)
            return {
                "usajobs": lambda: self.usajobs.search_by_keyword(
                    keyword, location, remote=remote_only, results_per_page=per_page
                ),
                "jobicy": lambda: self.jobicy.search_by_keyword(keyword, location),
                "joinrise": lambda: self.joinrise.search_by_keyword(keyword, location),
                "adzuna": lambda: self.adzuna.search_by_keyword(keyword, location),
            }
        return {
            "usajobs": self.usajobs.get_remote_tech_jobs,
            "jobicy": self.jobicy.get_tech_jobs,
            "joinrise": self.joinrise.get_remote_tech_jobs,
            "adzuna": self.adzuna.get_remote_tech_jobs,
        }

    async def _gather(self, requests: Dict[str, Callable[[], Awaitable[SourceResponse]]]) -> List[SourceOutcome]:
        """Run every request concurrently and wait for all of them to settle."""
        names = list(requests)
        timeout = self.settings.source_timeout_s
        results = await asyncio.gather(
            *(asyncio.wait_for(requests[name](), timeout=timeout) for name in names),
            return_exceptions=True,
        )

        outcomes: List[SourceOutcome] = []
        for name, result in zip(names, results):
            if isinstance(result, BaseException):
                reason = f"{type(result).__name__}: {result}" if str(result) else type(result).__name__
                logger.error(f"{name} search failed: {reason}")
                outcomes.append(SourceOutcome(source=name, error=reason))
            elif not result.ok:
                logger.warning(f"{name} returned no results: {result.error}")
                outcomes.append(SourceOutcome(source=name, error=result.error))
            else:
                outcomes.append(SourceOutcome(source=name, jobs=normalize_all(name, result.items)))
        return outcomes

    async def search_all(
        self,
        keyword: Optional[str] = None,
        location: Optional[str] = None,
        remote_only: bool = False,
        limit: int = DEFAULT_LIMIT,
    ) -> CombinedResponse:
        """Search every enabled source and return one merged, newest-first job list."""
        try:
            requests = {
                name: factory
                for name, factory in self._requests(keyword, location, remote_only, limit).items()
                if self.sources[name].enabled
            }
            if not requests:
                logger.error(NO_SOURCES_ENABLED)
                return CombinedResponse(error=NO_SOURCES_ENABLED)

            outcomes = await self._gather(requests)
        except Exception:
            logger.exception("Error in combined search")
            return CombinedResponse(error=SEARCH_FAILED)

        jobs = merge_jobs(outcomes, limit=limit, remote_only=remote_only)
        counts = {outcome.source: len(outcome.jobs) for outcome in outcomes}
        all_failed = all(not outcome.ok for outcome in outcomes)

        logger.info(
            f"Combined search keyword={keyword!r} location={location!r} remote_only={remote_only}: "
            f"{len(jobs)} jobs, per source {counts}"
        )

        return CombinedResponse(
            jobs=jobs,
            usajobs_count=counts.get("usajobs", 0),
            jobicy_count=counts.get("jobicy", 0),
            joinrise_count=counts.get("joinrise", 0),
            adzuna_count=counts.get("adzuna", 0),
            total_count=len(jobs),
            error=ALL_SOURCES_FAILED if all_failed else None,
        )

    # ---- Presets ---------------------------------------------------------------

    async def run_preset(self, name: str) -> CombinedResponse:
        """Run one of `PRESETS` by name; raises KeyError for an unknown preset."""
        preset = PRESETS[name]
        return await self.search_all(keyword=preset.keyword, remote_only=preset.remote_only, limit=preset.limit)

    async def get_tech_jobs(self) -> CombinedResponse:
        return await self.run_preset("tech")

    async def get_remote_jobs(self) -> CombinedResponse:
        return await self.run_preset("remote")

    async def get_design_jobs(self) -> CombinedResponse:
        return await self.run_preset("design")

    async def get_marketing_jobs(self) -> CombinedResponse:
        return await self.run_preset("marketing")

    async def get_writing_jobs(self) -> CombinedResponse:
        return await self.run_preset("writing")

    async def get_data_jobs(self) -> CombinedResponse:
        return await self.run_preset("data")

    async def get_sales_jobs(self) -> CombinedResponse:
        return await self.run_preset("sales")

    async def get_high_paying_jobs(self) -> CombinedResponse:
        return await self.run_preset("high-paying")
