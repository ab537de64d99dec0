"""Data models for the job board.

Three groups live here:

- request parameters, one frozen model per source, whose aliases are the
  upstream query-string names;
- upstream records and responses, parsed leniently from each source's JSON;
- the stable schema the product owns: `UnifiedJob` and `CombinedResponse`.

This file uses Pydantic v2.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel, to_pascal


SourceName = Literal["usajobs", "jobicy", "joinrise", "adzuna"]

SOURCE_NAMES: List[str] = ["usajobs", "jobicy", "joinrise", "adzuna"]


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _amount_or_none(value: Any) -> Optional[float]:
    """Salary bounds are optional; text like "Competitive" or "n/a" counts as missing."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.replace(",", "").strip()
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _as_list(value: Any) -> List[str]:
    """Upstream multi-valued fields arrive as a list, a single string, or null."""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value if v is not None and str(v).strip()]
    value = str(value).strip()
    return [value] if value else []


# ---- Request parameters --------------------------------------------------------


class USAJobsParams(BaseModel):
    """Search parameters for the USAJOBS search API."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid", alias_generator=to_pascal)

    keyword: Optional[str] = None
    position_title: Optional[str] = None
    location_name: Optional[str] = None
    organization: Optional[str] = None

    job_category_code: Optional[str] = None
    pay_grade_low: Optional[str] = None
    pay_grade_high: Optional[str] = None

    remuneration_minimum_amount: Optional[int] = None
    remuneration_maximum_amount: Optional[int] = None

    position_offering_type_code: Optional[str] = None  # "15317" = permanent
    position_schedule_type_code: Optional[str] = None  # "1" = full-time, "2" = part-time
    travel_percentage: Optional[str] = None
    security_clearance_required: Optional[str] = None
    relocation_indicator: Optional[bool] = None
    remote_indicator: Optional[bool] = None

    who_may_apply: Optional[Literal["public", "internal", "all"]] = None
    date_posted: Optional[int] = Field(default=None, ge=0, le=60, description="Days ago")

    results_per_page: Optional[int] = Field(default=None, ge=1, le=500)
    page: Optional[int] = Field(default=None, ge=1)
    sort_field: Optional[
        Literal["DatePosted", "Relevance", "PositionTitle", "Department", "JobCategory", "PayGrade"]
    ] = None
    sort_direction: Optional[Literal["Asc", "Desc"]] = None


class JobicyParams(BaseModel):
    """Search parameters for the Jobicy remote-jobs feed."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    count: Optional[int] = Field(default=None, ge=1, le=100)
    geo: Optional[str] = None
    industry: Optional[str] = None
    tag: Optional[str] = None


class JoinriseParams(BaseModel):
    """Search parameters for the Joinrise public jobs API."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid", alias_generator=to_camel)

    page: Optional[int] = Field(default=None, ge=1)
    limit: Optional[int] = Field(default=None, ge=1)
    sort: Optional[Literal["asc", "desc"]] = None
    sorted_by: Optional[Literal["createdAt", "title", "company"]] = None
    job_loc: Optional[str] = None
    q: Optional[str] = None


class AdzunaParams(BaseModel):
    """Search parameters for Adzuna. `country` and `page` go into the URL path."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    what: Optional[str] = None
    where: Optional[str] = None
    category: Optional[str] = None
    salary_min: Optional[int] = None
    results_per_page: Optional[int] = Field(default=None, ge=1, le=50)
    sort_by: Optional[Literal["date", "salary", "relevance"]] = None

    country: Optional[str] = Field(default=None, exclude=True)
    page: Optional[int] = Field(default=None, ge=1, exclude=True)


# ---- Upstream records ----------------------------------------------------------


class _UpstreamModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", coerce_numbers_to_str=True)


class USAJob(_UpstreamModel):
    """A USAJOBS position, already flattened out of `MatchedObjectDescriptor`."""

    model_config = ConfigDict(alias_generator=to_camel)

    id: str
    title: str = ""
    agency: str = ""
    department: str = ""
    location: str = ""
    salary_min: Optional[str] = None
    salary_max: Optional[str] = None
    schedule: str = "Full-time"
    remote: bool = False
    telework_eligible: bool = False
    apply_url: str = ""
    details_url: str = ""
    posted_date: str = ""
    close_date: str = ""
    summary: str = ""
    grade: Optional[str] = None
    openings: str = "1"
    category: str = "General"


class JobicyJob(_UpstreamModel):
    model_config = ConfigDict(alias_generator=to_camel)

    id: str
    url: str = ""
    job_title: str = ""
    company_name: str = ""
    company_logo: Optional[str] = None
    job_industry: List[str] = Field(default_factory=list)
    job_type: List[str] = Field(default_factory=list)
    job_geo: List[str] = Field(default_factory=list)
    job_level: str = ""
    job_excerpt: str = ""
    job_description: str = ""
    pub_date: str = ""
    salary_min: Optional[float] = None
    salary_max: Optional[float] = None
    salary_currency: Optional[str] = None
    salary_period: Optional[str] = None

    @field_validator("job_industry", "job_type", "job_geo", mode="before")
    @classmethod
    def _multi_valued(cls, value: Any) -> List[str]:
        return _as_list(value)

    @field_validator("salary_currency", "salary_period", "company_logo", mode="before")
    @classmethod
    def _optional(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @field_validator("salary_min", "salary_max", mode="before")
    @classmethod
    def _amount(cls, value: Any) -> Optional[float]:
        return _amount_or_none(value)


class JoinriseJob(_UpstreamModel):
    model_config = ConfigDict(alias_generator=to_camel)

    id: str
    title: str = ""
    company: str = ""
    location: str = ""
    salary: Optional[str] = None
    description: str = ""
    apply_url: str = ""
    created_at: str = ""
    requirements: Optional[str] = None
    job_type: Optional[str] = None
    experience: Optional[str] = None

    @field_validator("salary", "job_type", "experience", mode="before")
    @classmethod
    def _optional(cls, value: Any) -> Any:
        return _blank_to_none(value)


class AdzunaCompany(_UpstreamModel):
    display_name: str = ""


class AdzunaLocation(_UpstreamModel):
    display_name: str = ""
    area: List[str] = Field(default_factory=list)


class AdzunaCategory(_UpstreamModel):
    label: str = ""
    tag: str = ""


class AdzunaJob(_UpstreamModel):
    id: str
    title: str = ""
    company: AdzunaCompany = Field(default_factory=AdzunaCompany)
    location: AdzunaLocation = Field(default_factory=AdzunaLocation)
    category: AdzunaCategory = Field(default_factory=AdzunaCategory)
    salary_min: Optional[float] = None
    salary_max: Optional[float] = None
    contract_type: Optional[str] = None
    redirect_url: str = ""
    created: str = ""
    description: str = ""

    @field_validator("company", "location", "category", mode="before")
    @classmethod
    def _nested(cls, value: Any) -> Any:
        return value or {}

    @field_validator("salary_min", "salary_max", mode="before")
    @classmethod
    def _amount(cls, value: Any) -> Optional[float]:
        return _amount_or_none(value)


# ---- Upstream responses --------------------------------------------------------


class SourceResponse(BaseModel):
    """Common shape of every source response.

    `error` is set when the call failed; the record list is then empty.
    """

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    @abstractmethod
    def items(self) -> List[BaseModel]:
        """The source-native job records; each response type names its own list field."""


class USAJobsResponse(SourceResponse):
    jobs: List[USAJob] = Field(default_factory=list)
    total_count: int = 0
    has_more: bool = False

    @property
    def items(self) -> List[USAJob]:
        return self.jobs


class JobicyResponse(SourceResponse):
    jobs: List[JobicyJob] = Field(default_factory=list)
    count: int = 0

    @property
    def items(self) -> List[JobicyJob]:
        return self.jobs


class JoinriseResponse(SourceResponse):
    jobs: List[JoinriseJob] = Field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int = 20

    @property
    def items(self) -> List[JoinriseJob]:
        return self.jobs


class AdzunaResponse(SourceResponse):
    results: List[AdzunaJob] = Field(default_factory=list)
    count: int = 0
    mean: Optional[float] = None

    @property
    def items(self) -> List[AdzunaJob]:
        return self.results


# ---- Product schema ------------------------------------------------------------


class UnifiedJob(BaseModel):
    """A normalized job record, identical in shape whatever the source.

    `id` carries a fixed per-source prefix (e.g. "usa-12345") so ids never
    collide across sources.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    id: str
    title: str
    company: str
    location: str
    salary: Optional[str] = None
    type: str = "Full-time"
    remote: bool = False
    apply_url: str = ""
    posted_date: str = Field(default="", description="Posting date as provided by the source (ISO-like).")
    summary: str = ""
    source: SourceName
    logo: Optional[str] = None
    industry: Optional[str] = None
    experience: Optional[str] = None


class CombinedResponse(BaseModel):
    """Merged search result across all sources.

    Counts are per source after normalization and before truncation.
    `error` is only set when every queried source failed.
    """

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    jobs: List[UnifiedJob] = Field(default_factory=list)
    usajobs_count: int = 0
    jobicy_count: int = 0
    joinrise_count: int = 0
    adzuna_count: int = 0
    total_count: int = 0
    error: Optional[str] = None
