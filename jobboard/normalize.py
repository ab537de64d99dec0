"""Normalization from source records to `UnifiedJob`.

One pure function per source plus a dispatcher keyed by source tag. Each
source represents salary, job type and remote status differently; the
heuristics for reconciling them are kept here so they stay predictable and
testable:

- salary is rendered as one display string ("$80,000 - $120,000", "$80,000+");
- remote status comes from an explicit flag where the source has one, is
  assumed for remote-only feeds, and is otherwise inferred from the location;
- multi-valued fields are joined into comma-separated strings;
- ids are prefixed with a per-source tag so they never collide after merging.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Optional

from .models import AdzunaJob, JobicyJob, JoinriseJob, UnifiedJob, USAJob
from .utils import join_values


ID_PREFIXES: Dict[str, str] = {
    "usajobs": "usa",
    "jobicy": "jobicy",
    "joinrise": "joinrise",
    "adzuna": "adzuna",
}

CURRENCY_SYMBOLS: Dict[str, str] = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
}

DEFAULT_JOB_TYPE = "Full-time"


def _to_number(value: Any) -> Optional[float]:
    """Coerce a salary bound to a positive number; zero, blanks and junk become None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.replace(",", "").replace("$", "").strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if number > 0 else None


def _format_amount(amount: float) -> str:
    if amount.is_integer():
        return f"{int(amount):,}"
    return f"{amount:,.2f}"


def format_salary(
    minimum: Any = None,
    maximum: Any = None,
    currency: Optional[str] = "USD",
    period: Optional[str] = None,
) -> Optional[str]:
    """Render a salary range as a display string.

    >>> format_salary(80000, 120000)
    '$80,000 - $120,000'
    >>> format_salary("80000.0")
    '$80,000+'
    >>> format_salary() is None
    True
    """
    low = _to_number(minimum)
    high = _to_number(maximum)
    if low is None and high is None:
        return None

    code = (currency or "USD").strip().upper()
    symbol = CURRENCY_SYMBOLS.get(code, f"{code} ")
    suffix = f"/{period.strip()}" if period and period.strip() else ""

    if low is not None and high is not None:
        text = f"{symbol}{_format_amount(low)} - {symbol}{_format_amount(high)}"
    elif low is not None:
        text = f"{symbol}{_format_amount(low)}+"
    else:
        text = f"Up to {symbol}{_format_amount(high)}"
    return text + suffix


def infer_remote(location: Optional[str]) -> bool:
    """Heuristic for sources without a remote flag: look for 'remote' in the location."""
    return "remote" in (location or "").lower()


def normalize_usajob(job: USAJob) -> UnifiedJob:
    return UnifiedJob(
        id=f"{ID_PREFIXES['usajobs']}-{job.id}",
        title=job.title,
        company=job.agency,
        location=job.location,
        salary=format_salary(job.salary_min, job.salary_max),
        type=job.schedule or DEFAULT_JOB_TYPE,
        remote=job.remote,
        apply_url=job.apply_url,
        posted_date=job.posted_date,
        summary=job.summary,
        source="usajobs",
        industry=job.category,
    )


def normalize_jobicy_job(job: JobicyJob) -> UnifiedJob:
    # Jobicy only lists remote positions.
    return UnifiedJob(
        id=f"{ID_PREFIXES['jobicy']}-{job.id}",
        title=job.job_title,
        company=job.company_name,
        location=join_values(job.job_geo, default="Remote"),
        salary=format_salary(job.salary_min, job.salary_max, job.salary_currency, job.salary_period),
        type=join_values(job.job_type, default=DEFAULT_JOB_TYPE),
        remote=True,
        apply_url=job.url,
        posted_date=job.pub_date,
        summary=job.job_excerpt,
        source="jobicy",
        logo=job.company_logo,
        industry=join_values(job.job_industry),
    )


def normalize_joinrise_job(job: JoinriseJob) -> UnifiedJob:
    salary = job.salary.strip() if job.salary else None
    return UnifiedJob(
        id=f"{ID_PREFIXES['joinrise']}-{job.id}",
        title=job.title,
        company=job.company,
        location=job.location,
        salary=salary or None,
        type=job.job_type or DEFAULT_JOB_TYPE,
        remote=infer_remote(job.location),
        apply_url=job.apply_url,
        posted_date=job.created_at,
        summary=job.description,
        source="joinrise",
        experience=job.experience,
    )


def normalize_adzuna_job(job: AdzunaJob) -> UnifiedJob:
    return UnifiedJob(
        id=f"{ID_PREFIXES['adzuna']}-{job.id}",
        title=job.title,
        company=job.company.display_name,
        location=job.location.display_name,
        salary=format_salary(job.salary_min, job.salary_max),
        type=job.contract_type or DEFAULT_JOB_TYPE,
        remote=infer_remote(job.location.display_name),
        apply_url=job.redirect_url,
        posted_date=job.created,
        summary=job.description,
        source="adzuna",
        industry=job.category.label or None,
    )


NORMALIZERS: Dict[str, Callable[[Any], UnifiedJob]] = {
    "usajobs": normalize_usajob,
    "jobicy": normalize_jobicy_job,
    "joinrise": normalize_joinrise_job,
    "adzuna": normalize_adzuna_job,
}


def normalize_job(source: str, job: Any) -> UnifiedJob:
    """Normalize one record from the named source."""
    try:
        normalizer = NORMALIZERS[source]
    except KeyError:
        raise ValueError(f"Unknown job source: {source!r}") from None
    return normalizer(job)
