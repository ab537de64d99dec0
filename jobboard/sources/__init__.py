"""Per-provider source connectors."""

from .adzuna import AdzunaSource
from .base import JobSource
from .jobicy import JobicySource
from .joinrise import JoinriseSource
from .usajobs import USAJobsSource

__all__ = ["JobSource", "USAJobsSource", "JobicySource", "JoinriseSource", "AdzunaSource"]
