"""Job board aggregation package.

The package is structured so each concern lives in one place:
- `models.py` defines the stable schema (what the product owns) plus the
  per-source request and response shapes.
- `sources/` contains per-source connectors that fetch and cache jobs.
- `normalize.py` maps every source's records onto `UnifiedJob`.
- `aggregator.py` fans a search out to all sources and merges the results.
- `api.py` exposes the combined search over HTTP.
"""

from .aggregator import CombinedJobSearch
from .models import CombinedResponse, UnifiedJob

__all__ = ["CombinedJobSearch", "CombinedResponse", "UnifiedJob"]
