"""CLI entry point.

This script runs a combined job search across all configured sources and
writes the unified jobs as a JSON list to disk.

Examples:
    python run_fetch.py --out jobs.json
    python run_fetch.py --out jobs.json --limit 40 --keyword "python developer" --remote
    python run_fetch.py --out jobs.json --preset design

Credentials come from the environment (or a .env file), e.g.
JOBBOARD_USAJOBS_API_KEY, JOBBOARD_ADZUNA_APP_ID, JOBBOARD_ADZUNA_APP_KEY.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
from pathlib import Path
from typing import List, Optional

from jobboard.aggregator import PRESETS, CombinedJobSearch
from jobboard.config import configure_logging, get_settings
from jobboard.models import CombinedResponse

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Fetch and normalize jobs from multiple sources.")
    p.add_argument("--out", type=str, default="jobs.json", help="Output JSON file path.")
    p.add_argument("--limit", type=int, default=40, help="Max jobs to output.")
    p.add_argument("--keyword", type=str, default=None, help="Optional search keyword passed to every source.")
    p.add_argument("--location", type=str, default=None, help="Optional location filter.")
    p.add_argument("--remote", action="store_true", help="Keep only remote jobs.")
    p.add_argument(
        "--preset",
        choices=sorted(PRESETS),
        default=None,
        help="Run a canned search instead (ignores --keyword/--location/--remote/--limit).",
    )
    return p.parse_args(argv)


async def fetch(args: argparse.Namespace) -> CombinedResponse:
    search = CombinedJobSearch()
    if args.preset:
        return await search.run_preset(args.preset)
    return await search.search_all(
        keyword=args.keyword,
        location=args.location,
        remote_only=args.remote,
        limit=args.limit,
    )


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    configure_logging(get_settings().log_level)

    result = asyncio.run(fetch(args))
    if result.error:
        logger.error(result.error)

    out_path = Path(args.out).expanduser().resolve()
    out_path.parent.mkdir(parents=True, exist_ok=True)

    data = [j.model_dump(mode="json", by_alias=True, exclude_none=True) for j in result.jobs]
    out_path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")

    print(
        f"Wrote {len(data)} jobs to: {out_path} "
        f"(usajobs={result.usajobs_count}, jobicy={result.jobicy_count}, "
        f"joinrise={result.joinrise_count}, adzuna={result.adzuna_count})"
    )


if __name__ == "__main__":
    main()
