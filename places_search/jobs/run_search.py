"""CLI job that runs one search in the foreground and exports its results."""

import argparse
import functools
import logging
from pathlib import Path
from typing import Optional

from places_search.client import export
from places_search.core.config import ConfigError, get_settings, require_api_key
from places_search.core.store import InMemoryJobStore
from places_search.jobs.orchestrator import SearchOrchestrator
from places_search.models import JobStatus, SearchJob
from places_search.vendors import serper

logger = logging.getLogger(__name__)

_WRITERS = {
    "csv": export.write_csv,
    "json": export.write_json,
    "xlsx": export.write_xlsx,
}


def run_search_job(
    *,
    query: str,
    location: Optional[str],
    max_results: int,
    owner: str = "cli",
) -> SearchJob:
    settings = get_settings()
    api_key = require_api_key(settings)

    if not query or not query.strip():
        raise ValueError("Query must not be empty")
    if max_results <= 0:
        raise ValueError("max_results must be positive")

    store = InMemoryJobStore()
    job = store.create(SearchJob(owner=owner, query=query.strip(), result_cap=max_results, location_scope=location))
    provider = functools.partial(_fetch_page, api_key=api_key)

    SearchOrchestrator(store, provider, settings).run(job.id)
    finished = store.get(job.id)
    logger.info("Job %s finished with status=%s results=%d", job.id, finished.status.value, finished.total_found)
    return finished


def _fetch_page(search_text: str, page: int, *, api_key: str):
    settings = get_settings()
    return serper.search_places(search_text, api_key, page=page, num=settings.page_size, url=settings.serper_api_url)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run a places search job and export the results")
    parser.add_argument("query", help="What to search for, e.g. 'dentista'")
    parser.add_argument("--location", dest="location", help="City, state (name or code) or country; empty searches the whole country")
    parser.add_argument(
        "--max-results",
        dest="max_results",
        type=int,
        default=get_settings().default_result_cap,
        help="Maximum number of places to collect",
    )
    parser.add_argument("--format", dest="fmt", choices=sorted(_WRITERS), default="csv", help="Export format")
    parser.add_argument("--output", dest="output", help="Output file; defaults to places_<query>_<date>.<format>")
    parser.add_argument("--only-with-phone", dest="only_with_phone", action="store_true", help="Skip places without a phone")
    return parser


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s - %(message)s")
    args = build_parser().parse_args()

    try:
        job = run_search_job(query=args.query, location=args.location, max_results=args.max_results)
    except ConfigError as exc:
        logger.error("Configuration error: %s", exc)
        raise SystemExit(2) from exc

    if job.status is JobStatus.FAILED:
        logger.error("Search failed: %s", job.error_message)
        raise SystemExit(1)

    output = Path(args.output or export.export_filename(job, args.fmt))
    _WRITERS[args.fmt](job, output, only_with_phone=args.only_with_phone)
    logger.info("Wrote %s", output)


if __name__ == "__main__":
    main()
