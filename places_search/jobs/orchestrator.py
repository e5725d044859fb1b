"""Run one search job: expand its location into cities, walk each city and finalize."""

import logging
import math
from dataclasses import replace
from typing import List, Optional, Set

from places_search.core.config import Settings, get_settings
from places_search.core.store import JobStore
from places_search.geo.classifier import GeoScope, ScopeType, classify
from places_search.jobs.walker import Provider, walk
from places_search.models import JobStatus, Place, Progress, SearchJob

logger = logging.getLogger(__name__)


def city_budget(scope: GeoScope, result_cap: int, min_city_budget: int = 100) -> int:
    """Results to aim for per city.

    A single city gets the whole cap. Wider scopes split the cap evenly but
    never below ``min_city_budget``, so small jobs still probe every city.
    """
    if scope.type is ScopeType.CITY:
        return result_cap
    return max(min_city_budget, math.ceil(result_cap / len(scope.cities)))


def query_variants(query: str) -> List[str]:
    # Exact query only; synonyms pulled in off-target places.
    return [query.strip()]


def _percentage(done: int, total: int) -> int:
    if total <= 0:
        return 0
    return min(100, round(done / total * 100))


class SearchOrchestrator:
    """Sole writer of a job's status, progress and results while it runs."""

    def __init__(self, store: JobStore, provider: Provider, settings: Optional[Settings] = None) -> None:
        self._store = store
        self._provider = provider
        self._settings = settings or get_settings()

    def run(self, job_id: str) -> Optional[JobStatus]:
        """Execute a pending job to completion or failure and return its final status.

        Returns None when the job does not exist or has already been started.
        """
        job = self._store.get(job_id)
        if job is None:
            logger.error("Job %s not found; nothing to run", job_id)
            return None

        progress = Progress(target_result_count=job.result_cap)
        if not self._store.mark_running(job_id, progress):
            logger.warning("Job %s is %s, refusing to run it again", job_id, job.status.value)
            return None

        logger.info("Running job %s query=%r location=%r cap=%d", job_id, job.query, job.location_scope, job.result_cap)
        try:
            results, progress = self._scan(job, progress)
            results = [place.with_position(index + 1) for index, place in enumerate(results[: job.result_cap])]
            progress.current_result_count = len(results)
            progress.percentage = 100
            self._store.mark_completed(job_id, results, progress)
        except Exception as exc:  # noqa: BLE001
            logger.exception("Job %s failed: %s", job_id, exc)
            self._store.mark_failed(job_id, str(exc) or exc.__class__.__name__)
            return JobStatus.FAILED

        logger.info(
            "Job %s completed: results=%d cities=%d/%d failed_pairs=%d",
            job_id,
            len(results),
            progress.city_index,
            progress.total_cities,
            progress.failed_pairs,
        )
        return JobStatus.COMPLETED

    def _scan(self, job: SearchJob, progress: Progress):
        settings = self._settings
        scope = classify(job.location_scope, default_country=settings.default_country)
        cities = scope.cities
        cap = job.result_cap
        budget = city_budget(scope, cap, settings.min_city_budget)
        variants = query_variants(job.query)

        progress.total_cities = len(cities)
        progress.location_type = scope.type.value
        logger.info("Job %s scope=%s cities=%d per_city_budget=%d", job.id, scope.type.value, len(cities), budget)

        seen: Set[str] = set()
        results: List[Place] = []

        for index, city in enumerate(cities):
            if len(results) >= cap:
                logger.info("Job %s reached its cap of %d results", job.id, cap)
                break

            progress.current_city = city
            progress.city_index = index + 1
            progress.current_result_count = len(results)
            progress.percentage = max(progress.percentage, _percentage(index, len(cities)))
            self._store.update_progress(job.id, replace(progress))

            city_found = 0
            for variant in variants:
                if len(results) >= cap or city_found >= budget:
                    break
                remaining = min(budget - city_found, cap - len(results))
                reporter = self._make_reporter(job.id, progress, base=len(results))
                outcome = walk(
                    self._provider,
                    variant,
                    city,
                    remaining,
                    seen,
                    max_pages=settings.max_pages,
                    empty_page_limit=settings.empty_page_limit,
                    page_delay=settings.page_delay,
                    on_found=reporter,
                )
                results.extend(outcome.places)
                city_found += outcome.found_count
                progress.pairs_searched += 1
                if outcome.failed:
                    progress.failed_pairs += 1

            progress.current_result_count = len(results)
            progress.percentage = max(progress.percentage, _percentage(index + 1, len(cities)))
            self._store.update_progress(job.id, replace(progress))

        return results, progress

    def _make_reporter(self, job_id: str, progress: Progress, base: int):
        every = max(1, self._settings.progress_every)

        def report(found: int) -> None:
            if found % every == 0:
                progress.current_result_count = base + found
                self._store.update_progress(job_id, replace(progress))

        return report
