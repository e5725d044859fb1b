"""HTTP entrypoint that accepts search jobs and serves their status."""

from __future__ import annotations

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from functools import lru_cache
from typing import Any, Dict

from flask import Flask, jsonify, request

from places_search.core.config import get_settings
from places_search.core.store import get_job_store
from places_search.jobs.orchestrator import SearchOrchestrator
from places_search.jobs.service import JobService, ValidationError
from places_search.vendors import serper

logger = logging.getLogger(__name__)

# ---------- App & executor ----------
app = Flask(__name__)
_executor = ThreadPoolExecutor(max_workers=get_settings().max_workers, thread_name_prefix="search-job")


def _provider(search_text: str, page: int) -> Dict[str, Any]:
    settings = get_settings()
    return serper.search_places(
        search_text,
        settings.serper_api_key,
        page=page,
        num=settings.page_size,
        url=settings.serper_api_url,
    )


def _run_job_safe(job_id: str) -> None:
    try:
        SearchOrchestrator(get_job_store(), _provider).run(job_id)
    except Exception as exc:  # noqa: BLE001
        logger.exception("Search job %s crashed: %s", job_id, exc)


@lru_cache(maxsize=1)
def get_service() -> JobService:
    return JobService(
        store=get_job_store(),
        executor=_executor,
        runner=_run_job_safe,
        default_result_cap=get_settings().default_result_cap,
    )


# ---------- Routes ----------


@app.get("/")
def root() -> Any:
    """Simple root to avoid 404 on GET /"""
    return "ok", 200


@app.get("/healthz")
def healthcheck() -> Any:
    """Lightweight health endpoint; reads settings only, never touches the database."""
    settings = get_settings()
    return (
        jsonify(
            {
                "status": "ok",
                "worker_port_config": settings.worker_port,
                "store": "postgres" if settings.database_url else "memory",
                "revision": os.getenv("K_REVISION", "unknown"),
            }
        ),
        200,
    )


@app.post("/jobs")
def submit_job() -> Any:
    """
    Queue a search job.
    Required JSON fields: query, owner
    Optional: locationScope (str), resultCap (int > 0)
    """
    payload: Dict[str, Any] = request.get_json(silent=True) or {}
    try:
        job_id = get_service().submit(
            owner=payload.get("owner"),
            query=payload.get("query"),
            location_scope=payload.get("locationScope"),
            result_cap=payload.get("resultCap"),
        )
    except ValidationError as exc:
        return jsonify({"error": str(exc)}), 400

    return jsonify({"data": {"jobId": job_id, "status": "pending"}}), 202


@app.get("/jobs/<job_id>")
def job_status(job_id: str) -> Any:
    job = get_service().get_status(job_id)
    if job is None:
        return jsonify({"error": "job not found"}), 404
    return jsonify({"data": job.to_dict()}), 200


@app.get("/jobs")
def list_jobs() -> Any:
    owner = (request.args.get("owner") or "").strip()
    if not owner:
        return jsonify({"error": "owner query parameter is required"}), 400
    jobs = get_service().list_for_owner(owner)
    return jsonify({"data": [job.to_dict() for job in jobs]}), 200


@app.delete("/jobs/<job_id>")
def delete_job(job_id: str) -> Any:
    if not get_service().delete_job(job_id):
        return jsonify({"error": "job not found"}), 404
    return jsonify({"data": {"jobId": job_id, "deleted": True}}), 200


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )
    port = int(os.getenv("PORT") or get_settings().worker_port)
    logger.info("[BOOT] Binding on 0.0.0.0:%d", port)
    app.run(host="0.0.0.0", port=port)


if __name__ == "__main__":
    main()
