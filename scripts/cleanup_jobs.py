"""Delete search jobs older than the retention window (JOB_RETENTION_DAYS)."""

import argparse
import logging

from places_search.core.config import get_settings
from places_search.core.store import get_job_store
from places_search.jobs.service import purge_expired

logger = logging.getLogger(__name__)


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s - %(message)s")
    parser = argparse.ArgumentParser(description="Purge expired search jobs")
    parser.add_argument("--days", type=int, default=get_settings().job_retention_days, help="Retention in days")
    args = parser.parse_args()

    removed = purge_expired(get_job_store(), args.days)
    print(f"Removed {removed} jobs older than {args.days} days")


if __name__ == "__main__":
    main()
