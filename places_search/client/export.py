"""Export completed job results as CSV, JSON or an XLSX spreadsheet."""

from __future__ import annotations

import csv
import io
import json
import logging
import re
import unicodedata
from datetime import date
from pathlib import Path
from typing import List, Optional, Union

import phonenumbers
from openpyxl import Workbook
from openpyxl.utils import get_column_letter

from places_search.geo.regions import BRAZIL, UNITED_STATES
from places_search.models import JobStatus, Place, SearchJob

logger = logging.getLogger(__name__)

CSV_HEADERS = ["Name", "Address", "Phone", "Rating", "Reviews", "Category", "Website"]
XLSX_HEADERS = ["Name", "Address", "Phone", "International Phone", "Rating", "Reviews", "Category", "Website"]
XLSX_WIDTHS = [30, 50, 18, 20, 8, 12, 20, 40]

# Whole-location US names, country aliases anywhere, or a trailing ", XX" state code.
_US_HINTS = re.compile(
    r"^(us|usa|california|texas|florida|new york|pennsylvania)$"
    r"|\b(eua|united states|estados unidos)\b"
    r"|,\s*(ca|tx|fl|ny)$"
)

PathLike = Union[str, Path]


def _plain(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch)).lower().strip()


def infer_phone_region(location: Optional[str]) -> str:
    """Guess the phone region from a job's free-text location.

    Anything that does not look like the United States is assumed Brazilian.
    """
    if location and _US_HINTS.search(_plain(location)):
        return UNITED_STATES.code
    return BRAZIL.code


def international_phone(phone: Optional[str], region: str) -> str:
    """E.164 digits without the leading plus, or "" when the number cannot be parsed."""
    if not phone:
        return ""
    try:
        parsed = phonenumbers.parse(phone, region)
    except phonenumbers.NumberParseException:
        return ""
    if not phonenumbers.is_possible_number(parsed):
        return ""
    return phonenumbers.format_number(parsed, phonenumbers.PhoneNumberFormat.E164).lstrip("+")


def select_places(job: SearchJob, only_with_phone: bool = False) -> List[Place]:
    """Places to export, optionally only those with a phone; the job is left untouched."""
    if job.status is not JobStatus.COMPLETED:
        raise ValueError(f"job {job.id} is {job.status.value}; only completed jobs can be exported")
    if only_with_phone:
        return [place for place in job.results if place.phone]
    return list(job.results)


def _cell(value) -> str:
    return "" if value is None else str(value)


def to_csv(job: SearchJob, only_with_phone: bool = False) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, delimiter=";", quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for place in select_places(job, only_with_phone):
        writer.writerow(
            [
                place.name,
                place.address,
                _cell(place.phone),
                _cell(place.rating),
                _cell(place.review_count),
                _cell(place.category),
                _cell(place.website),
            ]
        )
    return buffer.getvalue()


def to_json(job: SearchJob, only_with_phone: bool = False) -> str:
    return json.dumps([place.to_dict() for place in select_places(job, only_with_phone)], indent=2, ensure_ascii=False)


def write_csv(job: SearchJob, path: PathLike, only_with_phone: bool = False) -> Path:
    target = Path(path)
    # BOM so spreadsheet apps detect UTF-8.
    target.write_text(to_csv(job, only_with_phone), encoding="utf-8-sig")
    return target


def write_json(job: SearchJob, path: PathLike, only_with_phone: bool = False) -> Path:
    target = Path(path)
    target.write_text(to_json(job, only_with_phone), encoding="utf-8")
    return target


def write_xlsx(job: SearchJob, path: PathLike, only_with_phone: bool = False) -> Path:
    places = select_places(job, only_with_phone)
    region = infer_phone_region(job.location_scope)

    workbook = Workbook()
    sheet = workbook.active
    sheet.title = "Places"
    sheet.append(XLSX_HEADERS)
    for place in places:
        sheet.append(
            [
                place.name,
                place.address,
                place.phone or "",
                international_phone(place.phone, region),
                place.rating if place.rating is not None else "",
                place.review_count if place.review_count is not None else "",
                place.category or "",
                place.website or "",
            ]
        )
    for index, width in enumerate(XLSX_WIDTHS, start=1):
        sheet.column_dimensions[get_column_letter(index)].width = width

    target = Path(path)
    workbook.save(target)
    logger.info("Exported %d places to %s (phone region %s)", len(places), target, region)
    return target


def export_filename(job: SearchJob, extension: str, today: Optional[date] = None) -> str:
    day = (today or date.today()).isoformat()
    slug = re.sub(r"\s+", "_", job.query.strip())
    return f"places_{slug}_{day}.{extension}"
