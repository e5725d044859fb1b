import csv
import io
import json
from datetime import date

import pytest
from openpyxl import load_workbook

from places_search.client import export
from places_search.models import JobStatus, Place, SearchJob


@pytest.fixture
def job():
    places = [
        Place(name="Acme; Dental", address='Rua "A", 10', phone="(62) 3333-4444", rating=4.5, review_count=12, external_id="c1", position=1),
        Place(name="No Phone Co", address="Av. Goiás, 200", position=2),
        Place(name="Intl Clinic", address="Rua B", phone="+55 62 99999-8888", category="Dentist", position=3),
    ]
    return SearchJob(
        owner="session_1",
        query="clinica  odontologica",
        result_cap=10,
        location_scope="GO",
        status=JobStatus.COMPLETED,
        results=places,
        total_found=len(places),
    )


def test_csv_round_trip(job):
    content = export.to_csv(job)
    rows = list(csv.reader(io.StringIO(content), delimiter=";"))

    assert rows[0] == export.CSV_HEADERS
    parsed = {(row[0], row[1], row[2] or None) for row in rows[1:]}
    assert parsed == {(place.name, place.address, place.phone) for place in job.results}


def test_csv_quotes_every_field(job):
    first_data_line = export.to_csv(job).splitlines()[1]
    assert first_data_line.startswith('"Acme; Dental";"Rua ""A"", 10";')


def test_write_csv_has_bom(job, tmp_path):
    path = export.write_csv(job, tmp_path / "out.csv")
    assert path.read_bytes().startswith(b"\xef\xbb\xbf")
    with path.open(encoding="utf-8-sig", newline="") as fh:
        assert next(csv.reader(fh, delimiter=";")) == export.CSV_HEADERS


def test_only_with_phone_does_not_mutate_job(job):
    rows = list(csv.reader(io.StringIO(export.to_csv(job, only_with_phone=True)), delimiter=";"))
    assert [row[0] for row in rows[1:]] == ["Acme; Dental", "Intl Clinic"]
    assert len(job.results) == 3


def test_json_export(job):
    data = json.loads(export.to_json(job))
    assert [item["position"] for item in data] == [1, 2, 3]
    assert data[0]["externalId"] == "c1"
    assert data[1]["phone"] is None


def test_export_requires_completed_job(job):
    job.status = JobStatus.RUNNING
    with pytest.raises(ValueError):
        export.to_csv(job)


@pytest.mark.parametrize(
    "location, expected",
    [
        (None, "BR"),
        ("GO", "BR"),
        ("Goiânia", "BR"),
        ("Brasil", "BR"),
        ("USA", "US"),
        ("Estados Unidos", "US"),
        ("Miami, FL", "US"),
        ("New York", "US"),
        ("Florida", "US"),
        ("Belém, PA", "BR"),
        ("Flórida Paulista", "BR"),
        ("Flórida, PR", "BR"),
    ],
)
def test_infer_phone_region(location, expected):
    assert export.infer_phone_region(location) == expected


@pytest.mark.parametrize(
    "phone, region, expected",
    [
        ("(62) 3333-4444", "BR", "556233334444"),
        ("(62) 99999-8888", "BR", "5562999998888"),
        ("+55 62 99999-8888", "BR", "5562999998888"),
        ("0 21 62 3333-4444", "BR", "556233334444"),
        ("(212) 555-1234", "US", "12125551234"),
        ("+1 212 555 1234 ext. 5", "US", "12125551234"),
        ("+1 212 555 1234", "BR", "12125551234"),
        (None, "BR", ""),
        ("", "BR", ""),
        ("n/a", "BR", ""),
    ],
)
def test_international_phone(phone, region, expected):
    assert export.international_phone(phone, region) == expected


def test_write_xlsx(job, tmp_path):
    path = export.write_xlsx(job, tmp_path / "out.xlsx")

    sheet = load_workbook(path).active
    rows = list(sheet.iter_rows(values_only=True))
    assert sheet.title == "Places"
    assert list(rows[0]) == export.XLSX_HEADERS
    assert rows[1][0] == "Acme; Dental"
    assert rows[1][3] == "556233334444"
    assert rows[3][3] == "5562999998888"
    assert len(rows) == 4


def test_export_filename(job):
    assert export.export_filename(job, "xlsx", today=date(2026, 10, 17)) == "places_clinica_odontologica_2026-10-17.xlsx"


def test_export_filename_collapses_whitespace(job):
    job.query = "  pet   shop\tcenter "
    assert export.export_filename(job, "csv", today=date(2026, 1, 2)) == "places_pet_shop_center_2026-01-02.csv"
