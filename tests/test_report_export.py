import csv
import io
import json

from roadtrack.reports.export import export_filename, to_csv, to_json

ENVELOPE = {
    "reportType": "overview",
    "generatedAt": "2024-06-15T10:00:00+00:00",
    "filters": {"projectId": 1},
    "data": {
        "summary": {"totalProjects": 2, "averageProgress": 37.5},
        "breakdowns": {"byStatus": {"IN_PROGRESS": 2}},
        "items": [
            {
                "id": 1,
                "name": "Lae - Nadzab Road",
                "province": "Morobe Province",
                "status": "IN_PROGRESS",
                "progress": 50.0,
                "totalSections": 2,
                "activeContractors": 1,
                "gpsPoints": 12,
            },
            {
                "id": 2,
                "name": "Highlands Highway, Stage 2",
                "province": None,
                "status": "IN_PROGRESS",
                "progress": 25.0,
                "totalSections": 0,
                "activeContractors": 0,
                "gpsPoints": 0,
            },
        ],
    },
}


def test_json_export_round_trips():
    assert json.loads(to_json(ENVELOPE)) == ENVELOPE


def test_csv_export_has_title_header_and_rows():
    text = to_csv(ENVELOPE)
    rows = list(csv.reader(io.StringIO(text)))

    assert rows[0] == ["Overview Report"]
    assert rows[1] == ["Generated: 2024-06-15T10:00:00+00:00"]
    assert rows[2] == []
    assert rows[3][0] == "Project Name"
    assert rows[4][:3] == ["Lae - Nadzab Road", "Morobe Province", "IN_PROGRESS"]
    # Commas are quoted and missing values become empty cells.
    assert rows[5][0] == "Highlands Highway, Stage 2"
    assert rows[5][1] == ""
    assert len(rows) == 6


def test_csv_export_reads_nested_item_fields():
    envelope = {
        "reportType": "province",
        "generatedAt": "2024-06-15T10:00:00+00:00",
        "data": {
            "items": [
                {
                    "name": "Morobe Province",
                    "code": "MOR",
                    "region": "Momase",
                    "capital": "Lae",
                    "population": 674000,
                    "infrastructure": {
                        "totalProjects": 3,
                        "activeProjects": 2,
                        "completedProjects": 1,
                        "totalGpsPoints": 40,
                    },
                }
            ]
        },
    }
    rows = list(csv.reader(io.StringIO(to_csv(envelope))))
    assert rows[4] == ["Morobe Province", "MOR", "Momase", "Lae", "674000", "3", "2", "1", "40"]


def test_export_filename_uses_type_and_date():
    assert export_filename(ENVELOPE, "csv") == "overview-report-2024-06-15.csv"
