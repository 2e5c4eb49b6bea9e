from datetime import UTC, datetime

import pytest
from sqlalchemy import select

from roadtrack.models import QaQcStatus, QualityReport
from roadtrack.reports.filters import MAX_LIMIT, FilterError, ReportFilters, apply_filters


def test_build_accepts_camel_and_snake_keys():
    filters = ReportFilters.build(projectId="3", section_id="4", reportType="MATERIAL_TESTING")
    assert filters.project_id == 3
    assert filters.section_id == 4
    assert filters.report_type == "MATERIAL_TESTING"


def test_empty_values_impose_nothing():
    filters = ReportFilters.build(projectId="", status=None, limit=" ")
    assert filters == ReportFilters()
    assert filters.as_dict() == {}


def test_unknown_key_is_rejected():
    with pytest.raises(FilterError, match="Unknown filter"):
        ReportFilters.build(colour="red")


@pytest.mark.parametrize("raw", ["abc", "0", "-2", "1.5"])
def test_ids_must_be_positive_integers(raw):
    with pytest.raises(FilterError):
        ReportFilters.build(projectId=raw)


def test_limit_is_capped():
    assert ReportFilters.build(limit="50000").limit == MAX_LIMIT
    assert ReportFilters.build(limit="20").effective_limit(50) == 20
    assert ReportFilters().effective_limit(50) == 50


def test_date_only_bounds_cover_whole_days():
    filters = ReportFilters.build(startDate="2024-06-15", endDate="2024-06-15")
    assert filters.start_date == datetime(2024, 6, 15, tzinfo=UTC)
    assert filters.end_date.date() == filters.start_date.date()
    assert filters.end_date.hour == 23 and filters.end_date.minute == 59


def test_start_after_end_is_rejected():
    with pytest.raises(FilterError, match="startDate"):
        ReportFilters.build(startDate="2024-07-01", endDate="2024-06-01")


def test_malformed_date_is_rejected():
    with pytest.raises(FilterError, match="Invalid date for startDate"):
        ReportFilters.build(startDate="yesterday")


def test_as_dict_is_camel_case_and_json_native():
    filters = ReportFilters.build(projectId="7", startDate="2024-01-01T10:00:00Z")
    assert filters.as_dict() == {"projectId": 7, "startDate": "2024-01-01T10:00:00+00:00"}


def _quality(db_session, project, test_date, status=QaQcStatus.PASS):
    report = QualityReport(
        project_id=project.id,
        report_type="MATERIAL_TESTING",
        test_date=test_date,
        qa_qc_status=status,
    )
    db_session.add(report)
    db_session.commit()
    return report


def _ids(db_session, filters, **kwargs):
    stmt = apply_filters(select(QualityReport.id).order_by(QualityReport.id), QualityReport, filters, **kwargs)
    return list(db_session.scalars(stmt))


def test_date_range_includes_and_excludes_on_test_date(db_session, make_project):
    project = make_project()
    report = _quality(db_session, project, datetime(2024, 6, 15, 14, 30, tzinfo=UTC))
    other = make_project()
    _quality(db_session, other, datetime(2024, 6, 15, 9, 0, tzinfo=UTC))

    inside = ReportFilters.build(projectId=str(project.id), startDate="2024-06-01", endDate="2024-06-30")
    same_day = ReportFilters.build(projectId=str(project.id), startDate="2024-06-15", endDate="2024-06-15")
    before = ReportFilters.build(projectId=str(project.id), startDate="2024-07-01", endDate="2024-07-31")
    assert _ids(db_session, inside) == [report.id]
    assert _ids(db_session, same_day) == [report.id]
    assert _ids(db_session, before) == []


def test_each_date_bound_applies_alone(db_session, make_project):
    project = make_project()
    early = _quality(db_session, project, datetime(2024, 1, 10, tzinfo=UTC))
    late = _quality(db_session, project, datetime(2024, 9, 10, tzinfo=UTC))

    pid = str(project.id)
    assert _ids(db_session, ReportFilters.build(projectId=pid, startDate="2024-06-01")) == [late.id]
    assert _ids(db_session, ReportFilters.build(projectId=pid, endDate="2024-06-01")) == [early.id]


def test_status_filter_maps_to_entity_enum(db_session, make_project):
    project = make_project()
    passed = _quality(db_session, project, datetime(2024, 3, 1, tzinfo=UTC), QaQcStatus.PASS)
    _quality(db_session, project, datetime(2024, 3, 2, tzinfo=UTC), QaQcStatus.FAIL)

    filters = ReportFilters.build(projectId=str(project.id), status="pass")
    assert _ids(db_session, filters) == [passed.id]

    with pytest.raises(FilterError, match="Invalid status"):
        _ids(db_session, ReportFilters.build(status="DONE"))


def test_filters_outside_allowed_set_are_ignored(db_session, make_project):
    project = make_project()
    report = _quality(db_session, project, datetime(2024, 3, 1, tzinfo=UTC))

    filters = ReportFilters.build(projectId=str(project.id), reportType="SOMETHING_ELSE")
    assert _ids(db_session, filters) == []
    assert _ids(db_session, filters, allowed={"project_id"}) == [report.id]
