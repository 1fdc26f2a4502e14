import asyncio
from datetime import date
from unittest.mock import AsyncMock, MagicMock

import pytest

import config
from models.attendance_model import DailyRecord, DayCategory, DayPolicy
from services import attendance_service
from services.attendance_service import (
    aggregate_records,
    compute_daily_metrics,
    extract_employee_name,
    filter_records_by_month,
    process_attendance_upload,
    process_rows,
    record_from_document,
    save_attendance,
)
from utils.excel_extraction import AttendanceUploadError
from tests.helpers import FakeUpload

POLICY = DayPolicy()


def make_record(expected, worked, is_leave=False, day=date(2024, 12, 4)):
    return DailyRecord(
        date=day,
        day_name=DayCategory.WEEKDAY,
        expected_hours=expected,
        worked_hours=worked,
        is_leave=is_leave,
    )


def test_sunday_punches_are_not_counted():
    record = compute_daily_metrics(
        {"Date": "2024-12-08", "In-Time": "09:00", "Out-Time": "17:00"}, POLICY
    )
    assert record.day_name == DayCategory.SUNDAY
    assert record.worked_hours == 0
    assert record.is_leave is False
    assert record.expected_hours == 0.0
    assert record.check_in.display == "09:00"


def test_sunday_without_punches_is_not_leave():
    record = compute_daily_metrics({"Date": "2024-12-08"}, POLICY)
    assert record.is_leave is False
    assert record.worked_hours == 0


def test_missing_check_out_is_leave():
    record = compute_daily_metrics({"Date": "2024-12-03", "In-Time": "09:00"}, POLICY)
    assert record.day_name == DayCategory.WEEKDAY
    assert record.is_leave is True
    assert record.worked_hours == 0
    assert record.expected_hours == 8.5


def test_full_weekday():
    record = compute_daily_metrics(
        {"Date": "2024-12-04", "In-Time": "09:00", "Out-Time": "17:30"}, POLICY
    )
    assert record.worked_hours == 8.5
    assert record.is_leave is False


def test_saturday_expected_hours():
    record = compute_daily_metrics(
        {"Date": "2024-12-07", "In-Time": "10.00", "Out-Time": "14.00"}, POLICY
    )
    assert record.day_name == DayCategory.SATURDAY
    assert record.expected_hours == 4.0
    assert record.worked_hours == 4.0


def test_worked_hours_rounded_to_two_places():
    record = compute_daily_metrics(
        {"Date": "2024-12-04", "In-Time": "09:00", "Out-Time": "17:20"}, POLICY
    )
    assert record.worked_hours == 8.33


@pytest.mark.parametrize("out_time", ["08:00", "09:00"])
def test_check_out_not_after_check_in_gives_zero(out_time):
    record = compute_daily_metrics(
        {"Date": "2024-12-04", "In-Time": "09:00", "Out-Time": out_time}, POLICY
    )
    assert record.worked_hours == 0
    assert record.is_leave is False


def test_serial_date_row():
    record = compute_daily_metrics({"Date": 45200, "In-Time": "9:00", "Out-Time": "12:00"}, POLICY)
    assert record.date == date(2023, 10, 1)
    assert record.day_name == DayCategory.SUNDAY


def test_aliased_headers():
    record = compute_daily_metrics(
        {"date": "2024-12-04", "in time": "9:00", "Check Out": "17:00"}, POLICY
    )
    assert record.worked_hours == 8.0


def test_custom_day_policy():
    policy = DayPolicy(weekday=8.0, saturday=0.0, sunday=0.0)
    assert compute_daily_metrics({"Date": "2024-12-04"}, policy).expected_hours == 8.0
    assert compute_daily_metrics({"Date": "2024-12-07"}, policy).expected_hours == 0.0


def test_default_policy_comes_from_config(monkeypatch):
    monkeypatch.setattr(config, "WEEKDAY_HOURS", 9.0)
    assert compute_daily_metrics({"Date": "2024-12-04"}).expected_hours == 9.0


def test_unreadable_date_is_marked():
    today = date(2024, 12, 4)
    record = compute_daily_metrics({"Date": "n/a", "In-Time": "9:00", "Out-Time": "10:00"}, POLICY, today)
    assert record.date == today
    assert record.date_parsed is False
    assert record.worked_hours == 1.0


def test_aggregate_nothing():
    summary = aggregate_records([])
    assert summary.productivity == "0.0"
    assert summary.total_expected == 0
    assert summary.total_worked == 0
    assert summary.leaves_taken == 0
    assert summary.employee_name == config.UNKNOWN_EMPLOYEE


def test_aggregate_totals():
    records = [
        make_record(8.5, 8.5),
        make_record(4.0, 2.0),
        make_record(0.0, 0.0),
        make_record(8.5, 0.0, is_leave=True),
    ]
    summary = aggregate_records(records[:3], "Jane Roe")
    assert summary.total_expected == 12.5
    assert summary.total_worked == 10.5
    assert summary.productivity == "84.0"
    assert summary.records == records[:3]

    assert aggregate_records(records).leaves_taken == 1


def test_productivity_ties_round_up():
    record = compute_daily_metrics(
        {"Date": "2024-12-07", "In-Time": "09:00", "Out-Time": "12:22"}, POLICY
    )
    assert record.worked_hours == 3.37
    assert aggregate_records([record]).productivity == "84.3"


def test_aggregate_is_idempotent():
    records = [make_record(8.5, 7.25), make_record(4.0, 4.0)]
    assert aggregate_records(records, "A") == aggregate_records(records, "A")


def test_employee_name_from_first_row_only():
    assert extract_employee_name([{"Employee Name": " Jane Roe "}, {"Employee Name": "Other"}]) == "Jane Roe"
    assert extract_employee_name([{"Date": "2024-12-04"}, {"Employee Name": "Other"}]) == config.UNKNOWN_EMPLOYEE
    assert extract_employee_name([{"Employee Name": "   "}]) == config.UNKNOWN_EMPLOYEE
    assert extract_employee_name([{"employee name": "lower"}]) == "lower"
    assert extract_employee_name([]) == config.UNKNOWN_EMPLOYEE


def test_filter_records_by_month():
    records = [
        make_record(8.5, 8.5, day=date(2024, 11, 29)),
        make_record(8.5, 8.0, day=date(2024, 12, 2)),
    ]
    assert filter_records_by_month(records, 2024, 12) == records[1:]


def test_process_rows():
    rows = [
        {"Employee Name": "Jane Roe", "Date": "2024-12-04", "In-Time": "09:00", "Out-Time": "17:30"},
        {"Employee Name": None, "Date": "2024-12-03", "In-Time": "09:00", "Out-Time": None},
        {"Employee Name": None, "Date": "2024-12-07", "In-Time": "10:00", "Out-Time": "12:00"},
    ]
    summary = process_rows(rows, POLICY)
    assert summary.employee_name == "Jane Roe"
    assert summary.total_expected == 21.0
    assert summary.total_worked == 10.5
    assert summary.leaves_taken == 1
    assert summary.productivity == "50.0"
    assert [r.date for r in summary.records] == [date(2024, 12, 4), date(2024, 12, 3), date(2024, 12, 7)]


def test_save_attendance_upserts_per_date(monkeypatch):
    collection = MagicMock()
    collection.update_one = AsyncMock()
    monkeypatch.setattr(attendance_service, "upsert_employee", AsyncMock(return_value={"_id": "emp1"}))
    monkeypatch.setattr(attendance_service, "get_attendance_collection", lambda: collection)

    summary = process_rows([
        {"Employee Name": "Jane Roe", "Date": "2024-12-04", "In-Time": "09:00", "Out-Time": "17:30"},
        {"Date": "2024-12-03", "In-Time": "09:00"},
    ], POLICY)
    employee_id = asyncio.run(save_attendance(summary))

    assert employee_id == "emp1"
    attendance_service.upsert_employee.assert_awaited_once_with("Jane Roe")
    assert collection.update_one.await_count == 2

    query, update = collection.update_one.await_args_list[1].args
    assert query == {"employee_id": "emp1", "date": "2024-12-03"}
    assert update["$set"]["in_time"] == "09:00"
    assert update["$set"]["out_time"] is None
    assert update["$set"]["is_leave"] is True
    assert collection.update_one.await_args_list[1].kwargs == {"upsert": True}


def test_record_from_document():
    record = record_from_document({
        "date": "2024-12-04",
        "day_type": "Weekday",
        "in_time": "09:00",
        "out_time": None,
        "expected_hours": 8.5,
        "worked_hours": 0,
        "is_leave": True,
    })
    assert record.date == date(2024, 12, 4)
    assert record.check_in.minutes_since_midnight == 540
    assert record.check_out is None
    assert record.is_leave is True


def test_upload_without_file():
    with pytest.raises(AttendanceUploadError) as exc_info:
        asyncio.run(process_attendance_upload(None))
    assert exc_info.value.message == "No file uploaded"
    assert exc_info.value.status_code == 400


def test_upload_unexpected_failure_is_generic(monkeypatch, sample_xlsx):
    monkeypatch.setattr(attendance_service, "process_rows", MagicMock(side_effect=RuntimeError("boom")))
    with pytest.raises(AttendanceUploadError) as exc_info:
        asyncio.run(process_attendance_upload(FakeUpload(sample_xlsx)))
    assert exc_info.value.status_code == 500
    assert exc_info.value.message == "Internal Server Error"


def test_upload_persists_when_enabled(monkeypatch, sample_xlsx):
    save = AsyncMock(return_value="emp1")
    monkeypatch.setattr(config, "PERSIST_RECORDS", True)
    monkeypatch.setattr(attendance_service, "save_attendance", save)

    summary = asyncio.run(process_attendance_upload(FakeUpload(sample_xlsx)))

    save.assert_awaited_once_with(summary)
    assert summary.employee_name == "Jane Roe"
