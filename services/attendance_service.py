# services/attendance_service.py
import logging
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Iterable, List, Optional

import config
from database import get_attendance_collection
from models.attendance_model import AttendanceSummary, DailyRecord, DayCategory, DayPolicy
from services.employee_service import get_employee_by_name, upsert_employee
from utils.excel_extraction import AttendanceUploadError, get_cell, read_attendance_rows
from utils.query_utils import build_attendance_query_filters, clean_nan_values
from utils.time_utils import is_blank, parse_date, parse_date_strict, parse_time, weekday_index

logger = logging.getLogger(__name__)


def day_category(day: date) -> DayCategory:
    index = weekday_index(day)
    if index == 0:
        return DayCategory.SUNDAY
    if index == 6:
        return DayCategory.SATURDAY
    return DayCategory.WEEKDAY


def compute_daily_metrics(row: Dict[str, Any], policy: Optional[DayPolicy] = None,
                          today: Optional[date] = None) -> DailyRecord:
    """
    Turn one sheet row into a DailyRecord.

    A working day with a missing punch counts as leave. Sunday punches are
    kept for display but never counted as worked time. A check-out at or
    before the check-in gives zero hours; shifts crossing midnight are not
    supported.
    """
    policy = policy or config.get_day_policy()

    raw_date = get_cell(row, "Date")
    parsed_date = parse_date_strict(raw_date)
    day = parsed_date if parsed_date is not None else parse_date(raw_date, today=today)

    category = day_category(day)
    check_in = parse_time(get_cell(row, "In-Time"))
    check_out = parse_time(get_cell(row, "Out-Time"))

    worked = 0.0
    is_leave = False
    if category != DayCategory.SUNDAY:
        if check_in is None or check_out is None:
            is_leave = True
        else:
            diff_minutes = check_out.minutes_since_midnight - check_in.minutes_since_midnight
            worked = round(diff_minutes / 60, 2) if diff_minutes > 0 else 0.0

    return DailyRecord(
        date=day,
        day_name=category,
        check_in=check_in,
        check_out=check_out,
        expected_hours=policy.expected_hours(category),
        worked_hours=worked,
        is_leave=is_leave,
        date_parsed=parsed_date is not None,
    )


def extract_employee_name(rows: List[Dict[str, Any]]) -> str:
    # Only the first row names the employee; sheets hold a single person
    if not rows:
        return config.UNKNOWN_EMPLOYEE
    value = get_cell(rows[0], "Employee Name")
    if is_blank(value) or not str(value).strip():
        return config.UNKNOWN_EMPLOYEE
    return str(value).strip()


def aggregate_records(records: Iterable[DailyRecord], employee_name: Optional[str] = None) -> AttendanceSummary:
    records = list(records)
    total_expected = sum(r.expected_hours for r in records)
    total_worked = sum(r.worked_hours for r in records)
    leaves_taken = sum(1 for r in records if r.is_leave)

    if total_expected > 0:
        # Ties round up on the exact float value, as the dashboard displays them
        ratio = Decimal(total_worked / total_expected * 100)
        productivity = str(ratio.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))
    else:
        productivity = "0.0"

    # Totals are rounded for display only; productivity above uses the raw sums
    return AttendanceSummary(
        employee_name=employee_name or config.UNKNOWN_EMPLOYEE,
        total_expected=round(total_expected, 2),
        total_worked=round(total_worked, 2),
        leaves_taken=leaves_taken,
        productivity=productivity,
        records=records,
    )


def filter_records_by_month(records: Iterable[DailyRecord], year: int, month: int) -> List[DailyRecord]:
    return [r for r in records if r.date.year == year and r.date.month == month]


def process_rows(rows: List[Dict[str, Any]], policy: Optional[DayPolicy] = None,
                 today: Optional[date] = None) -> AttendanceSummary:
    policy = policy or config.get_day_policy()
    records = [compute_daily_metrics(row, policy, today) for row in rows]

    unparsed = sum(1 for r in records if not r.date_parsed)
    if unparsed:
        logger.warning("%d of %d rows had an unreadable date", unparsed, len(records))

    return aggregate_records(records, extract_employee_name(rows))


async def save_attendance(summary: AttendanceSummary) -> str:
    """
    Upsert the employee and one attendance document per (employee, date).
    Re-uploading a sheet overwrites the stored values for matching dates.
    """
    employee = await upsert_employee(summary.employee_name)
    employee_id = str(employee["_id"])
    collection = get_attendance_collection()

    for record in summary.records:
        now = datetime.now()
        await collection.update_one(
            {"employee_id": employee_id, "date": record.date.isoformat()},
            {
                "$set": {
                    "day_type": record.day_name.value,
                    "in_time": record.check_in.display if record.check_in else None,
                    "out_time": record.check_out.display if record.check_out else None,
                    "expected_hours": record.expected_hours,
                    "worked_hours": record.worked_hours,
                    "is_leave": record.is_leave,
                    "date_parsed": record.date_parsed,
                    "updated_at": now,
                },
                "$setOnInsert": {"created_at": now},
            },
            upsert=True,
        )

    logger.info("Saved %d attendance records for %s", len(summary.records), summary.employee_name)
    return employee_id


async def process_attendance_upload(file, policy: Optional[DayPolicy] = None) -> AttendanceSummary:
    """Read an uploaded sheet, compute the summary and persist it when enabled."""
    if file is None:
        raise AttendanceUploadError("No file uploaded")

    try:
        contents = await file.read()
        logger.info("Processing attendance upload %s (%d bytes)", file.filename, len(contents))
        rows = read_attendance_rows(contents, file.filename)
        summary = process_rows(rows, policy)

        if config.PERSIST_RECORDS:
            await save_attendance(summary)

        logger.info(
            "Processed %d rows for %s, productivity %s%%",
            len(summary.records), summary.employee_name, summary.productivity,
        )
        return summary
    except AttendanceUploadError:
        raise
    except Exception:
        logger.exception("Upload failed")
        raise AttendanceUploadError("Internal Server Error", status_code=500)


def record_from_document(doc: Dict[str, Any]) -> DailyRecord:
    return DailyRecord(
        date=date.fromisoformat(doc["date"]),
        day_name=DayCategory(doc["day_type"]),
        check_in=parse_time(doc.get("in_time")),
        check_out=parse_time(doc.get("out_time")),
        expected_hours=doc.get("expected_hours") or 0.0,
        worked_hours=doc.get("worked_hours") or 0.0,
        is_leave=bool(doc.get("is_leave")),
        date_parsed=doc.get("date_parsed", True),
    )


async def get_attendance_records(employee_name: str, year: Optional[int] = None,
                                 month: Optional[int] = None, skip: int = 0, limit: int = 100):
    """Get stored attendance records for an employee, oldest first"""
    employee = await get_employee_by_name(employee_name)
    query = build_attendance_query_filters({
        "employee_id": str(employee["_id"]),
        "year": year,
        "month": month,
    })

    cursor = get_attendance_collection().find(query).sort("date", 1).skip(skip).limit(limit)
    records = await cursor.to_list(length=limit)

    # Get total count for pagination
    total_count = await get_attendance_collection().count_documents(query)

    for record in records:
        record["_id"] = str(record["_id"])

    return {"records": clean_nan_values(records), "total": total_count}


async def get_attendance_summary(employee_name: str, year: Optional[int] = None,
                                 month: Optional[int] = None) -> AttendanceSummary:
    """Recompute the summary from everything stored for an employee"""
    employee = await get_employee_by_name(employee_name)
    query = build_attendance_query_filters({
        "employee_id": str(employee["_id"]),
        "year": year,
        "month": month,
    })

    documents = await get_attendance_collection().find(query).sort("date", 1).to_list(length=None)
    records = [record_from_document(doc) for doc in documents]
    return aggregate_records(records, employee["name"])
