# models/attendance_model.py
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import List, Optional
from datetime import date, datetime, time, timezone

class DayCategory(str, Enum):
    WEEKDAY = "Weekday"
    SATURDAY = "Saturday"
    SUNDAY = "Sunday"

class DayPolicy(BaseModel):
    """Expected working hours for each day category."""
    model_config = ConfigDict(frozen=True)

    weekday: float = 8.5
    saturday: float = 4.0
    sunday: float = 0.0

    def expected_hours(self, category: DayCategory) -> float:
        if category == DayCategory.SUNDAY:
            return self.sunday
        if category == DayCategory.SATURDAY:
            return self.saturday
        return self.weekday

class ParsedTime(BaseModel):
    model_config = ConfigDict(frozen=True)

    display: str  # HH:MM, zero-padded
    minutes_since_midnight: int = Field(ge=0)

class DailyRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    date: date
    day_name: DayCategory
    check_in: Optional[ParsedTime] = None
    check_out: Optional[ParsedTime] = None
    expected_hours: float
    worked_hours: float = Field(default=0.0, ge=0)
    is_leave: bool = False
    date_parsed: bool = True  # False when the Date cell was unreadable and today was used

class AttendanceSummary(BaseModel):
    employee_name: str
    total_expected: float
    total_worked: float
    leaves_taken: int
    productivity: str  # one decimal, no "%" suffix
    records: List[DailyRecord]

# Response shapes consumed by the dashboard (camelCase keys)

class AttendanceRecordOut(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    date: datetime
    day_name: DayCategory
    in_time: str
    out_time: str
    expected_hours: float
    worked_hours: float
    is_leave: bool
    date_parsed: bool = True

    @classmethod
    def from_record(cls, record: DailyRecord, placeholder: str = "-"):
        return cls(
            date=datetime.combine(record.date, time(0, 0), tzinfo=timezone.utc),
            day_name=record.day_name,
            in_time=record.check_in.display if record.check_in else placeholder,
            out_time=record.check_out.display if record.check_out else placeholder,
            expected_hours=record.expected_hours,
            worked_hours=record.worked_hours,
            is_leave=record.is_leave,
            date_parsed=record.date_parsed,
        )

class AttendanceSummaryOut(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    employee_name: str
    total_expected: float
    total_worked: float
    leaves_taken: int
    productivity: str
    records: List[AttendanceRecordOut]

    @classmethod
    def from_summary(cls, summary: AttendanceSummary, placeholder: str = "-"):
        return cls(
            employee_name=summary.employee_name,
            total_expected=summary.total_expected,
            total_worked=summary.total_worked,
            leaves_taken=summary.leaves_taken,
            productivity=summary.productivity,
            records=[AttendanceRecordOut.from_record(r, placeholder) for r in summary.records],
        )

class UploadResponse(BaseModel):
    success: bool = True
    data: AttendanceSummaryOut
