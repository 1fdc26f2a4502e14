# config.py
import os
from dotenv import load_dotenv

load_dotenv()


def _get_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _get_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return float(value)


MONGODB_URI = os.getenv("MONGODB_URI")
MONGODB_DB = os.getenv("MONGODB_DB", "attendance_db")

# Only talk to Mongo when a connection string was configured, unless told otherwise
PERSIST_RECORDS = _get_bool("PERSIST_RECORDS", bool(MONGODB_URI))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

WEEKDAY_HOURS = _get_float("WEEKDAY_HOURS", 8.5)
SATURDAY_HOURS = _get_float("SATURDAY_HOURS", 4.0)
SUNDAY_HOURS = _get_float("SUNDAY_HOURS", 0.0)

UNKNOWN_EMPLOYEE = "Unknown Employee"
MISSING_TIME_PLACEHOLDER = "-"

# Canonical column -> accepted header spellings (compared after normalize_header)
COLUMN_ALIASES = {
    "Employee Name": ["employee name", "employee", "name", "emp name", "name of employee"],
    "Date": ["date", "day", "attendance date"],
    "In-Time": ["in time", "intime", "in", "check in", "checkin", "punch in"],
    "Out-Time": ["out time", "outtime", "out", "check out", "checkout", "punch out"],
}


def get_day_policy():
    from models.attendance_model import DayPolicy

    return DayPolicy(
        weekday=WEEKDAY_HOURS,
        saturday=SATURDAY_HOURS,
        sunday=SUNDAY_HOURS,
    )
