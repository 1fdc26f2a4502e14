# utils/query_utils.py

import calendar
import math
from datetime import date
from typing import Any, Dict, Optional

def month_bounds(year: int, month: int):
    days_in_month = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, days_in_month)

def build_attendance_query_filters(filters: Dict[str, Any]) -> Dict[str, Any]:
    """
    Builds MongoDB query filters for stored attendance records.
    Handles employee lookup, explicit date ranges and year/month selection.
    Dates are stored as ISO strings, so range bounds compare lexically.
    """
    mongo_filters = {}

    if filters.get("employee_id"):
        mongo_filters["employee_id"] = filters["employee_id"]

    start_date: Optional[date] = filters.get("start_date")
    end_date: Optional[date] = filters.get("end_date")

    # A year/month pair narrows to that calendar month
    if filters.get("year") and filters.get("month"):
        start_date, end_date = month_bounds(filters["year"], filters["month"])
    elif filters.get("year"):
        start_date, end_date = date(filters["year"], 1, 1), date(filters["year"], 12, 31)

    if start_date:
        mongo_filters.setdefault("date", {})["$gte"] = start_date.isoformat()
    if end_date:
        mongo_filters.setdefault("date", {})["$lte"] = end_date.isoformat()

    if filters.get("is_leave") is not None:
        mongo_filters["is_leave"] = filters["is_leave"]

    return mongo_filters

def clean_nan_values(data):
    """
    Recursively replace NaN, Infinity, and -Infinity values with None in dictionaries and lists.
    """
    if isinstance(data, dict):
        return {k: clean_nan_values(v) for k, v in data.items()}
    elif isinstance(data, list):
        return [clean_nan_values(item) for item in data]
    elif isinstance(data, float) and (math.isnan(data) or math.isinf(data)):
        return None
    else:
        return data
