# routers/attendance_router.py
from fastapi import APIRouter, File, Query, UploadFile
from fastapi.responses import StreamingResponse
from services.attendance_service import (
    aggregate_records,
    filter_records_by_month,
    get_attendance_records,
    get_attendance_summary,
    process_attendance_upload,
)
from models.attendance_model import AttendanceSummaryOut, UploadResponse
from utils.excel_utils import create_attendance_report, generate_attendance_template
from typing import Optional
import config

router = APIRouter()

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

@router.post("/api/upload", response_model=UploadResponse)
async def api_upload_attendance(file: Optional[UploadFile] = File(None)):
    summary = await process_attendance_upload(file)
    return UploadResponse(
        data=AttendanceSummaryOut.from_summary(summary, config.MISSING_TIME_PLACEHOLDER)
    )

@router.get("/attendance/{employee_name}")
async def api_get_attendance_records(
    employee_name: str,
    year: Optional[int] = None,
    month: Optional[int] = Query(None, ge=1, le=12),
    skip: int = 0,
    limit: int = 100
):
    return await get_attendance_records(employee_name, year, month, skip, limit)

@router.get("/attendance/{employee_name}/summary", response_model=AttendanceSummaryOut)
async def api_get_attendance_summary(
    employee_name: str,
    year: Optional[int] = None,
    month: Optional[int] = Query(None, ge=1, le=12)
):
    summary = await get_attendance_summary(employee_name, year, month)
    return AttendanceSummaryOut.from_summary(summary, config.MISSING_TIME_PLACEHOLDER)

@router.get("/attendance_template")
async def api_attendance_template():
    return StreamingResponse(
        generate_attendance_template(),
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": "attachment; filename=attendance_template.xlsx"}
    )

@router.post("/export_attendance")
async def api_export_attendance(
    file: Optional[UploadFile] = File(None),
    year: Optional[int] = None,
    month: Optional[int] = Query(None, ge=1, le=12)
):
    """
    Process an uploaded sheet and return the daily figures as an Excel report.
    With year and month given only that month is reported.
    """
    summary = await process_attendance_upload(file)
    if year and month:
        summary = aggregate_records(
            filter_records_by_month(summary.records, year, month),
            summary.employee_name
        )

    safe_name = summary.employee_name.replace(" ", "_")
    return StreamingResponse(
        create_attendance_report(summary, config.MISSING_TIME_PLACEHOLDER),
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f"attachment; filename=attendance_{safe_name}.xlsx"}
    )
