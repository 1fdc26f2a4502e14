# utils/excel_utils.py

import pandas as pd
from io import BytesIO
from datetime import datetime
from openpyxl import Workbook
from openpyxl.styles import Font, Alignment, PatternFill, Border, Side
from openpyxl.utils import get_column_letter

from models.attendance_model import AttendanceSummary

TEMPLATE_COLUMNS = ["Employee Name", "Date", "In-Time", "Out-Time"]

REPORT_COLUMNS = ["Date", "Day", "In-Time", "Out-Time", "Expected Hours", "Worked Hours", "Leave"]

HEADER_FILL = PatternFill(start_color="DDDDDD", end_color="DDDDDD", fill_type="solid")

THIN_BORDER = Border(
    left=Side(style='thin'),
    right=Side(style='thin'),
    top=Side(style='thin'),
    bottom=Side(style='thin')
)

def _style_header_row(ws, header_row, columns):
    for col_idx, column in enumerate(columns, start=1):
        cell = ws.cell(row=header_row, column=col_idx)
        cell.font = Font(bold=True)
        cell.alignment = Alignment(horizontal="center")
        cell.fill = HEADER_FILL
        cell.border = THIN_BORDER
        ws.column_dimensions[get_column_letter(col_idx)].width = max(len(column) + 5, 15)

def generate_attendance_template(employee_name="John Doe"):
    """Generate a sample attendance sheet showing the expected layout."""
    wb = Workbook()
    ws = wb.active
    ws.title = "Attendance"

    # Add title row
    ws.merge_cells('A1:D1')
    ws['A1'] = "Attendance Sheet Template"
    ws['A1'].font = Font(bold=True, size=14)
    ws['A1'].alignment = Alignment(horizontal="center", vertical="center")

    # Add instructions row
    ws.merge_cells('A2:D2')
    ws['A2'] = "One row per day. Times as HH:MM or HH.MM, leave a time empty for a leave day."
    ws['A2'].font = Font(italic=True)
    ws['A2'].alignment = Alignment(horizontal="center", vertical="center")

    header_row = 3
    for col_idx, column in enumerate(TEMPLATE_COLUMNS, start=1):
        ws.cell(row=header_row, column=col_idx, value=column)
    _style_header_row(ws, header_row, TEMPLATE_COLUMNS)

    sample_data = [
        (datetime(2024, 12, 2), "09:00", "17:30"),
        (datetime(2024, 12, 3), "09:15", "18:00"),
        (datetime(2024, 12, 4), "09:00", None),
        (datetime(2024, 12, 7), "10:00", "14:00"),
        (datetime(2024, 12, 8), None, None),
    ]
    for idx, (day, in_time, out_time) in enumerate(sample_data):
        row_idx = header_row + idx + 1
        ws.cell(row=row_idx, column=1, value=employee_name if idx == 0 else None)
        date_cell = ws.cell(row=row_idx, column=2, value=day)
        date_cell.number_format = "yyyy-mm-dd"
        ws.cell(row=row_idx, column=3, value=in_time)
        ws.cell(row=row_idx, column=4, value=out_time)

    # Save to stream
    output = BytesIO()
    wb.save(output)
    output.seek(0)
    return output

def create_attendance_report(summary: AttendanceSummary, placeholder="-"):
    """
    Create an Excel report of processed attendance with a totals row.

    Totals are written as SUM/COUNTIF formulas so they stay correct if the
    daily rows are edited in the workbook afterwards.

    Args:
        summary: Aggregated attendance for one employee
        placeholder: Text written for a missing punch

    Returns:
        BytesIO containing the Excel file
    """
    data = [
        {
            "Date": record.date.isoformat(),
            "Day": record.day_name.value,
            "In-Time": record.check_in.display if record.check_in else placeholder,
            "Out-Time": record.check_out.display if record.check_out else placeholder,
            "Expected Hours": record.expected_hours,
            "Worked Hours": record.worked_hours,
            "Leave": "Yes" if record.is_leave else "No",
        }
        for record in summary.records
    ]
    df = pd.DataFrame(data, columns=REPORT_COLUMNS)

    output = BytesIO()
    with pd.ExcelWriter(output, engine='openpyxl') as writer:
        # Write to excel starting from row 3 to leave space for the header
        df.to_excel(writer, index=False, startrow=2, sheet_name="Attendance")
        worksheet = writer.sheets["Attendance"]

        worksheet.merge_cells('A1:D1')
        cell = worksheet.cell(row=1, column=1)
        cell.value = f"{summary.employee_name} ATTENDANCE REPORT"
        cell.font = Font(bold=True, size=14)
        cell.alignment = Alignment(horizontal='left')

        worksheet.merge_cells('E1:G1')
        cell = worksheet.cell(row=1, column=5)
        cell.value = f"Productivity: {summary.productivity}%"
        cell.font = Font(bold=True, size=12)
        cell.alignment = Alignment(horizontal='left')

        _style_header_row(worksheet, 3, REPORT_COLUMNS)

        first_data_row = 4
        last_data_row = first_data_row + len(df) - 1
        total_row_idx = last_data_row + 1

        for row_idx in range(first_data_row, total_row_idx):
            for col_idx in range(1, len(REPORT_COLUMNS) + 1):
                cell = worksheet.cell(row=row_idx, column=col_idx)
                cell.border = THIN_BORDER
                if isinstance(cell.value, (int, float)):
                    cell.alignment = Alignment(horizontal="right")

        worksheet.cell(row=total_row_idx, column=1).value = "TOTAL"
        worksheet.cell(row=total_row_idx, column=1).font = Font(bold=True)

        if len(df):
            for column in ("Expected Hours", "Worked Hours"):
                col_letter = get_column_letter(REPORT_COLUMNS.index(column) + 1)
                cell = worksheet.cell(row=total_row_idx, column=REPORT_COLUMNS.index(column) + 1)
                cell.value = f"=SUM({col_letter}{first_data_row}:{col_letter}{last_data_row})"
                cell.font = Font(bold=True)
                cell.number_format = "0.00"

            leave_letter = get_column_letter(REPORT_COLUMNS.index("Leave") + 1)
            cell = worksheet.cell(row=total_row_idx, column=REPORT_COLUMNS.index("Leave") + 1)
            cell.value = f'=COUNTIF({leave_letter}{first_data_row}:{leave_letter}{last_data_row},"Yes")'
            cell.font = Font(bold=True)

    output.seek(0)
    return output
