from io import BytesIO

from openpyxl import Workbook

HEADERS = ["Employee Name", "Date", "In-Time", "Out-Time"]


def build_workbook(rows, headers=HEADERS, title_rows=()):
    wb = Workbook()
    ws = wb.active
    for title in title_rows:
        ws.append([title])
    if headers:
        ws.append(list(headers))
    for row in rows:
        ws.append(list(row))
    output = BytesIO()
    wb.save(output)
    return output.getvalue()


class FakeUpload:
    """Stands in for fastapi.UploadFile in service-level tests."""

    def __init__(self, contents, filename="attendance.xlsx"):
        self._contents = contents
        self.filename = filename

    async def read(self):
        return self._contents
