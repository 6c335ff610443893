from io import BytesIO

from flask import Response
from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from .aggregation import Report

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def report_workbook(report: Report) -> Workbook:
    """One sheet: a header row, a row per group and the totals row."""
    wb = Workbook()
    ws = wb.active
    # Sheet titles are limited to 31 characters
    ws.title = report.title[:31]

    ws.append(report.columns)
    for row in report.rows:
        ws.append([row.get(c, 0) for c in report.columns])
    if report.totals is not None:
        ws.append([report.totals.get(c, "") for c in report.columns])

    bold = Font(bold=True)
    for cell in ws[1]:
        cell.font = bold
    if report.totals is not None:
        for cell in ws[ws.max_row]:
            cell.font = bold

    for i, column in enumerate(report.columns, start=1):
        ws.column_dimensions[get_column_letter(i)].width = max(12, len(str(column)) + 2)

    return wb


def xlsx_response(report: Report, filename: str) -> Response:
    output = BytesIO()
    report_workbook(report).save(output)

    response = Response(output.getvalue(), mimetype=XLSX_MIMETYPE)
    response.headers["Content-Disposition"] = f'attachment; filename="{filename}"'
    return response
