import logging

from flask import jsonify, request
from flask_login import login_required

from apps.common import current_organization_id
from apps.common.errors import NotFoundError

from . import reports
from .aggregation import Report
from .bucketing import ReportWindow
from .builders import REPORTS, dashboard_summary
from .units import convert_report, resolve_unit
from .xlsx import xlsx_response

logger = logging.getLogger(__name__)


def report_json(report: Report):
    return {
        "columns": report.columns,
        "rows": report.rows,
        "totals": report.totals,
        "grand_total": report.grand_total,
        **report.extras,
    }


def render_report(name: str, fmt: str):
    """Build a report for the caller's organization and render it as
    JSON or as an xlsx download."""
    report_type = REPORTS.get(name)
    if report_type is None:
        raise NotFoundError("Report not found")

    organization_id = current_organization_id()
    window = ReportWindow.from_args(request.args, year_required=report_type.year_required)
    report = report_type.build(organization_id, window)
    if report_type.weighted:
        report = convert_report(report, resolve_unit(organization_id, request.args.get("unit")))

    logger.info("Built %s report (%s) with %d rows", name, window.label, len(report.rows))

    if fmt == "xlsx":
        return xlsx_response(report, f"{name}-{window.label}.xlsx")
    return jsonify(report_json(report))


@reports.route("/reports/<name>")
@login_required
def report(name):
    return render_report(name, "json")


@reports.route("/reports/<name>/export")
@login_required
def export(name):
    return render_report(name, "xlsx")


@reports.route("/dashboard-summary")
@login_required
def dashboard():
    window = ReportWindow.from_args(request.args)
    return jsonify(dashboard_summary(current_organization_id(), window))
