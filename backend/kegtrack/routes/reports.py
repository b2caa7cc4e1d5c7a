from flask import Blueprint, jsonify, request

from kegtrack.decorators import handle_errors
from kegtrack.extensions import get_store
from kegtrack.services import reporting_service


reports_bp = Blueprint("reports", __name__, url_prefix="/api/reports")


@reports_bp.get("/orders")
@handle_errors("build order report")
def order_report():
    try:
        start, end = reporting_service.parse_range(
            request.args.get("startDate"),
            request.args.get("endDate"),
        )
        report = reporting_service.order_summary(get_store(), start, end)
        return jsonify(report), 200
    except reporting_service.ReportError as exc:
        return jsonify({"message": str(exc)}), 400
