# Overview: Flask API routes for keg fleet analytics.

from flask import Blueprint, jsonify, request, current_app

from ..decorators import handle_errors
from ..extensions import get_store


analytics_bp = Blueprint("analytics", __name__, url_prefix="/api/analytics")

# Ten years
MAX_OVERDUE_DAYS = 3650


@analytics_bp.get("/stats")
@handle_errors("fetch stats")
def keg_stats_route():
    """Keg counts per status plus total."""
    return jsonify(get_store().get_keg_stats())


@analytics_bp.get("/overdue")
@handle_errors("fetch overdue kegs")
def overdue_kegs_route():
    """
    Deployed kegs out longer than `days` (default OVERDUE_DAYS_DEFAULT), longest-out first.
    """
    raw = request.args.get("days")
    if raw is None:
        days = current_app.config["OVERDUE_DAYS_DEFAULT"]
    else:
        try:
            days = int(raw)
        except ValueError:
            return jsonify({"message": "days must be an integer"}), 400
    if days < 0:
        return jsonify({"message": "days must be >= 0"}), 400
    if days > MAX_OVERDUE_DAYS:
        return jsonify({"message": f"days must be <= {MAX_OVERDUE_DAYS}"}), 400
    kegs = get_store().get_overdue_kegs(days)
    return jsonify([k.to_dict() for k in kegs])
