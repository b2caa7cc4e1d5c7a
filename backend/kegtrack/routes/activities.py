# Overview: Flask API route for the keg activity log.

from flask import Blueprint, request, jsonify, current_app

from ..decorators import handle_errors
from ..extensions import get_store


activities_bp = Blueprint("activities", __name__, url_prefix="/api/activities")


@activities_bp.get("")
@handle_errors("fetch activities")
def list_activities_route():
    """
    Activity log, most recent first.

    Query parameters:
    - kegId: full history of one keg (limit is ignored)
    - limit: number of recent entries across all kegs (default RECENT_ACTIVITY_LIMIT)
    """
    store = get_store()
    keg_id = request.args.get("kegId")

    if keg_id:
        activities = store.get_activities_by_keg(keg_id)
    else:
        limit = request.args.get("limit", current_app.config["RECENT_ACTIVITY_LIMIT"], type=int)
        # Clamp limit
        if limit < 1:
            limit = 1
        if limit > 500:
            limit = 500
        activities = store.get_recent_activities(limit)

    return jsonify([a.to_dict() for a in activities])
