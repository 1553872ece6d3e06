"""Activity feed routes."""
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity

from app.activities.services import ActivityFeedService

activities_bp = Blueprint("activities", __name__)


@activities_bp.route("/recent", methods=["GET"])
@jwt_required()
def get_recent_activities():
    """
    Most recent activity for the current user.

    Query params:
    - limit: Number of entries (default: RECENT_ACTIVITY_LIMIT, max: MAX_ACTIVITY_LIMIT)
    """
    try:
        limit = int(request.args.get("limit", current_app.config["RECENT_ACTIVITY_LIMIT"]))
    except ValueError:
        return jsonify({"error": "limit must be an integer"}), 400
    limit = max(1, min(limit, current_app.config["MAX_ACTIVITY_LIMIT"]))

    activities = ActivityFeedService.recent_activities(get_jwt_identity(), limit=limit)
    return jsonify({"activities": activities})
