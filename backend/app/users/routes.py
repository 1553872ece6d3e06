from flask import Blueprint, jsonify
from flask_jwt_extended import jwt_required, get_jwt_identity

from app.users.services import UserService

users_bp = Blueprint("users", __name__)


@users_bp.route("/me", methods=["GET"])
@jwt_required()
def me():
    profile = UserService.get_profile(get_jwt_identity())
    if not profile:
        return jsonify({"error": "User not found"}), 404
    return jsonify(profile)
