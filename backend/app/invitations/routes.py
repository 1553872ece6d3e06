"""Group invitation routes."""
from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required, get_jwt_identity

from app.groups.routes import serialize_group
from app.groups.services import GroupService
from app.invitations.services import InvitationService
from app.users.services import UserService
from app.utils.permissions import is_member

invitations_bp = Blueprint("invitations", __name__)


@invitations_bp.route("/", methods=["POST"])
@jwt_required()
def invite_member():
    """
    Invite someone to a group by e-mail.

    Request body:
    {
        "group_id": "...",
        "email": "friend@example.com"
    }

    Registered users are added straight away; anyone else gets a pending
    invitation they can accept after signing up.
    """
    user_id = get_jwt_identity()
    data = request.get_json(silent=True) or {}

    if not data.get("group_id") or not data.get("email"):
        return jsonify({"error": "group_id and email are required"}), 400

    group = GroupService.get_group(data["group_id"])
    if not group:
        return jsonify({"error": "Group not found"}), 404
    if not is_member(group, user_id):
        return jsonify({"error": "You are not a member of this group"}), 403

    result = InvitationService.invite(group, data["email"], invited_by=user_id)
    return jsonify(result), 201 if result["status"] == "invited" else 200


@invitations_bp.route("/", methods=["GET"])
@jwt_required()
def get_invitations():
    user = UserService.get_profile(get_jwt_identity())
    if not user:
        return jsonify({"error": "User not found"}), 404

    return jsonify({"invitations": InvitationService.get_user_invitations(user["email"])})


@invitations_bp.route("/accept/<group_id>", methods=["POST"])
@jwt_required()
def accept_invitation(group_id):
    user = UserService.get_profile(get_jwt_identity())
    if not user:
        return jsonify({"error": "User not found"}), 404

    group = InvitationService.accept(group_id, user)
    if not group:
        return jsonify({"error": "No pending invite found for this group"}), 404

    profiles = UserService.get_profiles(group.members)
    return jsonify({"group": serialize_group(group, profiles), "message": "Group invitation accepted successfully"})
