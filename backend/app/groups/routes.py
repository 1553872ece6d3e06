from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required, get_jwt_identity

from app.core import BalanceService
from app.expenses.services import ExpenseService
from app.groups.services import GroupService
from app.users.services import UserService
from app.utils.money import to_float
from app.utils.permissions import is_member

groups_bp = Blueprint("groups", __name__)


# ------------------ HELPERS ------------------

def load_member_group(group_id, user_id):
    """Return (group, error_response)."""
    group = GroupService.get_group(group_id)
    if not group:
        return None, (jsonify({"error": "Group not found"}), 404)
    if not is_member(group, user_id):
        return None, (jsonify({"error": "You are not a member of this group"}), 403)
    return group, None


def serialize_group(group, profiles):
    data = group.to_dict()
    data["members"] = [
        profiles.get(m, {"id": m, "username": "Unknown"}) for m in group.members
    ]
    return data


# ------------------ ROUTES ------------------

@groups_bp.route("/", methods=["POST"])
@jwt_required()
def create_group():
    user_id = get_jwt_identity()
    data = request.get_json(silent=True) or {}

    members = data.get("members", [])
    if not isinstance(members, list):
        return jsonify({"error": "members must be a list"}), 400
    members = [str(m) for m in members]
    missing = UserService.missing_users(members)
    if missing:
        return jsonify({"error": f"Users not found: {missing}"}), 404

    group = GroupService.create_group(
        name=data.get("name"),
        creator_id=user_id,
        description=data.get("description", ""),
        members=members,
    )
    profiles = UserService.get_profiles(group.members)
    return jsonify({"group": serialize_group(group, profiles)}), 201


@groups_bp.route("/", methods=["GET"])
@jwt_required()
def get_user_groups():
    groups = GroupService.get_user_groups(get_jwt_identity())
    return jsonify({"groups": [g.to_dict() for g in groups]})


@groups_bp.route("/<group_id>", methods=["GET"])
@jwt_required()
def get_group(group_id):
    group, error = load_member_group(group_id, get_jwt_identity())
    if error:
        return error

    profiles = UserService.get_profiles(group.members)
    return jsonify({"group": serialize_group(group, profiles)})


@groups_bp.route("/<group_id>/members", methods=["POST"])
@jwt_required()
def add_member(group_id):
    """
    Add an existing user to a group.

    Request body:
    {
        "user_id": "..."
    }
    """
    group, error = load_member_group(group_id, get_jwt_identity())
    if error:
        return error

    data = request.get_json(silent=True) or {}
    new_member = data.get("user_id")
    if not new_member:
        return jsonify({"error": "user_id is required"}), 400
    if not UserService.get_profile(new_member):
        return jsonify({"error": "User not found"}), 404

    added = GroupService.add_member(group, new_member)
    return jsonify({
        "status": "added" if added else "already_member",
        "user_id": str(new_member),
        "members": group.members,
    })


@groups_bp.route("/<group_id>/expenses", methods=["GET"])
@jwt_required()
def get_group_expenses(group_id):
    """The viewer's lent / owe / none view of every expense, newest first."""
    user_id = get_jwt_identity()
    group, error = load_member_group(group_id, user_id)
    if error:
        return error

    expenses = ExpenseService.get_group_expenses(group.id)
    views = BalanceService.view_expenses(expenses, user_id)

    user_ids = set(group.members)
    for exp in expenses:
        user_ids.add(exp.paid_by)
        user_ids.update(exp.participants)
    profiles = UserService.get_profiles(user_ids)

    response = []
    for expense, view in zip(expenses, views):
        item = view.to_dict()
        item.update({
            "id": expense.id,
            "description": expense.description,
            "amount": to_float(expense.amount),
            "paid_by": profiles.get(expense.paid_by, {"id": expense.paid_by}),
            "participants": [
                dict(profiles.get(p, {"id": p}), amount=to_float(expense.split_for(p)))
                for p in view.participants
            ],
            "created_at": expense.created_at.isoformat() if expense.created_at else None,
        })
        response.append(item)

    return jsonify({"expenses": response})


@groups_bp.route("/<group_id>/balances", methods=["GET"])
@jwt_required()
def get_group_balances(group_id):
    """
    Per-member balances for the viewer in one group.

    Each entry: owe / lent / net_balance and status owe | lent | settled.
    """
    user_id = get_jwt_identity()
    group, error = load_member_group(group_id, user_id)
    if error:
        return error

    expenses = ExpenseService.get_group_expenses(group.id)
    summary = BalanceService.compute_balances(user_id, group.members, expenses, group_id=group.id)

    profiles = UserService.get_profiles(b.counterparty_id for b in summary.balances)
    data = summary.to_dict()
    for entry in data["balances"]:
        profile = profiles.get(entry["counterparty_id"], {})
        entry["username"] = profile.get("username", "Unknown")
        entry["avatar_url"] = profile.get("avatar_url")

    return jsonify(data)
