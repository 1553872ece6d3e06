# app/expenses/routes.py

from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity

from app.expenses.services import ExpenseService
from app.groups.services import GroupService
from app.utils.errors import ValidationError
from app.utils.permissions import can_edit_expense, is_member
from app.utils.validators import require_keys, require_list

expenses_bp = Blueprint("expenses", __name__)

EXPENSE_FIELDS = ("description", "amount", "paid_by", "participant_ids")


def expense_fields(data):
    """Pull the editable expense fields out of a request body."""
    require_keys(data, *EXPENSE_FIELDS)
    participant_ids = require_list(data, "participant_ids")
    custom_splits = data.get("custom_splits") or []
    if not isinstance(custom_splits, list):
        raise ValidationError("custom_splits must be a list")

    return {
        "description": str(data["description"]),
        "amount": data["amount"],
        "paid_by": data["paid_by"],
        "participant_ids": participant_ids,
        "custom_splits": custom_splits,
    }


@expenses_bp.route("/", methods=["POST"])
@jwt_required()
def add_expense():
    """
    Add an expense to a group.

    Request body:
    {
        "group_id": "...",
        "description": "Dinner",
        "amount": 100.00,
        "paid_by": "...",
        "participant_ids": ["...", "..."],
        "custom_splits": [{"user_id": "...", "amount": 60.00}, ...]  // optional
    }

    Without custom_splits the amount is split equally; the first participant
    absorbs any rounding remainder.
    """
    user_id = get_jwt_identity()
    data = request.get_json(silent=True) or {}

    if not data.get("group_id"):
        return jsonify({"error": "group_id is required"}), 400

    group = GroupService.get_group(data["group_id"])
    if not group:
        return jsonify({"error": "Group not found"}), 404
    if not is_member(group, user_id):
        return jsonify({"error": "You are not a member of this group"}), 403

    try:
        expense = ExpenseService.create_expense(group, created_by=user_id, **expense_fields(data))
    except ValidationError as e:
        current_app.logger.info("[Expenses] Rejected expense for group %s: %s", group.id, e)
        return jsonify({"error": str(e)}), 400

    return jsonify({"expense": expense.to_dict(), "message": "Expense added successfully"}), 201


@expenses_bp.route("/<expense_id>", methods=["GET"])
@jwt_required()
def get_expense(expense_id):
    expense = ExpenseService.get_expense(expense_id)
    if not expense:
        return jsonify({"error": "Expense not found"}), 404

    group = GroupService.get_group(expense.group_id)
    if not group or not is_member(group, get_jwt_identity()):
        return jsonify({"error": "You are not a member of this group"}), 403

    return jsonify({"expense": expense.to_dict()})


@expenses_bp.route("/<expense_id>", methods=["PUT"])
@jwt_required()
def update_expense(expense_id):
    """
    Edit an expense. Only its creator or payer may do this.

    Takes the same body as creation (group_id is ignored); the splits are
    regenerated from scratch.
    """
    user_id = get_jwt_identity()
    data = request.get_json(silent=True) or {}

    expense = ExpenseService.get_expense(expense_id)
    if not expense:
        return jsonify({"error": "Expense not found"}), 404

    group = GroupService.get_group(expense.group_id)
    if not group:
        return jsonify({"error": "Group not found"}), 404

    if not can_edit_expense(expense, user_id):
        return jsonify({"error": "You are not authorized to edit this expense"}), 403

    try:
        updated = ExpenseService.update_expense(expense, group, **expense_fields(data))
    except ValidationError as e:
        current_app.logger.info("[Expenses] Rejected edit of %s: %s", expense_id, e)
        return jsonify({"error": str(e)}), 400

    return jsonify({"expense": updated.to_dict(), "message": "Expense updated successfully"})


@expenses_bp.route("/<expense_id>", methods=["DELETE"])
@jwt_required()
def delete_expense(expense_id):
    user_id = get_jwt_identity()

    expense = ExpenseService.get_expense(expense_id)
    if not expense:
        return jsonify({"error": "Expense not found"}), 404

    if not can_edit_expense(expense, user_id):
        return jsonify({"error": "You are not authorized to delete this expense"}), 403

    ExpenseService.delete_expense(expense)
    return jsonify({"message": "Expense deleted", "expense_id": expense.id})
