# app/personal_expenses/routes.py

from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required, get_jwt_identity

from app.personal_expenses.services import PersonalExpenseService

personal_expenses_bp = Blueprint("personal_expenses", __name__)


@personal_expenses_bp.route("/", methods=["POST"])
@jwt_required()
def add_personal_expense():
    """
    Record an expense that is not shared with anyone.

    Request body:
    {
        "description": "Groceries",
        "amount": 42.50
    }
    """
    user_id = get_jwt_identity()
    data = request.get_json(silent=True) or {}

    expense = PersonalExpenseService.create(user_id, data.get("description"), data.get("amount"))
    return jsonify({"expense": expense.to_dict(), "message": "Personal expense added successfully"}), 201


@personal_expenses_bp.route("/", methods=["GET"])
@jwt_required()
def get_personal_expenses():
    expenses = PersonalExpenseService.list_for_user(get_jwt_identity())
    return jsonify({"expenses": [e.to_dict() for e in expenses]})


@personal_expenses_bp.route("/<expense_id>", methods=["PUT"])
@jwt_required()
def edit_personal_expense(expense_id):
    user_id = get_jwt_identity()
    data = request.get_json(silent=True) or {}

    expense = PersonalExpenseService.get(expense_id)
    if not expense:
        return jsonify({"error": "Personal expense not found"}), 404
    if expense.paid_by != str(user_id):
        return jsonify({"error": "You are not authorized to edit this expense"}), 403

    expense = PersonalExpenseService.update(expense, data.get("description"), data.get("amount"))
    return jsonify({"expense": expense.to_dict(), "message": "Personal expense updated successfully"})
