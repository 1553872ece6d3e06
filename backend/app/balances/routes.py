"""Account-wide balance routes."""
from flask import Blueprint, jsonify
from flask_jwt_extended import jwt_required, get_jwt_identity

from app.core import BalanceService
from app.expenses.services import ExpenseService
from app.groups.services import GroupService

balances_bp = Blueprint("balances", __name__)


@balances_bp.route("/summary", methods=["GET"])
@jwt_required()
def get_summary():
    """
    Balances across every group the user belongs to.

    Returns:
    {
        "viewer_id": "...",
        "total_groups": 2,
        "total_owed": 25.00,
        "total_lent": 40.00,
        "net_balance": -15.00,
        "status": "net_lender",
        "groups": [{"group_id": "...", "group_name": "Trip", "balances": [...], ...}]
    }

    Positive net_balance = owes money overall
    Negative net_balance = is owed money overall
    """
    user_id = get_jwt_identity()
    groups = GroupService.get_user_groups(user_id)

    summaries = []
    for group in groups:
        expenses = ExpenseService.get_group_expenses(group.id)
        summaries.append(
            BalanceService.compute_balances(user_id, group.members, expenses, group_id=group.id)
        )

    account = BalanceService.summarize_account(user_id, summaries)
    data = account.to_dict()

    names = {g.id: g.name for g in groups}
    for entry in data["groups"]:
        entry["group_name"] = names.get(entry["group_id"])

    return jsonify(data)
