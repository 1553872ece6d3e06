"""
Expense persistence.

Splits are produced by SplitService and stored with the expense; an edit
regenerates them completely.
"""
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from pymongo.errors import PyMongoError

from app.activities.services import ActivityFeedService
from app.core import ActivityService, SplitService
from app.expenses.models import Expense
from app.extensions import db as mongo
from app.groups.models import Group
from app.utils.ids import safe_object_id
from app.utils.money import to_float

logger = logging.getLogger(__name__)


def _to_document(expense: Expense) -> Dict[str, Any]:
    return {
        "group_id": safe_object_id(expense.group_id),
        "description": expense.description,
        "amount": to_float(expense.amount),
        "paid_by": safe_object_id(expense.paid_by),
        "created_by": safe_object_id(expense.created_by),
        "participants": [safe_object_id(p) for p in expense.participants],
        "splits": [
            {"user_id": safe_object_id(s.user_id), "amount": to_float(s.amount)}
            for s in expense.splits
        ],
        "created_at": expense.created_at,
        "updated_at": expense.updated_at,
    }


class ExpenseService:
    """Create, edit, load and delete group expenses."""

    @classmethod
    def build_expense(
        cls,
        group: Group,
        description: str,
        amount: Any,
        paid_by: Any,
        participant_ids: List[Any],
        created_by: str,
        custom_splits: Optional[List[Dict]] = None
    ) -> Expense:
        """
        Validate the request against the group and generate its splits.

        Raises:
            ValidationError: missing fields, membership or split problems
        """
        SplitService.validate_membership(group.members, paid_by, participant_ids)
        splits = SplitService.generate_splits(amount, participant_ids, custom_splits)

        return Expense(
            id=None,
            group_id=group.id,
            description=(description or "").strip(),
            amount=SplitService.normalize_amount(amount),
            paid_by=str(paid_by),
            created_by=str(created_by),
            participants=SplitService.normalize_participants(participant_ids),
            splits=splits,
        )

    @classmethod
    def create_expense(cls, group: Group, created_by: str, **fields) -> Expense:
        expense = cls.build_expense(group, created_by=created_by, **fields)
        expense.created_at = expense.updated_at = datetime.utcnow()

        result = mongo.expenses.insert_one(_to_document(expense))
        expense.id = str(result.inserted_id)

        try:
            cls._record_activities(expense)
        except PyMongoError:
            logger.exception("[Expenses] Activity write failed, removing expense %s", expense.id)
            mongo.expenses.delete_one({"_id": result.inserted_id})
            raise

        logger.info(
            "[Expenses] %s added expense %s (%s) to group %s",
            created_by, expense.id, expense.amount, group.id
        )
        return expense

    @classmethod
    def update_expense(cls, expense: Expense, group: Group, **fields) -> Expense:
        """Replace description, amount, payer, participants, splits and feed entries."""
        updated = cls.build_expense(group, created_by=expense.created_by, **fields)
        updated.id = expense.id
        updated.created_at = expense.created_at
        updated.updated_at = datetime.utcnow()

        oid = safe_object_id(expense.id)
        doc = _to_document(updated)
        doc.pop("created_at")
        mongo.expenses.update_one({"_id": oid}, {"$set": doc})

        mongo.activities.delete_many({"expense_id": oid})
        try:
            cls._record_activities(updated)
        except PyMongoError:
            logger.exception("[Expenses] Activity rewrite failed for expense %s", expense.id)
            raise

        logger.info("[Expenses] Expense %s updated", expense.id)
        return updated

    @staticmethod
    def _record_activities(expense: Expense) -> None:
        ActivityFeedService.record(
            ActivityService.build_expense_activities(expense, expense.created_by)
        )

    @staticmethod
    def get_expense(expense_id) -> Optional[Expense]:
        oid = safe_object_id(expense_id)
        if oid is None:
            return None
        doc = mongo.expenses.find_one({"_id": oid})
        return Expense.from_document(doc) if doc else None

    @staticmethod
    def get_group_expenses(group_id, newest_first: bool = True) -> List[Expense]:
        docs = mongo.expenses.find({"group_id": safe_object_id(group_id)}).sort(
            "created_at", -1 if newest_first else 1
        )
        return [Expense.from_document(d) for d in docs]

    @staticmethod
    def delete_expense(expense: Expense) -> None:
        oid = safe_object_id(expense.id)
        mongo.expenses.delete_one({"_id": oid})
        mongo.activities.delete_many({"expense_id": oid})
        logger.info("[Expenses] Expense %s deleted", expense.id)
