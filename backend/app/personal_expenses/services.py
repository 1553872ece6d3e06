"""
Personal expenses: spending that belongs to one user and is never split.
"""
import logging
from datetime import datetime
from typing import Any, List, Optional, Tuple

from app.extensions import db as mongo
from app.personal_expenses.models import PersonalExpense
from app.utils.errors import ValidationError
from app.utils.ids import safe_object_id
from app.utils.money import ZERO, round2, to_decimal, to_float

logger = logging.getLogger(__name__)


class PersonalExpenseService:
    """Add, list and edit a user's own expenses."""

    @staticmethod
    def clean_fields(description: Any, amount: Any) -> Tuple[str, Any]:
        description = str(description or "").strip()
        if not description:
            raise ValidationError("Description is required")
        amount = round2(to_decimal(amount))
        if amount <= ZERO:
            raise ValidationError("amount must be positive")
        return description, amount

    @classmethod
    def create(cls, user_id: str, description: Any, amount: Any) -> PersonalExpense:
        description, amount = cls.clean_fields(description, amount)
        now = datetime.utcnow()

        result = mongo.personal_expenses.insert_one({
            "description": description,
            "amount": to_float(amount),
            "paid_by": safe_object_id(user_id),
            "created_at": now,
            "updated_at": now,
        })

        logger.info("[PersonalExpenses] %s added %s", user_id, amount)
        return PersonalExpense(
            id=str(result.inserted_id),
            description=description,
            amount=amount,
            paid_by=str(user_id),
            created_at=now,
            updated_at=now,
        )

    @staticmethod
    def list_for_user(user_id: str) -> List[PersonalExpense]:
        oid = safe_object_id(user_id)
        if oid is None:
            return []
        docs = mongo.personal_expenses.find({"paid_by": oid}).sort("created_at", -1)
        return [PersonalExpense.from_document(d) for d in docs]

    @staticmethod
    def get(expense_id) -> Optional[PersonalExpense]:
        oid = safe_object_id(expense_id)
        if oid is None:
            return None
        doc = mongo.personal_expenses.find_one({"_id": oid})
        return PersonalExpense.from_document(doc) if doc else None

    @classmethod
    def update(cls, expense: PersonalExpense, description: Any, amount: Any) -> PersonalExpense:
        expense.description, expense.amount = cls.clean_fields(description, amount)
        expense.updated_at = datetime.utcnow()

        mongo.personal_expenses.update_one(
            {"_id": safe_object_id(expense.id)},
            {"$set": {
                "description": expense.description,
                "amount": to_float(expense.amount),
                "updated_at": expense.updated_at,
            }}
        )
        logger.info("[PersonalExpenses] Expense %s updated", expense.id)
        return expense
