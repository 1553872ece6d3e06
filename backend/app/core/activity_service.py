"""
Activity Service - Feed entries derived from expenses and group joins.

Records carry ids only. Usernames, group names and expense descriptions are
joined when the feed is read, never copied onto the record.
"""
from datetime import datetime
from typing import Dict, List, Optional

from app.expenses.models import Expense
from app.utils.enums import ActivityType, AmountType
from app.utils.money import to_float


class ActivityService:
    """Builds activity records and renders them for the feed."""

    @classmethod
    def build_expense_activities(cls, expense: Expense, creator_id: str) -> List[Dict]:
        """
        One ``expense_created`` record for the creator, then for every split
        line not owed by the payer an ``owed`` record for the participant and
        a matching ``lent`` record for the payer.
        """
        now = datetime.utcnow()
        activities = [
            cls._record(
                user_id=str(creator_id),
                group_id=expense.group_id,
                expense_id=expense.id,
                activity_type=ActivityType.EXPENSE_CREATED,
                amount=to_float(expense.amount),
                amount_type=AmountType.PAID,
                involved=[
                    {"user_id": s.user_id, "amount": to_float(s.amount), "amount_type": AmountType.OWED.value}
                    for s in expense.splits
                ],
                created_at=now,
            )
        ]

        for split in expense.splits:
            if split.user_id == expense.paid_by:
                continue
            amount = to_float(split.amount)
            activities.append(cls._record(
                user_id=split.user_id,
                group_id=expense.group_id,
                expense_id=expense.id,
                activity_type=ActivityType.EXPENSE_INVOLVED,
                amount=amount,
                amount_type=AmountType.OWED,
                involved=[{"user_id": expense.paid_by, "amount": amount, "amount_type": AmountType.LENT.value}],
                created_at=now,
            ))
            activities.append(cls._record(
                user_id=expense.paid_by,
                group_id=expense.group_id,
                expense_id=expense.id,
                activity_type=ActivityType.EXPENSE_INVOLVED,
                amount=amount,
                amount_type=AmountType.LENT,
                involved=[{"user_id": split.user_id, "amount": amount, "amount_type": AmountType.OWED.value}],
                created_at=now,
            ))

        return activities

    @classmethod
    def build_invitation_activities(cls, group_id: str, user_id: str, inviter_id: str) -> List[Dict]:
        """``group_joined`` for the new member, ``invitation_accepted`` for the inviter."""
        now = datetime.utcnow()
        return [
            cls._record(
                user_id=str(user_id),
                group_id=str(group_id),
                expense_id=None,
                activity_type=ActivityType.GROUP_JOINED,
                amount=None,
                amount_type=AmountType.NONE,
                involved=[{"user_id": str(inviter_id), "amount": None, "amount_type": AmountType.NONE.value}],
                created_at=now,
            ),
            cls._record(
                user_id=str(inviter_id),
                group_id=str(group_id),
                expense_id=None,
                activity_type=ActivityType.INVITATION_ACCEPTED,
                amount=None,
                amount_type=AmountType.NONE,
                involved=[{"user_id": str(user_id), "amount": None, "amount_type": AmountType.NONE.value}],
                created_at=now,
            ),
        ]

    @staticmethod
    def describe(activity: Dict, description: str, usernames: Dict[str, str]) -> str:
        """Human-readable line for a feed entry, from its owner's side."""
        involved = activity.get("involved_users") or []
        other = involved[0]["user_id"] if involved else None
        name = usernames.get(other, "Someone")
        group_name = activity.get("group_name", "")

        activity_type = activity["type"]
        if activity_type == ActivityType.GROUP_JOINED.value:
            return f'You joined group "{group_name}"'
        if activity_type == ActivityType.INVITATION_ACCEPTED.value:
            return f'{name} accepted your invitation to join group "{group_name}"'
        if activity_type == ActivityType.EXPENSE_CREATED.value:
            return f'You added expense "{description}"'
        if activity["amount_type"] == AmountType.OWED.value:
            return f'You owe for "{description}"'
        return f'{name} owes you for "{description}"'

    @staticmethod
    def _record(
        user_id: str,
        group_id: str,
        expense_id: Optional[str],
        activity_type: ActivityType,
        amount: Optional[float],
        amount_type: AmountType,
        involved: List[Dict],
        created_at: datetime
    ) -> Dict:
        return {
            "user_id": user_id,
            "group_id": group_id,
            "expense_id": expense_id,
            "type": activity_type.value,
            "amount": amount,
            "amount_type": amount_type.value,
            "involved_users": involved,
            "created_at": created_at,
        }
