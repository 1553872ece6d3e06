"""
Split Service - Expense split generation and validation.

Responsibilities:
- Calculate equal splits with the rounding remainder on the first participant
- Validate and normalise custom (exact amount) splits
- Validate payer and participants against group membership
"""
import logging
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional, Sequence

from app.expenses.models import Split
from app.utils.errors import ValidationError
from app.utils.money import ZERO, round2, to_decimal

logger = logging.getLogger(__name__)


class SplitService:
    """Service for expense split calculation and validation."""

    @classmethod
    def generate_splits(
        cls,
        amount: Any,
        participant_ids: Sequence[str],
        custom_splits: Optional[Sequence[Dict[str, Any]]] = None
    ) -> List[Split]:
        """
        Produce one (participant, owed amount) pair per split line.

        Args:
            amount: Expense total, positive
            participant_ids: Ordered, unique participant user IDs
            custom_splits: Optional list of {user_id, amount} dicts

        Returns:
            List of Split whose amounts sum exactly to round2(amount)

        Raises:
            ValidationError: on any violated precondition
        """
        total = cls.normalize_amount(amount)
        participants = cls.normalize_participants(participant_ids)

        if custom_splits:
            return cls.calculate_custom_split(total, participants, custom_splits)
        return cls.calculate_equal_split(total, participants)

    @staticmethod
    def normalize_amount(amount: Any) -> Decimal:
        total = round2(to_decimal(amount))
        if total <= ZERO:
            raise ValidationError("amount must be positive")
        return total

    @staticmethod
    def normalize_participants(participant_ids: Optional[Iterable[Any]]) -> List[str]:
        participants = [str(p) for p in (participant_ids or [])]
        if not participants:
            raise ValidationError("participants are required")
        if len(set(participants)) != len(participants):
            raise ValidationError("duplicate participant")
        return participants

    @classmethod
    def calculate_equal_split(
        cls,
        total_amount: Decimal,
        participant_ids: List[str]
    ) -> List[Split]:
        """
        Calculate equal split among participants.

        Every participant gets round2(total / n); the difference between that
        and the total is added to the FIRST participant, so the result is
        order dependent. Splits are regenerated from scratch on every edit.
        """
        count = len(participant_ids)
        share = round2(total_amount / count)
        adjustment = round2(total_amount - share * count)

        splits = [Split(user_id=uid, amount=share) for uid in participant_ids]
        splits[0].amount = share + adjustment

        if adjustment != ZERO:
            logger.debug(
                "[SplitService] %s absorbs rounding adjustment %s",
                participant_ids[0], adjustment
            )
        return splits

    @classmethod
    def calculate_custom_split(
        cls,
        total_amount: Decimal,
        participant_ids: List[str],
        custom_splits: Sequence[Dict[str, Any]]
    ) -> List[Split]:
        """
        Validate and use exact amounts per participant.

        Output keeps the caller's order; each amount is rounded to cents.
        """
        allowed = set(participant_ids)
        seen = set()
        splits = []

        for item in custom_splits:
            if not isinstance(item, dict):
                raise ValidationError("custom split entries must be objects")
            user_id = item.get("user_id", item.get("userId"))
            if user_id is None:
                raise ValidationError("custom split entry is missing user_id")
            user_id = str(user_id)

            if user_id not in allowed:
                raise ValidationError("user not in participants")
            if user_id in seen:
                raise ValidationError("duplicate custom split for user")
            seen.add(user_id)

            amount = round2(to_decimal(item.get("amount"), field="split amount"))
            if amount < ZERO:
                raise ValidationError("split amount cannot be negative")
            splits.append(Split(user_id=user_id, amount=amount))

        if sum((s.amount for s in splits), ZERO) != total_amount:
            raise ValidationError("split total mismatch")

        return splits

    @staticmethod
    def validate_membership(
        group_members: Iterable[str],
        paid_by: Any,
        participant_ids: Iterable[Any]
    ) -> None:
        """Payer and every participant must belong to the group."""
        members = {str(m) for m in group_members}
        if paid_by is None or str(paid_by) not in members:
            raise ValidationError("payer is not a member of this group")
        for uid in participant_ids or []:
            if str(uid) not in members:
                raise ValidationError(f"participant {uid} is not in the group")
