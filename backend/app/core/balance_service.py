"""
Balance Service - Per-viewer expense views and pairwise balances.

Responsibilities:
- Classify each expense for a viewer as lent / owe / none
- Accumulate what the viewer owes and is owed per counterparty in a group
- Aggregate per-group summaries into an account-wide summary

Accounting is pairwise only: a split between two other members never shows
up in the viewer's table, and nothing is netted transitively.
"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional

from app.expenses.models import Expense
from app.utils.enums import BalanceStatus, ExpenseStatus, SummaryStatus
from app.utils.money import ZERO, round2, to_float


@dataclass
class ExpenseView:
    expense_id: Optional[str]
    status: ExpenseStatus
    amount_in_view: Decimal
    paid_by: str
    participants: List[str]

    def to_dict(self):
        return {
            "expense_id": self.expense_id,
            "status": self.status.value,
            "amount_in_view": to_float(self.amount_in_view),
            "paid_by": self.paid_by,
            "participants": list(self.participants),
        }


@dataclass
class CounterpartyBalance:
    counterparty_id: str
    owe: Decimal = ZERO
    lent: Decimal = ZERO
    net_balance: Decimal = ZERO
    status: BalanceStatus = BalanceStatus.SETTLED

    def to_dict(self):
        return {
            "counterparty_id": self.counterparty_id,
            "owe": to_float(self.owe),
            "lent": to_float(self.lent),
            "net_balance": to_float(self.net_balance),
            "status": self.status.value,
        }


@dataclass
class BalanceSummary:
    viewer_id: str
    balances: List[CounterpartyBalance] = field(default_factory=list)
    total_owed: Decimal = ZERO
    total_lent: Decimal = ZERO
    net_balance: Decimal = ZERO
    status: SummaryStatus = SummaryStatus.SETTLED
    group_id: Optional[str] = None

    def balance_with(self, counterparty_id) -> CounterpartyBalance:
        """Entry for a counterparty; an all-zero settled entry if there is none."""
        for entry in self.balances:
            if entry.counterparty_id == str(counterparty_id):
                return entry
        return CounterpartyBalance(counterparty_id=str(counterparty_id))

    def to_dict(self):
        return {
            "group_id": self.group_id,
            "viewer_id": self.viewer_id,
            "balances": [b.to_dict() for b in self.balances],
            "total_owed": to_float(self.total_owed),
            "total_lent": to_float(self.total_lent),
            "net_balance": to_float(self.net_balance),
            "status": self.status.value,
        }


@dataclass
class AccountSummary:
    viewer_id: str
    total_groups: int = 0
    total_owed: Decimal = ZERO
    total_lent: Decimal = ZERO
    net_balance: Decimal = ZERO
    status: SummaryStatus = SummaryStatus.SETTLED
    groups: List[BalanceSummary] = field(default_factory=list)

    def to_dict(self):
        return {
            "viewer_id": self.viewer_id,
            "total_groups": self.total_groups,
            "total_owed": to_float(self.total_owed),
            "total_lent": to_float(self.total_lent),
            "net_balance": to_float(self.net_balance),
            "status": self.status.value,
            "groups": [g.to_dict() for g in self.groups],
        }


def classify_summary(net_balance: Decimal) -> SummaryStatus:
    if net_balance > ZERO:
        return SummaryStatus.NET_BORROWER
    if net_balance < ZERO:
        return SummaryStatus.NET_LENDER
    return SummaryStatus.SETTLED


class BalanceService:
    """Pure balance computations over in-memory expense snapshots."""

    @staticmethod
    def view_expense(expense: Expense, viewer_id: Any) -> ExpenseView:
        viewer_id = str(viewer_id)
        user_owes = expense.split_for(viewer_id)
        user_paid = expense.amount if expense.paid_by == viewer_id else ZERO
        net = user_paid - user_owes

        if net > ZERO:
            status, amount_in_view = ExpenseStatus.LENT, net
        elif net < ZERO:
            status, amount_in_view = ExpenseStatus.OWE, -net
        else:
            status, amount_in_view = ExpenseStatus.NONE, ZERO

        return ExpenseView(
            expense_id=expense.id,
            status=status,
            amount_in_view=round2(amount_in_view),
            paid_by=expense.paid_by,
            participants=list(expense.participants),
        )

    @classmethod
    def view_expenses(cls, expenses: Iterable[Expense], viewer_id: Any) -> List[ExpenseView]:
        return [cls.view_expense(exp, viewer_id) for exp in expenses]

    @staticmethod
    def compute_balances(
        viewer_id: Any,
        group_members: Iterable[Any],
        expenses: Iterable[Expense],
        group_id: Optional[str] = None
    ) -> BalanceSummary:
        """
        Net what the viewer owes / is owed against every other group member.

        Args:
            viewer_id: User whose perspective is computed
            group_members: Member IDs of the group (viewer included or not)
            expenses: The group's expenses
            group_id: Echoed back on the summary

        Returns:
            BalanceSummary with one entry per member other than the viewer
        """
        viewer_id = str(viewer_id)
        balances: Dict[str, CounterpartyBalance] = {}
        for member in group_members:
            member = str(member)
            if member != viewer_id:
                balances.setdefault(member, CounterpartyBalance(counterparty_id=member))

        total_you_owe = ZERO
        total_you_lent = ZERO

        for expense in expenses:
            payer_id = expense.paid_by
            for split in expense.splits:
                if split.user_id == payer_id:
                    continue

                if split.user_id == viewer_id:
                    # Former members still get a row.
                    entry = balances.setdefault(
                        payer_id, CounterpartyBalance(counterparty_id=payer_id)
                    )
                    entry.owe += split.amount
                    total_you_owe += split.amount
                elif payer_id == viewer_id:
                    entry = balances.setdefault(
                        split.user_id, CounterpartyBalance(counterparty_id=split.user_id)
                    )
                    entry.lent += split.amount
                    total_you_lent += split.amount

        for entry in balances.values():
            net = entry.owe - entry.lent
            if net > ZERO:
                entry.status = BalanceStatus.OWE
            elif net < ZERO:
                entry.status = BalanceStatus.LENT
                net = abs(net)
            else:
                entry.status = BalanceStatus.SETTLED
            entry.owe = round2(entry.owe)
            entry.lent = round2(entry.lent)
            entry.net_balance = round2(net)

        total_owed = round2(total_you_owe)
        total_lent = round2(total_you_lent)
        net_balance = total_owed - total_lent

        return BalanceSummary(
            viewer_id=viewer_id,
            balances=list(balances.values()),
            total_owed=total_owed,
            total_lent=total_lent,
            net_balance=net_balance,
            status=classify_summary(net_balance),
            group_id=group_id,
        )

    @staticmethod
    def summarize_account(viewer_id: Any, group_summaries: Iterable[BalanceSummary]) -> AccountSummary:
        """
        Sum per-group summaries into one account-wide summary.

        Adds each group's already-rounded totals rather than re-walking the
        raw expenses.
        """
        groups = list(group_summaries)
        total_owed = sum((g.total_owed for g in groups), ZERO)
        total_lent = sum((g.total_lent for g in groups), ZERO)
        net_balance = total_owed - total_lent

        return AccountSummary(
            viewer_id=str(viewer_id),
            total_groups=len(groups),
            total_owed=total_owed,
            total_lent=total_lent,
            net_balance=net_balance,
            status=classify_summary(net_balance),
            groups=groups,
        )
