"""Core expense logic: split generation and balance aggregation."""

from .split_service import SplitService
from .balance_service import (
    AccountSummary,
    BalanceService,
    BalanceSummary,
    CounterpartyBalance,
    ExpenseView,
)
from .activity_service import ActivityService

__all__ = [
    "SplitService",
    "BalanceService",
    "ActivityService",
    "ExpenseView",
    "CounterpartyBalance",
    "BalanceSummary",
    "AccountSummary",
]
