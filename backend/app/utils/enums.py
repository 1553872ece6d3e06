from enum import Enum


class ExpenseStatus(str, Enum):
    LENT = "lent"
    OWE = "owe"
    NONE = "none"


class BalanceStatus(str, Enum):
    OWE = "owe"
    LENT = "lent"
    SETTLED = "settled"


class SummaryStatus(str, Enum):
    NET_BORROWER = "net_borrower"
    NET_LENDER = "net_lender"
    SETTLED = "settled"


class ActivityType(str, Enum):
    EXPENSE_CREATED = "expense_created"
    EXPENSE_INVOLVED = "expense_involved"
    GROUP_JOINED = "group_joined"
    INVITATION_ACCEPTED = "invitation_accepted"


class AmountType(str, Enum):
    PAID = "paid"
    OWED = "owed"
    LENT = "lent"
    NONE = "none"


class InvitationStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"
