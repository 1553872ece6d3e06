"""Permission helpers."""


def is_member(group, user_id):
    return str(user_id) in group.members


def can_edit_expense(expense, user_id):
    return str(user_id) in (expense.created_by, expense.paid_by)
