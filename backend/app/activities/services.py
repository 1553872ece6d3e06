"""Activity feed persistence and reads."""
from typing import Dict, List

from app.core import ActivityService
from app.extensions import db as mongo
from app.users.services import UserService
from app.utils.ids import object_ids, safe_object_id


def activity_document(activity: Dict) -> Dict:
    """Storage form of a built activity: id strings become ObjectIds."""
    expense_id = activity.get("expense_id")
    return dict(
        activity,
        user_id=safe_object_id(activity["user_id"]),
        group_id=safe_object_id(activity["group_id"]),
        expense_id=safe_object_id(expense_id) if expense_id else None,
        involved_users=[
            dict(u, user_id=safe_object_id(u["user_id"])) for u in activity.get("involved_users", [])
        ],
    )


class ActivityFeedService:
    """Recent activity for one user, joined with names at read time."""

    @staticmethod
    def record(activities: List[Dict]) -> None:
        if activities:
            mongo.activities.insert_many([activity_document(a) for a in activities])

    @staticmethod
    def recent_activities(user_id: str, limit: int = 20) -> List[Dict]:
        oid = safe_object_id(user_id)
        if oid is None:
            return []

        records = list(
            mongo.activities.find({"user_id": oid}).sort("created_at", -1).limit(limit)
        )
        if not records:
            return []

        group_ids = object_ids({str(r["group_id"]) for r in records if r.get("group_id")})
        groups = {
            str(g["_id"]): g.get("name", "")
            for g in mongo.groups.find({"_id": {"$in": group_ids}}, {"name": 1})
        }
        expense_ids = object_ids({str(r["expense_id"]) for r in records if r.get("expense_id")})
        descriptions = {
            str(e["_id"]): e.get("description", "")
            for e in mongo.expenses.find({"_id": {"$in": expense_ids}}, {"description": 1})
        }

        involved = set()
        for r in records:
            involved.update(str(u["user_id"]) for u in r.get("involved_users", []))
        usernames = {uid: p["username"] for uid, p in UserService.get_profiles(involved).items()}

        feed = []
        for r in records:
            group_id = str(r["group_id"]) if r.get("group_id") else None
            expense_id = str(r["expense_id"]) if r.get("expense_id") else None
            activity = {
                "id": str(r["_id"]),
                "type": r["type"],
                "group_id": group_id,
                "group_name": groups.get(group_id, ""),
                "expense_id": expense_id,
                "amount": r.get("amount"),
                "amount_type": r["amount_type"],
                "involved_users": [
                    {
                        "user_id": str(u["user_id"]),
                        "username": usernames.get(str(u["user_id"]), "Unknown"),
                        "amount": u.get("amount"),
                        "amount_type": u["amount_type"],
                    }
                    for u in r.get("involved_users", [])
                ],
                "created_at": r["created_at"].isoformat() if r.get("created_at") else None,
            }
            activity["description"] = ActivityService.describe(
                activity, descriptions.get(expense_id, ""), usernames
            )
            feed.append(activity)

        return feed
