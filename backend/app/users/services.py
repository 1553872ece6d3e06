"""User lookups for display enrichment."""
from typing import Dict, Iterable, Optional

from app.extensions import db as mongo
from app.utils.ids import object_ids, safe_object_id

PROFILE_FIELDS = {"username": 1, "email": 1, "avatar_url": 1}


def normalize_email(email) -> str:
    return (email or "").strip().lower()


def to_profile(user: Dict) -> Dict:
    return {
        "id": str(user["_id"]),
        "username": user.get("username", "Unknown"),
        "email": user.get("email", ""),
        "avatar_url": user.get("avatar_url"),
    }


class UserService:
    """Read-only access to the users collection."""

    @staticmethod
    def get_profile(user_id) -> Optional[Dict]:
        oid = safe_object_id(user_id)
        if oid is None:
            return None
        user = mongo.users.find_one({"_id": oid}, PROFILE_FIELDS)
        return to_profile(user) if user else None

    @staticmethod
    def find_by_email(email: str) -> Optional[Dict]:
        user = mongo.users.find_one({"email": normalize_email(email)}, PROFILE_FIELDS)
        return to_profile(user) if user else None

    @staticmethod
    def get_profiles(user_ids: Iterable[str]) -> Dict[str, Dict]:
        """Map of user id -> profile for every id that exists."""
        ids = object_ids(set(user_ids))
        if not ids:
            return {}
        users = mongo.users.find({"_id": {"$in": ids}}, PROFILE_FIELDS)
        return {str(u["_id"]): to_profile(u) for u in users}

    @classmethod
    def missing_users(cls, user_ids: Iterable[str]):
        user_ids = [str(u) for u in user_ids]
        found = cls.get_profiles(user_ids)
        return [u for u in user_ids if u not in found]
