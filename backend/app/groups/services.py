"""Group persistence."""
import logging
from datetime import datetime
from typing import List, Optional

from app.extensions import db as mongo
from app.groups.models import Group
from app.utils.errors import ValidationError
from app.utils.ids import object_ids, safe_object_id

logger = logging.getLogger(__name__)


class GroupService:
    """Create, load and extend groups."""

    @staticmethod
    def create_group(name: str, creator_id: str, description: str = "", members=None) -> Group:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Group name is required")

        group = Group(
            id=None,
            name=name,
            description=(description or "").strip(),
            created_by=str(creator_id),
            members=list(members or []),
            created_at=datetime.utcnow(),
        )
        result = mongo.groups.insert_one({
            "name": group.name,
            "description": group.description,
            "created_by": safe_object_id(group.created_by),
            "members": object_ids(group.members),
            "created_at": group.created_at,
        })
        group.id = str(result.inserted_id)

        logger.info("[Groups] %s created group %s with %d members", creator_id, group.id, len(group.members))
        return group

    @staticmethod
    def get_group(group_id) -> Optional[Group]:
        oid = safe_object_id(group_id)
        if oid is None:
            return None
        doc = mongo.groups.find_one({"_id": oid})
        return Group.from_document(doc) if doc else None

    @staticmethod
    def get_user_groups(user_id) -> List[Group]:
        oid = safe_object_id(user_id)
        if oid is None:
            return []
        docs = mongo.groups.find({"members": oid}).sort("created_at", -1)
        return [Group.from_document(d) for d in docs]

    @staticmethod
    def add_member(group: Group, user_id) -> bool:
        """Add a user to the group. Returns False if already a member."""
        user_id = str(user_id)
        if user_id in group.members:
            return False

        mongo.groups.update_one(
            {"_id": safe_object_id(group.id)},
            {"$addToSet": {"members": safe_object_id(user_id)}}
        )
        group.members.append(user_id)
        logger.info("[Groups] Added %s to group %s", user_id, group.id)
        return True
