"""
Invitation Service - Group membership by e-mail.

Responsibilities:
- Add an already registered user straight to the group
- Keep one pending invitation per (email, group) for everyone else
- Accept a pending invitation, joining the group and writing feed entries
"""
import logging
import re
from datetime import datetime, timedelta
from typing import Dict, List, Optional

from app.activities.services import ActivityFeedService
from app.core import ActivityService
from app.extensions import db as mongo
from app.groups.models import Group
from app.groups.services import GroupService
from app.users.services import UserService, normalize_email
from app.utils.enums import InvitationStatus
from app.utils.errors import ValidationError
from app.utils.ids import object_ids, safe_object_id

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r".+@.+\..+")


class InvitationService:
    """Service for group invitations."""

    # Pending invitations expire after this many days
    EXPIRY_DAYS = 7

    @classmethod
    def invite(cls, group: Group, email: str, invited_by: str) -> Dict:
        """
        Invite an e-mail address to a group.

        Returns:
            {"status": "added" | "already_member", "user_id": ...} for a
            registered user, {"status": "invited", "invitation_id": ...}
            otherwise
        """
        email = normalize_email(email)
        if not EMAIL_PATTERN.fullmatch(email):
            raise ValidationError("Please provide a valid email address")

        user = UserService.find_by_email(email)
        if user:
            added = GroupService.add_member(group, user["id"])
            return {"status": "added" if added else "already_member", "user_id": user["id"]}

        existing = mongo.invitations.find_one({
            "email": email,
            "group_id": safe_object_id(group.id),
            "status": InvitationStatus.PENDING.value,
        })
        if existing:
            return {"status": "invited", "invitation_id": str(existing["_id"])}

        now = datetime.utcnow()
        result = mongo.invitations.insert_one({
            "email": email,
            "group_id": safe_object_id(group.id),
            "invited_by": safe_object_id(invited_by),
            "status": InvitationStatus.PENDING.value,
            "created_at": now,
            "expires_at": now + timedelta(days=cls.EXPIRY_DAYS),
            "accepted_at": None,
        })

        logger.info("[Invitations] %s invited %s to group %s", invited_by, email, group.id)
        return {"status": "invited", "invitation_id": str(result.inserted_id)}

    @staticmethod
    def get_user_invitations(email: str) -> List[Dict]:
        """Pending and accepted invitations for an address, newest first."""
        invites = list(
            mongo.invitations.find({
                "email": normalize_email(email),
                "status": {"$in": [InvitationStatus.PENDING.value, InvitationStatus.ACCEPTED.value]},
            }).sort("created_at", -1)
        )
        if not invites:
            return []

        group_ids = object_ids({str(i["group_id"]) for i in invites})
        groups = {
            str(g["_id"]): g
            for g in mongo.groups.find({"_id": {"$in": group_ids}}, {"name": 1, "description": 1})
        }
        inviters = UserService.get_profiles(str(i["invited_by"]) for i in invites)
        now = datetime.utcnow()

        result = []
        for invite in invites:
            group = groups.get(str(invite["group_id"]), {})
            inviter = inviters.get(str(invite["invited_by"]), {})
            result.append({
                "id": str(invite["_id"]),
                "email": invite["email"],
                "status": invite["status"],
                "expired": invite["status"] == InvitationStatus.PENDING.value and invite["expires_at"] <= now,
                "group": {
                    "id": str(invite["group_id"]),
                    "name": group.get("name", ""),
                    "description": group.get("description", ""),
                },
                "invited_by": {
                    "id": str(invite["invited_by"]),
                    "username": inviter.get("username", "Unknown"),
                    "email": inviter.get("email", ""),
                },
                "created_at": invite["created_at"].isoformat(),
                "expires_at": invite["expires_at"].isoformat(),
                "accepted_at": invite["accepted_at"].isoformat() if invite.get("accepted_at") else None,
            })
        return result

    @staticmethod
    def accept(group_id: str, user: Dict) -> Optional[Group]:
        """
        Accept the pending, unexpired invitation for ``user`` to ``group_id``.

        Returns:
            The updated group, or None if there is no such invitation
        """
        group = GroupService.get_group(group_id)
        if not group:
            return None

        invite = mongo.invitations.find_one({
            "email": normalize_email(user["email"]),
            "group_id": safe_object_id(group.id),
            "status": InvitationStatus.PENDING.value,
            "expires_at": {"$gt": datetime.utcnow()},
        })
        if not invite:
            return None

        GroupService.add_member(group, user["id"])
        mongo.invitations.update_one(
            {"_id": invite["_id"]},
            {"$set": {"status": InvitationStatus.ACCEPTED.value, "accepted_at": datetime.utcnow()}}
        )
        ActivityFeedService.record(
            ActivityService.build_invitation_activities(group.id, user["id"], str(invite["invited_by"]))
        )

        logger.info("[Invitations] %s joined group %s", user["id"], group.id)
        return group
