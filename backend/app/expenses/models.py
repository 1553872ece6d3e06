"""Expense models."""
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from app.utils.money import ZERO, to_decimal, to_float


@dataclass
class Split:
    user_id: str
    amount: Decimal

    @classmethod
    def from_document(cls, doc):
        return cls(user_id=str(doc["user_id"]), amount=to_decimal(doc["amount"]))

    def to_dict(self):
        return {"user_id": self.user_id, "amount": to_float(self.amount)}


@dataclass
class Expense:
    id: Optional[str]
    group_id: str
    description: str
    amount: Decimal
    paid_by: str
    created_by: str
    participants: List[str] = field(default_factory=list)
    splits: List[Split] = field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def split_for(self, user_id) -> Decimal:
        """Amount owed by ``user_id`` on this expense; 0 if not a participant."""
        for split in self.splits:
            if split.user_id == str(user_id):
                return split.amount
        return ZERO

    @classmethod
    def from_document(cls, doc):
        """Build from a MongoDB document (ObjectIds become strings)."""
        return cls(
            id=str(doc["_id"]) if doc.get("_id") is not None else None,
            group_id=str(doc["group_id"]),
            description=doc.get("description", ""),
            amount=to_decimal(doc["amount"]),
            paid_by=str(doc["paid_by"]),
            created_by=str(doc["created_by"]),
            participants=[str(p) for p in doc.get("participants", [])],
            splits=[Split.from_document(s) for s in doc.get("splits", [])],
            created_at=doc.get("created_at"),
            updated_at=doc.get("updated_at"),
        )

    def to_dict(self):
        return {
            "id": self.id,
            "group_id": self.group_id,
            "description": self.description,
            "amount": to_float(self.amount),
            "paid_by": self.paid_by,
            "created_by": self.created_by,
            "participants": list(self.participants),
            "splits": [s.to_dict() for s in self.splits],
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
