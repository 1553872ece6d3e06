"""Personal expense model."""
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from app.utils.money import to_decimal, to_float


@dataclass
class PersonalExpense:
    id: Optional[str]
    description: str
    amount: Decimal
    paid_by: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_document(cls, doc):
        return cls(
            id=str(doc["_id"]),
            description=doc.get("description", ""),
            amount=to_decimal(doc["amount"]),
            paid_by=str(doc["paid_by"]),
            created_at=doc.get("created_at"),
            updated_at=doc.get("updated_at"),
        )

    def to_dict(self):
        return {
            "id": self.id,
            "description": self.description,
            "amount": to_float(self.amount),
            "paid_by": self.paid_by,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
