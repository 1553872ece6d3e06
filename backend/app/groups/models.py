"""Group models."""
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional


@dataclass
class Group:
    id: Optional[str]
    name: str
    created_by: str
    members: List[str] = field(default_factory=list)
    description: str = ""
    created_at: Optional[datetime] = None

    def __post_init__(self):
        # Creator is always a member; members keep insertion order, no repeats.
        ordered = [str(self.created_by)] + [str(m) for m in self.members]
        self.members = list(dict.fromkeys(ordered))

    @classmethod
    def from_document(cls, doc):
        return cls(
            id=str(doc["_id"]),
            name=doc["name"],
            created_by=str(doc["created_by"]),
            members=[str(m) for m in doc.get("members", [])],
            description=doc.get("description", ""),
            created_at=doc.get("created_at"),
        )

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "created_by": self.created_by,
            "members": list(self.members),
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
