"""
Tenant Models
=============

Websites (tenants) and the customers that own them.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


@dataclass
class Customer:
    """Customer owning one or more websites."""
    id: int
    name: str
    email: str = ""
    created_at: datetime = field(default_factory=datetime.utcnow)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "created_at": self.created_at.isoformat()
        }


@dataclass
class Website:
    """
    Tenant identity.

    ``identifier`` is the human readable slug; ``id`` never changes. After a
    rename the identifier the website was loaded with is kept in
    ``previous_identifier`` until ``sync_original`` is called, so the old
    tenant directory can still be located.
    """
    id: int
    identifier: str
    previous_identifier: Optional[str] = None
    customer_id: Optional[int] = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def rename(self, identifier: str):
        """Change the identifier, remembering the original one."""
        if identifier == self.identifier:
            return

        if self.previous_identifier is None:
            self.previous_identifier = self.identifier
        elif identifier == self.previous_identifier:
            # renamed back to the original
            self.previous_identifier = None

        logger.debug(f"Website {self.id} renamed from {self.identifier} to {identifier}")
        self.identifier = identifier
        self.updated_at = datetime.utcnow()

    def is_identifier_dirty(self) -> bool:
        """Check if the identifier changed since the website was loaded."""
        return self.previous_identifier is not None and self.previous_identifier != self.identifier

    def sync_original(self):
        """Forget the previous identifier once the rename has been handled."""
        self.previous_identifier = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "identifier": self.identifier,
            "previous_identifier": self.previous_identifier,
            "customer_id": self.customer_id,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat()
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Website':
        """Create website from dictionary."""
        website = cls(
            id=int(data["id"]),
            identifier=data["identifier"],
            previous_identifier=data.get("previous_identifier"),
            customer_id=data.get("customer_id")
        )
        if data.get("created_at"):
            website.created_at = datetime.fromisoformat(data["created_at"])
        if data.get("updated_at"):
            website.updated_at = datetime.fromisoformat(data["updated_at"])
        return website
