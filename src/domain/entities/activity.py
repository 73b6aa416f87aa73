"""Activity log domain entity and action constants."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4

# --- Activity Action Constants ---
# Format: {subject}.{action}


class Actions:
    """Activity action constants using dot-notation."""

    SELLER_REGISTERED = "seller.registered"
    SELLER_APPROVED = "seller.approved"
    SELLER_UNAPPROVED = "seller.unapproved"
    SELLER_UPDATED = "seller.updated"


@dataclass
class ActivityLog:
    """Domain entity for an admin-console activity entry."""

    action: str
    actor_id: UUID
    subject_id: UUID
    description: str
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=datetime.utcnow)
