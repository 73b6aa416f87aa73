"""Purchase domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4

from domain.entities.profile import GeoPoint

PURCHASE_STATUS_COMPLETED = "completed"


@dataclass
class Purchase:
    """Append-only record of a completed cylinder purchase.

    Buyer and seller display fields are snapshots taken inside the purchase
    transaction; later profile edits do not change them.
    """

    buyer_id: UUID
    seller_id: UUID
    quantity: int
    price_per_cylinder: int
    id: UUID = field(default_factory=uuid4)
    status: str = PURCHASE_STATUS_COMPLETED
    buyer_email: str | None = None
    buyer_contact_name: str | None = None
    seller_name: str | None = None
    payment_card_last4: str | None = None
    buyer_address: str | None = None
    buyer_location: GeoPoint | None = None
    purchase_date: datetime = field(default_factory=datetime.utcnow)

    @property
    def total_amount(self) -> int:
        return self.quantity * self.price_per_cylinder
