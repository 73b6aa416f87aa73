"""User profile domain entity and role variants."""

import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import assert_never
from uuid import UUID, uuid4


class Role(StrEnum):
    """Marketplace role, fixed at registration."""

    BUYER = "buyer"
    SELLER = "seller"
    ADMIN = "admin"


@dataclass(frozen=True)
class GeoPoint:
    """A latitude/longitude pair in decimal degrees."""

    latitude: float
    longitude: float

    def is_valid(self) -> bool:
        """True when both coordinates are finite and inside WGS84 bounds."""
        return (
            math.isfinite(self.latitude)
            and math.isfinite(self.longitude)
            and -90.0 <= self.latitude <= 90.0
            and -180.0 <= self.longitude <= 180.0
        )


@dataclass
class UserProfile:
    """Domain entity for a marketplace user profile.

    Seller-only fields (stock, location, license) and the buyer-only
    delivery address stay ``None`` for roles they do not apply to.
    """

    role: Role
    id: UUID = field(default_factory=uuid4)
    email: str = ""
    contact_name: str = ""
    phone_number: str = ""
    approved: bool = True
    active: bool = True
    cylinders_available: int | None = None
    location: GeoPoint | None = None
    address: str | None = None
    license_number: str | None = None
    licensee_name_address: str | None = None
    license_validity: str | None = None
    license_type: str | None = None
    version: int = 1
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self) -> None:
        """Ensure updated_at is always at least as recent as created_at."""
        if self.updated_at < self.created_at:
            self.updated_at = self.created_at

    @classmethod
    def register(
        cls,
        id: UUID,
        role: Role,
        email: str,
        contact_name: str,
        phone_number: str,
    ) -> "UserProfile":
        """Build a freshly registered profile with the defaults for its role.

        Buyers and admins are approved and active immediately. Sellers start
        unapproved, hidden and with empty stock until an admin reviews them.
        """
        profile = cls(
            id=id,
            role=role,
            email=email,
            contact_name=contact_name,
            phone_number=phone_number,
        )
        match role:
            case Role.BUYER:
                profile.address = ""
            case Role.SELLER:
                profile.approved = False
                profile.active = False
                profile.cylinders_available = 0
            case Role.ADMIN:
                pass
            case _:
                assert_never(role)
        return profile

    @property
    def display_name(self) -> str:
        return self.contact_name or self.email or "User"

    @property
    def is_marketplace_visible(self) -> bool:
        """Approved and not hidden by the seller or an admin."""
        return self.approved and self.active

    def unavailable_reason(self) -> str | None:
        """Explain why a seller cannot take purchases, or None if it can."""
        if not self.approved:
            return "This seller is not yet approved."
        if not self.active:
            return "This seller is currently not active."
        if (self.cylinders_available or 0) <= 0:
            return "This seller is out of stock."
        return None

    def touch(self) -> None:
        self.updated_at = datetime.utcnow()


@dataclass(frozen=True)
class MarketplaceStats:
    """Aggregate counters shown on the admin dashboard."""

    total_users: int = 0
    total_sellers: int = 0
    total_buyers: int = 0
    pending_approvals: int = 0
    total_cylinders: int = 0
