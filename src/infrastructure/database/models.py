"""SQLAlchemy ORM models."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class ProfileModel(Base):
    """User profile model, keyed by the identity provider's user ID."""

    __tablename__ = "profiles"
    __table_args__ = (
        CheckConstraint("role IN ('buyer', 'seller', 'admin')", name="ck_profiles_role"),
        CheckConstraint(
            "cylinders_available IS NULL OR cylinders_available >= 0",
            name="ck_profiles_stock_non_negative",
        ),
        Index("ix_profiles_role_active", "role", "active"),
        Index("ix_profiles_role_created_at", "role", "created_at"),
    )

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    role: Mapped[str] = mapped_column(String(20), nullable=False)
    contact_name: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    phone_number: Mapped[str] = mapped_column(String(30), nullable=False, default="")
    approved: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    cylinders_available: Mapped[int | None] = mapped_column(Integer)
    latitude: Mapped[float | None] = mapped_column(Float)
    longitude: Mapped[float | None] = mapped_column(Float)
    address: Mapped[str | None] = mapped_column(Text)
    license_number: Mapped[str | None] = mapped_column(String(100))
    licensee_name_address: Mapped[str | None] = mapped_column(Text)
    license_validity: Mapped[str | None] = mapped_column(String(100))
    license_type: Mapped[str | None] = mapped_column(String(100))
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )

    # Relationships
    purchases: Mapped[list["PurchaseModel"]] = relationship(
        "PurchaseModel",
        back_populates="buyer",
        foreign_keys="PurchaseModel.buyer_id",
    )
    orders: Mapped[list["PurchaseModel"]] = relationship(
        "PurchaseModel",
        back_populates="seller",
        foreign_keys="PurchaseModel.seller_id",
    )


class PurchaseModel(Base):
    """Completed purchase (append-only)."""

    __tablename__ = "purchases"
    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_purchases_quantity_positive"),
        CheckConstraint("status IN ('completed')", name="ck_purchases_status"),
        Index("ix_purchases_buyer_date", "buyer_id", "purchase_date"),
        Index("ix_purchases_seller_date", "seller_id", "purchase_date"),
    )

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    buyer_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("profiles.id", ondelete="RESTRICT"),
        nullable=False,
    )
    seller_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("profiles.id", ondelete="RESTRICT"),
        nullable=False,
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    price_per_cylinder: Mapped[int] = mapped_column(Integer, nullable=False)
    total_amount: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="completed")
    buyer_email: Mapped[str | None] = mapped_column(String(255))
    buyer_contact_name: Mapped[str | None] = mapped_column(String(100))
    seller_name: Mapped[str | None] = mapped_column(String(100))
    payment_card_last4: Mapped[str | None] = mapped_column(String(4))
    buyer_address: Mapped[str | None] = mapped_column(Text)
    buyer_latitude: Mapped[float | None] = mapped_column(Float)
    buyer_longitude: Mapped[float | None] = mapped_column(Float)
    purchase_date: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, nullable=False
    )

    # Relationships
    buyer: Mapped["ProfileModel"] = relationship(
        "ProfileModel", back_populates="purchases", foreign_keys=[buyer_id]
    )
    seller: Mapped["ProfileModel"] = relationship(
        "ProfileModel", back_populates="orders", foreign_keys=[seller_id]
    )


class ActivityLogModel(Base):
    """Activity log model for the admin console feed."""

    __tablename__ = "activity_log"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    action: Mapped[str] = mapped_column(String(50), nullable=False)
    actor_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
    )
    subject_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, nullable=False, index=True
    )

    # Relationships
    actor: Mapped["ProfileModel"] = relationship("ProfileModel", foreign_keys=[actor_id])
    subject: Mapped["ProfileModel"] = relationship("ProfileModel", foreign_keys=[subject_id])
