from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, UniqueConstraint, select
from sqlalchemy.orm import Mapped, mapped_column, relationship

from main import db

from . import BaseModel, isoformat, naive_utcnow

if TYPE_CHECKING:
    from .organization import Organization
    from .volunteer import Shift, ShiftSignup

__all__ = [
    "Donation",
    "DonationCategory",
    "DonationItem",
    "Donor",
    "KG_TO_LB",
    "WeighingCategory",
]

KG_TO_LB = 2.20462


class Donor(BaseModel):
    __tablename__ = "donor"
    __table_args__ = (UniqueConstraint("organization_id", "name", name="uq_donor_name"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    organization_id: Mapped[int] = mapped_column(ForeignKey("organization.id"), index=True)
    name: Mapped[str]

    organization: Mapped[Organization] = relationship(back_populates="donors")
    donations: Mapped[list[Donation]] = relationship(back_populates="donor")

    def __repr__(self):
        return f"<Donor {self.name}>"

    def to_dict(self):
        return {"id": self.id, "name": self.name, "organization_id": self.organization_id}

    @classmethod
    def get_by_name(cls, organization_id: int, name: str) -> Donor | None:
        return db.session.execute(
            select(Donor).where(Donor.organization_id == organization_id, Donor.name == name)
        ).scalar_one_or_none()

    @classmethod
    def get_all(cls, organization_id: int):
        return db.session.scalars(
            select(Donor).where(Donor.organization_id == organization_id).order_by(Donor.name)
        ).all()


class DonationCategory(BaseModel):
    __tablename__ = "donation_category"
    __table_args__ = (UniqueConstraint("organization_id", "name", name="uq_donation_category_name"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    organization_id: Mapped[int] = mapped_column(ForeignKey("organization.id"), index=True)
    name: Mapped[str]

    organization: Mapped[Organization] = relationship(back_populates="donation_categories")
    items: Mapped[list[DonationItem]] = relationship(back_populates="category")

    def __repr__(self):
        return f"<DonationCategory {self.name}>"

    def to_dict(self):
        return {"id": self.id, "name": self.name, "organization_id": self.organization_id}

    @classmethod
    def get_by_name(cls, organization_id: int, name: str) -> DonationCategory | None:
        return db.session.execute(
            select(DonationCategory).where(
                DonationCategory.organization_id == organization_id, DonationCategory.name == name
            )
        ).scalar_one_or_none()

    @classmethod
    def get_all(cls, organization_id: int):
        return db.session.scalars(
            select(DonationCategory)
            .where(DonationCategory.organization_id == organization_id)
            .order_by(DonationCategory.id)
        ).all()


class Donation(BaseModel):
    __tablename__ = "donation"

    id: Mapped[int] = mapped_column(primary_key=True)
    organization_id: Mapped[int] = mapped_column(ForeignKey("organization.id"), index=True)
    donor_id: Mapped[int | None] = mapped_column(ForeignKey("donor.id"))
    shift_id: Mapped[int | None] = mapped_column(ForeignKey("shift.id", ondelete="SET NULL"))
    shift_signup_id: Mapped[int | None] = mapped_column(ForeignKey("shift_signup.id", ondelete="CASCADE"))
    # Total weight in kilograms
    summary: Mapped[float] = mapped_column(default=0)
    created_at: Mapped[datetime] = mapped_column(default=naive_utcnow, index=True)

    organization: Mapped[Organization] = relationship(back_populates="donations")
    donor: Mapped[Donor | None] = relationship(back_populates="donations")
    shift: Mapped[Shift | None] = relationship(back_populates="donations")
    shift_signup: Mapped[ShiftSignup | None] = relationship(back_populates="donations")
    items: Mapped[list[DonationItem]] = relationship(back_populates="donation", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Donation {self.id} {self.summary}kg>"

    def to_dict(self):
        return {
            "id": self.id,
            "donor_id": self.donor_id,
            "donor": self.donor.name if self.donor else None,
            "shift_id": self.shift_id,
            "shift_signup_id": self.shift_signup_id,
            "summary": self.summary,
            "created_at": isoformat(self.created_at),
            "items": [item.to_dict() for item in self.items],
        }

    @classmethod
    def get_all(cls, organization_id: int):
        return db.session.scalars(
            select(Donation)
            .where(Donation.organization_id == organization_id)
            .order_by(Donation.created_at.desc(), Donation.id.desc())
        ).all()


class DonationItem(BaseModel):
    __tablename__ = "donation_item"

    id: Mapped[int] = mapped_column(primary_key=True)
    donation_id: Mapped[int] = mapped_column(ForeignKey("donation.id", ondelete="CASCADE"), index=True)
    category_id: Mapped[int] = mapped_column(ForeignKey("donation_category.id"), index=True)
    weight_kg: Mapped[float] = mapped_column(default=0)

    donation: Mapped[Donation] = relationship(back_populates="items")
    category: Mapped[DonationCategory] = relationship(back_populates="items")

    def to_dict(self):
        return {
            "id": self.id,
            "category_id": self.category_id,
            "category": self.category.name,
            "weight_kg": self.weight_kg,
        }


class WeighingCategory(BaseModel):
    """A custom reporting unit, e.g. "Banana box" weighing 18.14kg."""

    __tablename__ = "weighing_category"
    __table_args__ = (UniqueConstraint("organization_id", "category", name="uq_weighing_category_name"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    organization_id: Mapped[int] = mapped_column(ForeignKey("organization.id"), index=True)
    category: Mapped[str]
    kilograms: Mapped[float]
    pounds: Mapped[float]

    organization: Mapped[Organization] = relationship(back_populates="weighing_categories")

    def __repr__(self):
        return f"<WeighingCategory {self.category} {self.kilograms}kg>"

    def set_weight(self, weight: float, unit: str):
        if unit == "kg":
            self.kilograms = round(weight, 2)
            self.pounds = round(weight * KG_TO_LB, 2)
        elif unit == "lb":
            self.pounds = round(weight, 2)
            self.kilograms = round(weight / KG_TO_LB, 2)
        else:
            raise ValueError('Unit must be "kg" or "lb"')

    def to_dict(self):
        return {
            "id": self.id,
            "category": self.category,
            "kilograms": self.kilograms,
            "pounds": self.pounds,
            "organization_id": self.organization_id,
        }

    @classmethod
    def get_by_name(cls, organization_id: int, name: str) -> WeighingCategory | None:
        return db.session.execute(
            select(WeighingCategory).where(
                WeighingCategory.organization_id == organization_id, WeighingCategory.category == name
            )
        ).scalar_one_or_none()

    @classmethod
    def get_all(cls, organization_id: int):
        return db.session.scalars(
            select(WeighingCategory)
            .where(WeighingCategory.organization_id == organization_id)
            .order_by(WeighingCategory.category)
        ).all()
