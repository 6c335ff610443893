from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, ForeignKey, UniqueConstraint, func, select
from sqlalchemy.orm import Mapped, column_property, mapped_column, relationship

from main import db

from .. import BaseModel, isoformat, naive_utcnow

if TYPE_CHECKING:
    from ..inventory import Donation
    from ..organization import Organization
    from ..user import User
    from .recurring import RecurringShift

__all__ = [
    "Shift",
    "ShiftCategory",
    "ShiftSignup",
]


class ShiftCategory(BaseModel):
    __tablename__ = "shift_category"
    __table_args__ = (UniqueConstraint("organization_id", "name", name="uq_shift_category_name"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    organization_id: Mapped[int] = mapped_column(ForeignKey("organization.id"), index=True)
    name: Mapped[str]
    icon: Mapped[str | None]

    organization: Mapped[Organization] = relationship(back_populates="shift_categories")
    shifts: Mapped[list[Shift]] = relationship(back_populates="category")
    recurring_shifts: Mapped[list[RecurringShift]] = relationship(back_populates="category")

    def __repr__(self):
        return f"<ShiftCategory {self.name}>"

    def __str__(self):
        return self.name

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "icon": self.icon,
            "organization_id": self.organization_id,
        }

    def is_in_use(self) -> bool:
        return bool(self.shifts) or bool(self.recurring_shifts)

    @classmethod
    def get_by_name(cls, organization_id: int, name: str) -> ShiftCategory | None:
        return db.session.execute(
            select(ShiftCategory).where(
                ShiftCategory.organization_id == organization_id, ShiftCategory.name == name
            )
        ).scalar_one_or_none()

    @classmethod
    def get_all(cls, organization_id: int):
        return db.session.scalars(
            select(ShiftCategory)
            .where(ShiftCategory.organization_id == organization_id)
            .order_by(ShiftCategory.id)
        ).all()


class ShiftSignup(BaseModel):
    __tablename__ = "shift_signup"
    __table_args__ = (UniqueConstraint("user_id", "shift_id", name="uq_shift_signup_user_shift"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("user.id", ondelete="CASCADE"), index=True)
    shift_id: Mapped[int] = mapped_column(ForeignKey("shift.id", ondelete="CASCADE"), index=True)
    check_in: Mapped[datetime | None]
    check_out: Mapped[datetime | None]
    meals_served: Mapped[int] = mapped_column(default=0)
    created_at: Mapped[datetime] = mapped_column(default=naive_utcnow)

    user: Mapped[User] = relationship(back_populates="signups")
    shift: Mapped[Shift] = relationship(back_populates="signups")
    donations: Mapped[list[Donation]] = relationship(
        back_populates="shift_signup", cascade="all, delete-orphan"
    )

    def __init__(self, user: User, shift: Shift, meals_served: int = 0):
        self.user = user
        self.shift = shift
        self.meals_served = meals_served

    def __repr__(self):
        return f"<ShiftSignup user={self.user_id} shift={self.shift_id}>"

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "shift_id": self.shift_id,
            "check_in": isoformat(self.check_in),
            "check_out": isoformat(self.check_out),
            "meals_served": self.meals_served,
            "created_at": isoformat(self.created_at),
            "user": {
                "id": self.user.id,
                "first_name": self.user.first_name,
                "last_name": self.user.last_name,
                "email": self.user.email,
            },
        }

    @classmethod
    def get_for(cls, user_id: int, shift_id: int) -> ShiftSignup | None:
        return db.session.execute(
            select(ShiftSignup).where(ShiftSignup.user_id == user_id, ShiftSignup.shift_id == shift_id)
        ).scalar_one_or_none()


class Shift(BaseModel):
    __tablename__ = "shift"
    __table_args__ = (
        CheckConstraint("slots >= 1", name="slots_positive"),
        CheckConstraint('"end" >= start', name="end_after_start"),
        # One concrete occurrence per recurrence slot
        UniqueConstraint(
            "organization_id",
            "shift_category_id",
            "name",
            "start",
            "end",
            "location",
            name="uq_shift_occurrence",
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    organization_id: Mapped[int] = mapped_column(ForeignKey("organization.id"), index=True)
    shift_category_id: Mapped[int] = mapped_column(ForeignKey("shift_category.id"), index=True)
    name: Mapped[str]
    start: Mapped[datetime] = mapped_column(index=True)
    end: Mapped[datetime]
    location: Mapped[str]
    slots: Mapped[int] = mapped_column(default=1)

    organization: Mapped[Organization] = relationship(back_populates="shifts")
    category: Mapped[ShiftCategory] = relationship(back_populates="shifts")
    signups: Mapped[list[ShiftSignup]] = relationship(back_populates="shift", cascade="all, delete-orphan")
    donations: Mapped[list[Donation]] = relationship(back_populates="shift")

    booked = column_property(
        select(func.count(ShiftSignup.id))
        .where(ShiftSignup.shift_id == id)
        .correlate_except(ShiftSignup)  # type: ignore[arg-type]
        .scalar_subquery()  # type: ignore[attr-defined]
    )

    def __repr__(self):
        return f"<Shift {self.name}@{self.start}>"

    def duration_in_hours(self) -> float:
        return (self.end - self.start).total_seconds() / 3600

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "start": isoformat(self.start),
            "end": isoformat(self.end),
            "location": self.location,
            "slots": self.slots,
            "booked": self.booked,
            "shift_category_id": self.shift_category_id,
            "organization_id": self.organization_id,
            "category": self.category.to_dict(),
        }

    @classmethod
    def get_all(cls, organization_id: int):
        return db.session.scalars(
            select(Shift).where(Shift.organization_id == organization_id).order_by(Shift.start, Shift.id)
        ).all()

    @classmethod
    def get_occurrence(cls, organization_id, shift_category_id, name, start, end, location) -> Shift | None:
        return db.session.execute(
            select(Shift).where(
                Shift.organization_id == organization_id,
                Shift.shift_category_id == shift_category_id,
                Shift.name == name,
                Shift.start == start,
                Shift.end == end,
                Shift.location == location,
            )
        ).scalar_one_or_none()
