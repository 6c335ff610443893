from __future__ import annotations

from datetime import time
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, ForeignKey, select
from sqlalchemy.orm import Mapped, mapped_column, relationship

from main import db

from .. import BaseModel

if TYPE_CHECKING:
    from ..organization import Organization
    from .shift import ShiftCategory

__all__ = ["RecurringShift", "DAY_NAMES"]

# Day numbering starts on Sunday
DAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]


class RecurringShift(BaseModel):
    """A weekly template. Concrete shifts are created from it on demand."""

    __tablename__ = "recurring_shift"
    __table_args__ = (
        CheckConstraint("day_of_week >= 0 AND day_of_week <= 6", name="day_of_week_range"),
        CheckConstraint("slots >= 1", name="slots_positive"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    organization_id: Mapped[int] = mapped_column(ForeignKey("organization.id"), index=True)
    shift_category_id: Mapped[int] = mapped_column(ForeignKey("shift_category.id"), index=True)
    name: Mapped[str]
    day_of_week: Mapped[int]
    start_time: Mapped[time]
    end_time: Mapped[time]
    location: Mapped[str]
    slots: Mapped[int] = mapped_column(default=1)

    organization: Mapped[Organization] = relationship(back_populates="recurring_shifts")
    category: Mapped[ShiftCategory] = relationship(back_populates="recurring_shifts")

    def __repr__(self):
        return f"<RecurringShift {self.name} {self.day_name} {self.start_time:%H:%M}>"

    @property
    def day_name(self) -> str:
        return DAY_NAMES[self.day_of_week]

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "day_of_week": self.day_of_week,
            "start_time": self.start_time.strftime("%H:%M"),
            "end_time": self.end_time.strftime("%H:%M"),
            "location": self.location,
            "slots": self.slots,
            "shift_category_id": self.shift_category_id,
            "organization_id": self.organization_id,
            "category": self.category.to_dict(),
        }

    @classmethod
    def get_all(cls, organization_id: int):
        return db.session.scalars(
            select(RecurringShift)
            .where(RecurringShift.organization_id == organization_id)
            .order_by(RecurringShift.day_of_week, RecurringShift.start_time)
        ).all()
