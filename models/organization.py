from __future__ import annotations

import json
import typing

from sqlalchemy import Text, func, select
from sqlalchemy.orm import Mapped, mapped_column, relationship

from main import db

from . import BaseModel

if typing.TYPE_CHECKING:
    from .inventory import Donation, DonationCategory, Donor, WeighingCategory
    from .user import User
    from .volunteer import RecurringShift, Shift, ShiftCategory

__all__ = ["Organization", "parse_address"]


def parse_address(address: str) -> list[str]:
    """Addresses are stored as a JSON-encoded list of non-empty strings.

    Raises ValueError with a user-facing message if the value is malformed.
    """
    try:
        addresses = json.loads(address)
    except json.JSONDecodeError as e:
        raise ValueError("Invalid address JSON format") from e

    if not isinstance(addresses, list):
        raise ValueError("Address must be an array")
    if len(addresses) == 0:
        raise ValueError("At least one address is required")
    if any(not isinstance(a, str) or not a.strip() for a in addresses):
        raise ValueError("Invalid address format")
    return addresses


class Organization(BaseModel):
    __tablename__ = "organization"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(unique=True, index=True)
    address: Mapped[str | None] = mapped_column(Text)
    # Dollar value of one kilogram of incoming donations
    incoming_dollar_value: Mapped[float] = mapped_column(default=0)

    users: Mapped[list[User]] = relationship(back_populates="organization", cascade="all, delete-orphan")
    shift_categories: Mapped[list[ShiftCategory]] = relationship(
        back_populates="organization", cascade="all, delete-orphan"
    )
    recurring_shifts: Mapped[list[RecurringShift]] = relationship(
        back_populates="organization", cascade="all, delete-orphan"
    )
    shifts: Mapped[list[Shift]] = relationship(back_populates="organization", cascade="all, delete-orphan")
    donors: Mapped[list[Donor]] = relationship(back_populates="organization", cascade="all, delete-orphan")
    donation_categories: Mapped[list[DonationCategory]] = relationship(
        back_populates="organization", cascade="all, delete-orphan"
    )
    donations: Mapped[list[Donation]] = relationship(
        back_populates="organization", cascade="all, delete-orphan"
    )
    weighing_categories: Mapped[list[WeighingCategory]] = relationship(
        back_populates="organization", cascade="all, delete-orphan"
    )

    def __init__(self, name: str, address: str | None = None):
        self.name = name
        self.address = address

    def __repr__(self):
        return f"<Organization {self.name}>"

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "address": self.address,
            "incoming_dollar_value": self.incoming_dollar_value,
        }

    def get_stats(self):
        from .inventory import Donation
        from .user import User
        from .volunteer import Shift

        def count(model):
            return db.session.scalar(
                select(func.count()).select_from(model).where(model.organization_id == self.id)
            )

        return {
            "total_users": count(User),
            "total_shifts": count(Shift),
            "total_donations": count(Donation),
        }

    @classmethod
    def get_by_name(cls, name) -> Organization | None:
        return db.session.execute(select(Organization).where(Organization.name == name)).scalar_one_or_none()

    @classmethod
    def get_all(cls):
        return db.session.scalars(select(Organization).order_by(Organization.name)).all()
