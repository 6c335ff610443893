from __future__ import annotations

import enum
import time
import typing
from datetime import datetime, timedelta

from authlib.jose import jwt
from authlib.jose.errors import JoseError
from flask_login import UserMixin
from sqlalchemy import ForeignKey, Index, func, select
from sqlalchemy.orm import Mapped, mapped_column, relationship
from werkzeug.security import check_password_hash, generate_password_hash

from main import db

from . import BaseModel, isoformat, naive_utcnow

if typing.TYPE_CHECKING:
    from .organization import Organization
    from .volunteer import ShiftSignup

__all__ = [
    "User",
    "UserRole",
    "UserStatus",
    "UserStatusException",
    "generate_api_token",
    "verify_api_token",
]

DEFAULT_TOKEN_EXPIRY_DAYS = 7


class UserRole(enum.StrEnum):
    ADMIN = "ADMIN"
    STAFF = "STAFF"
    VOLUNTEER = "VOLUNTEER"


class UserStatus(enum.StrEnum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    DENIED = "DENIED"


# status: [allowed next status, ] pairs
USER_STATUSES: dict[UserStatus, list[UserStatus]] = {
    UserStatus.PENDING: [UserStatus.APPROVED, UserStatus.DENIED],
    UserStatus.APPROVED: [UserStatus.PENDING],
    UserStatus.DENIED: [UserStatus.PENDING],
}


class UserStatusException(ValueError):
    """Raised when a user is moved to an invalid status."""


def generate_api_token(key, uid, organization_id, expiry_days=DEFAULT_TOKEN_EXPIRY_DAYS) -> str:
    now = int(time.time())
    payload = {
        "sub": str(uid),
        "org": organization_id,
        "iat": now,
        "exp": now + int(timedelta(days=expiry_days).total_seconds()),
    }
    return jwt.encode({"alg": "HS256"}, payload, key).decode("ascii")


def verify_api_token(key, token) -> int | None:
    try:
        claims = jwt.decode(token, key)
        claims.validate()
        return int(claims["sub"])
    except (JoseError, KeyError, ValueError):
        return None


class User(BaseModel, UserMixin):
    __tablename__ = "user"

    id: Mapped[int] = mapped_column(primary_key=True)
    email: Mapped[str] = mapped_column(unique=True)
    first_name: Mapped[str]
    last_name: Mapped[str] = mapped_column(default="")
    phone: Mapped[str | None] = mapped_column(unique=True)
    password_hash: Mapped[str | None]
    role: Mapped[UserRole] = mapped_column(default=UserRole.VOLUNTEER)
    status: Mapped[UserStatus] = mapped_column(default=UserStatus.PENDING)
    organization_id: Mapped[int] = mapped_column(ForeignKey("organization.id"), index=True)
    created_at: Mapped[datetime] = mapped_column(default=naive_utcnow)

    approved_at: Mapped[datetime | None]
    approved_by_id: Mapped[int | None] = mapped_column(ForeignKey("user.id", ondelete="SET NULL"))
    denied_at: Mapped[datetime | None]
    denied_by_id: Mapped[int | None] = mapped_column(ForeignKey("user.id", ondelete="SET NULL"))
    denial_reason: Mapped[str | None]

    organization: Mapped[Organization] = relationship(back_populates="users")
    signups: Mapped[list[ShiftSignup]] = relationship(back_populates="user", cascade="all, delete-orphan")

    def __init__(
        self,
        email: str,
        first_name: str,
        last_name: str = "",
        organization: Organization | None = None,
        role: UserRole = UserRole.VOLUNTEER,
        status: UserStatus = UserStatus.PENDING,
        phone: str | None = None,
    ):
        self.email = email
        self.first_name = first_name
        self.last_name = last_name
        self.organization = organization
        self.role = role
        self.status = status
        self.phone = phone

    def __repr__(self):
        return f"<User {self.email}>"

    @property
    def name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def set_password(self, password: str):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        if self.password_hash is None:
            return False
        return check_password_hash(self.password_hash, password)

    def generate_api_token(self, key, expiry_days=DEFAULT_TOKEN_EXPIRY_DAYS) -> str:
        return generate_api_token(key, self.id, self.organization_id, expiry_days)

    def set_status(self, status: str | UserStatus, actor: User | None = None, reason: str | None = None):
        if isinstance(status, str):
            try:
                status = UserStatus(status)
            except ValueError as e:
                raise UserStatusException(f'"{status}" is not a valid status') from e

        if status not in USER_STATUSES[self.status]:
            raise UserStatusException(f'"{self.status}->{status}" is not a valid transition')

        now = naive_utcnow()
        if status == UserStatus.APPROVED:
            self.approved_at = now
            self.approved_by_id = actor.id if actor else None
        elif status == UserStatus.DENIED:
            self.denied_at = now
            self.denied_by_id = actor.id if actor else None
            self.denial_reason = reason
        else:
            self.approved_at = self.approved_by_id = None
            self.denied_at = self.denied_by_id = None
            self.denial_reason = None

        self.status = status

    def to_dict(self):
        return {
            "id": self.id,
            "email": self.email,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "phone": self.phone,
            "role": str(self.role),
            "status": str(self.status),
            "organization_id": self.organization_id,
            "created_at": isoformat(self.created_at),
            "approved_at": isoformat(self.approved_at),
            "approved_by": self.approved_by_id,
            "denied_at": isoformat(self.denied_at),
            "denied_by": self.denied_by_id,
            "denial_reason": self.denial_reason,
        }

    @classmethod
    def get_by_email(cls, email) -> User | None:
        return db.session.execute(
            select(User).where(func.lower(User.email) == func.lower(email))
        ).scalar_one_or_none()

    @classmethod
    def does_user_exist(cls, email):
        return bool(User.get_by_email(email))

    @classmethod
    def get_by_api_token(cls, key, token) -> User | None:
        uid = verify_api_token(key, token)
        if uid is None:
            return None

        return db.session.get(User, uid)

    @classmethod
    def get_by_phone(cls, phone) -> User | None:
        return db.session.execute(select(User).where(User.phone == phone)).scalar_one_or_none()

    @classmethod
    def get_all(cls, organization_id: int):
        return db.session.scalars(
            select(User).where(User.organization_id == organization_id).order_by(User.id)
        ).all()


Index("ix_user_email_lower", func.lower(User.email), unique=True)
