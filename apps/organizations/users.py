import logging

from flask import jsonify, request
from flask_login import current_user, login_required
from sqlalchemy import update

from apps.common import current_organization_id, get_for_org_or_404, get_json, require_fields
from apps.common.errors import ConflictError, ValidationError
from main import db
from models import User, UserRole, UserStatus

from . import organizations

logger = logging.getLogger(__name__)


def parse_role(value) -> UserRole:
    try:
        return UserRole(str(value).upper())
    except ValueError as e:
        raise ValidationError(f"Invalid role: {value}") from e


def check_unique(email: str, phone: str | None, user: User | None = None):
    existing = User.get_by_email(email)
    if existing is not None and existing is not user:
        raise ConflictError("User with this email already exists")

    if phone:
        existing = User.get_by_phone(phone)
        if existing is not None and existing is not user:
            raise ConflictError("User with this phone number already exists")


def split_name(data: dict) -> tuple[str | None, str]:
    """Accept either first_name/last_name or a single name field."""
    first_name = data.get("first_name")
    last_name = data.get("last_name")
    if (not first_name or not last_name) and data.get("name"):
        first_name, _, last_name = data["name"].strip().partition(" ")
    return first_name, (last_name or "").strip()


def user_dict(user: User, names: dict[int, str]):
    return {
        **user.to_dict(),
        "name": user.name,
        "approved_by_name": names.get(user.approved_by_id),
        "denied_by_name": names.get(user.denied_by_id),
    }


@organizations.route("/users")
@login_required
def list_users():
    users = User.get_all(current_organization_id())
    names = {u.id: u.name for u in users}
    return jsonify([user_dict(u, names) for u in users])


@organizations.route("/users/<int:user_id>")
@login_required
def get_user(user_id):
    user = get_for_org_or_404(User, user_id, "User")
    return jsonify({**user.to_dict(), "name": user.name, "organization_name": user.organization.name})


@organizations.route("/users", methods=["POST"])
@login_required
def create_user():
    data = get_json()
    require_fields(data, "first_name", "last_name", "email", "phone", "password", "role")
    role = parse_role(data["role"])
    check_unique(data["email"], data["phone"])

    user = User(
        data["email"],
        data["first_name"],
        data["last_name"],
        organization=current_user.organization,
        role=role,
        phone=data["phone"],
    )
    user.set_password(data["password"])
    db.session.add(user)
    db.session.commit()
    logger.info("Created user %s in organization %s", user.id, user.organization_id)
    return jsonify({**user.to_dict(), "name": user.name}), 201


@organizations.route("/users/<int:user_id>", methods=["PUT"])
@login_required
def update_user(user_id):
    data = get_json()
    first_name, last_name = split_name(data)
    if not first_name or not data.get("email"):
        raise ValidationError(
            "Missing required fields", details={"first_name": not first_name, "email": not data.get("email")}
        )

    user = get_for_org_or_404(User, user_id, "User")
    phone = data.get("phone", user.phone) or None
    check_unique(data["email"], phone, user)

    user.first_name = first_name
    user.last_name = last_name
    user.email = data["email"]
    user.phone = phone
    if data.get("role"):
        user.role = parse_role(data["role"])
    if data.get("password"):
        user.set_password(data["password"])

    db.session.commit()
    return jsonify({**user.to_dict(), "name": user.name})


@organizations.route("/users/<int:user_id>", methods=["DELETE"])
@login_required
def delete_user(user_id):
    user = get_for_org_or_404(User, user_id, "User")

    # Keep the users they approved or denied, just forget who did it
    db.session.execute(update(User).where(User.approved_by_id == user.id).values(approved_by_id=None))
    db.session.execute(update(User).where(User.denied_by_id == user.id).values(denied_by_id=None))

    signups = len(user.signups)
    db.session.delete(user)
    db.session.commit()
    logger.info("Deleted user %s and %s signups", user_id, signups)
    return jsonify({"success": True, "deleted_signups": signups})


def pending_user_or_400(user_id) -> User:
    user = get_for_org_or_404(User, user_id, "User")
    if user.status != UserStatus.PENDING:
        raise ValidationError("User is not in pending status")
    return user


@organizations.route("/users/<int:user_id>/approve", methods=["PUT"])
@login_required
def approve_user(user_id):
    user = pending_user_or_400(user_id)
    user.set_status(UserStatus.APPROVED, actor=current_user)
    db.session.commit()
    logger.info("User %s approved by %s", user.id, current_user.id)
    return jsonify({**user.to_dict(), "name": user.name})


@organizations.route("/users/<int:user_id>/deny", methods=["PUT"])
@login_required
def deny_user(user_id):
    data = request.get_json(silent=True) or {}
    user = pending_user_or_400(user_id)
    user.set_status(UserStatus.DENIED, actor=current_user, reason=data.get("reason") or "No reason provided")
    db.session.commit()
    logger.info("User %s denied by %s", user.id, current_user.id)
    return jsonify({**user.to_dict(), "name": user.name})


@organizations.route("/users/<int:user_id>/reset", methods=["PUT"])
@login_required
def reset_user(user_id):
    user = get_for_org_or_404(User, user_id, "User")
    if user.status != UserStatus.PENDING:
        user.set_status(UserStatus.PENDING)
        db.session.commit()
    return jsonify({**user.to_dict(), "name": user.name})
