import logging

from flask import jsonify
from flask_login import login_required

from apps.common import current_organization_id, get_json, parse_float
from apps.common.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from main import db
from models import Organization, parse_address

from . import organizations

logger = logging.getLogger(__name__)


def get_organization_or_404(org_id: int) -> Organization:
    organization = db.session.get(Organization, org_id)
    if organization is None:
        raise NotFoundError("Organization not found")
    return organization


def get_own_organization(org_id: int) -> Organization:
    """Organizations can only be changed by their own users."""
    organization = get_organization_or_404(org_id)
    if organization.id != current_organization_id():
        raise ForbiddenError("You can only update your own organization")
    return organization


def validate_address(address):
    if not address:
        return None
    try:
        parse_address(address)
    except ValueError as e:
        raise ValidationError(str(e)) from e
    return address


def check_unique_name(name: str, organization: Organization | None = None):
    existing = Organization.get_by_name(name)
    if existing is not None and existing is not organization:
        raise ConflictError("Organization with this name already exists")


def parse_dollar_value(value) -> float:
    value = parse_float(value, "incoming_dollar_value")
    if value != value or value < 0:
        raise ValidationError("Incoming dollar value must be a non-negative number")
    return value


@organizations.route("/organizations")
@login_required
def list_organizations():
    return jsonify([o.to_dict() for o in Organization.get_all()])


@organizations.route("/organizations/<int:org_id>")
@login_required
def get_organization(org_id):
    return jsonify(get_organization_or_404(org_id).to_dict())


@organizations.route("/organizations", methods=["POST"])
@login_required
def create_organization():
    data = get_json()
    if not data.get("name"):
        raise ValidationError("Name is required")
    address = validate_address(data.get("address"))
    check_unique_name(data["name"])

    organization = Organization(data["name"], address)
    if data.get("incoming_dollar_value") is not None:
        organization.incoming_dollar_value = parse_dollar_value(data["incoming_dollar_value"])
    db.session.add(organization)
    db.session.commit()
    logger.info("Created organization %s", organization.name)
    return jsonify(organization.to_dict()), 201


@organizations.route("/organizations/<int:org_id>", methods=["PUT"])
@login_required
def update_organization(org_id):
    data = get_json()
    if not data.get("name"):
        raise ValidationError("Name is required")
    address = validate_address(data.get("address"))
    organization = get_own_organization(org_id)
    check_unique_name(data["name"], organization)

    organization.name = data["name"]
    if address:
        organization.address = address
    if data.get("incoming_dollar_value") is not None:
        organization.incoming_dollar_value = parse_dollar_value(data["incoming_dollar_value"])
    db.session.commit()
    return jsonify(organization.to_dict())


@organizations.route("/organizations/<int:org_id>", methods=["DELETE"])
@login_required
def delete_organization(org_id):
    organization = get_own_organization(org_id)
    # Everything the organization owns goes with it
    db.session.delete(organization)
    db.session.commit()
    logger.info("Deleted organization %s", org_id)
    return jsonify({"success": True})


@organizations.route("/organizations/<int:org_id>/stats")
@login_required
def organization_stats(org_id):
    return jsonify(get_organization_or_404(org_id).get_stats())


@organizations.route("/organizations/<int:org_id>/incoming-value", methods=["PUT"])
@login_required
def update_incoming_value(org_id):
    data = get_json()
    if data.get("incoming_dollar_value") is None:
        raise ValidationError("Incoming dollar value is required")
    value = parse_dollar_value(data["incoming_dollar_value"])
    organization = get_own_organization(org_id)

    logger.info(
        "Updating incoming dollar value for %s from %s to %s",
        organization,
        organization.incoming_dollar_value,
        value,
    )
    organization.incoming_dollar_value = value
    db.session.commit()
    return jsonify(organization.to_dict())
