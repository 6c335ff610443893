import logging

from flask import jsonify
from flask_login import login_required

from apps.common import (
    check_not_reserved,
    current_organization_id,
    get_for_org_or_404,
    get_json,
    parse_datetime,
    parse_float,
    parse_int,
    require_fields,
)
from apps.common.errors import ConflictError, NotFoundError, ValidationError
from main import db
from models import Donation, DonationCategory, DonationItem, Donor, Shift, ShiftSignup

from . import inventory

logger = logging.getLogger(__name__)


@inventory.route("/donors")
@login_required
def list_donors():
    return jsonify([d.to_dict() for d in Donor.get_all(current_organization_id())])


@inventory.route("/donors", methods=["POST"])
@login_required
def create_donor():
    data = get_json()
    require_fields(data, "name")
    check_not_reserved(data["name"])
    if Donor.get_by_name(current_organization_id(), data["name"]) is not None:
        raise ConflictError("Donor with this name already exists")

    donor = Donor(organization_id=current_organization_id(), name=data["name"])
    db.session.add(donor)
    db.session.commit()
    return jsonify(donor.to_dict()), 201


@inventory.route("/donation-categories")
@login_required
def list_donation_categories():
    return jsonify([c.to_dict() for c in DonationCategory.get_all(current_organization_id())])


@inventory.route("/donation-categories", methods=["POST"])
@login_required
def create_donation_category():
    data = get_json()
    require_fields(data, "name")
    check_not_reserved(data["name"])
    if DonationCategory.get_by_name(current_organization_id(), data["name"]) is not None:
        raise ConflictError("Category with this name already exists")

    category = DonationCategory(organization_id=current_organization_id(), name=data["name"])
    db.session.add(category)
    db.session.commit()
    return jsonify(category.to_dict()), 201


@inventory.route("/donations")
@login_required
def list_donations():
    return jsonify([d.to_dict() for d in Donation.get_all(current_organization_id())])


def parse_items(items) -> list[DonationItem]:
    if items is None:
        return []
    if not isinstance(items, list):
        raise ValidationError("items must be a list")

    result = []
    for item in items:
        if not isinstance(item, dict):
            raise ValidationError("Each item needs a category_id and weight_kg")
        require_fields(item, "category_id", "weight_kg")
        weight = parse_float(item["weight_kg"], "weight_kg")
        if weight < 0:
            raise ValidationError("weight_kg cannot be negative")
        category = get_for_org_or_404(
            DonationCategory, parse_int(item["category_id"], "category_id"), "Donation category"
        )
        result.append(DonationItem(category=category, weight_kg=weight))
    return result


@inventory.route("/donations", methods=["POST"])
@login_required
def create_donation():
    """Record a donation. ``summary`` defaults to the total item weight."""
    data = get_json()
    items = parse_items(data.get("items"))
    if data.get("summary") is None and not items:
        raise ValidationError("A donation needs a summary weight or items")

    donation = Donation(organization_id=current_organization_id(), items=items)
    if data.get("donor_id"):
        donation.donor = get_for_org_or_404(Donor, parse_int(data["donor_id"], "donor_id"), "Donor")
    if data.get("shift_id"):
        donation.shift = get_for_org_or_404(Shift, parse_int(data["shift_id"], "shift_id"), "Shift")
    if data.get("shift_signup_id"):
        signup = db.session.get(ShiftSignup, parse_int(data["shift_signup_id"], "shift_signup_id"))
        if signup is None or signup.shift.organization_id != current_organization_id():
            raise NotFoundError("Shift signup not found")
        donation.shift_signup = signup
    if data.get("created_at"):
        donation.created_at = parse_datetime(data["created_at"], "created_at")

    if data.get("summary") is not None:
        donation.summary = parse_float(data["summary"], "summary")
    else:
        donation.summary = round(sum(i.weight_kg for i in items), 2)

    db.session.add(donation)
    db.session.commit()
    logger.info("Recorded donation %s of %skg", donation.id, donation.summary)
    return jsonify(donation.to_dict()), 201


@inventory.route("/donations/<int:donation_id>", methods=["DELETE"])
@login_required
def delete_donation(donation_id):
    donation = get_for_org_or_404(Donation, donation_id, "Donation")
    db.session.delete(donation)
    db.session.commit()
    return jsonify({"success": True})
