from flask import jsonify
from flask_login import login_required

from apps.common import (
    current_organization_id,
    get_for_org_or_404,
    get_json,
    parse_int,
    parse_time,
    require_fields,
)
from apps.common.errors import ValidationError
from main import db
from models import RecurringShift, ShiftCategory

from . import volunteer

RECURRING_FIELDS = ("name", "day_of_week", "start_time", "end_time", "shift_category_id", "location", "slots")


def update_from_json(recurring: RecurringShift, data: dict):
    require_fields(data, *RECURRING_FIELDS)

    try:
        day_of_week = int(data["day_of_week"])
    except (TypeError, ValueError) as e:
        raise ValidationError("Day of week must be between 0 and 6") from e
    if not 0 <= day_of_week <= 6:
        raise ValidationError("Day of week must be between 0 and 6")

    slots = parse_int(data["slots"], "slots")
    if slots < 1:
        raise ValidationError("Slots must be at least 1")

    category = get_for_org_or_404(
        ShiftCategory, parse_int(data["shift_category_id"], "shift_category_id"), "Shift category"
    )

    start_time = parse_time(data["start_time"], "start_time")
    end_time = parse_time(data["end_time"], "end_time")
    # Occurrences are materialized within a single day
    if end_time <= start_time:
        raise ValidationError("End time must be after start time")

    recurring.name = data["name"]
    recurring.day_of_week = day_of_week
    recurring.start_time = start_time
    recurring.end_time = end_time
    recurring.category = category
    recurring.location = data["location"]
    recurring.slots = slots


@volunteer.route("/recurring-shifts")
@login_required
def list_recurring():
    return jsonify([r.to_dict() for r in RecurringShift.get_all(current_organization_id())])


@volunteer.route("/recurring-shifts", methods=["POST"])
@login_required
def create_recurring():
    recurring = RecurringShift(organization_id=current_organization_id())
    update_from_json(recurring, get_json())
    db.session.add(recurring)
    db.session.commit()
    return jsonify(recurring.to_dict()), 201


@volunteer.route("/recurring-shifts/<int:recurring_id>", methods=["PUT"])
@login_required
def update_recurring(recurring_id):
    data = get_json()
    recurring = get_for_org_or_404(RecurringShift, recurring_id, "Recurring shift")
    update_from_json(recurring, data)
    db.session.commit()
    return jsonify(recurring.to_dict())


@volunteer.route("/recurring-shifts/<int:recurring_id>", methods=["DELETE"])
@login_required
def delete_recurring(recurring_id):
    recurring = get_for_org_or_404(RecurringShift, recurring_id, "Recurring shift")
    db.session.delete(recurring)
    db.session.commit()
    return jsonify({"success": True})
