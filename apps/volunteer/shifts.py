from flask import jsonify
from flask_login import login_required

from apps.common import (
    current_organization_id,
    get_for_org_or_404,
    get_json,
    parse_datetime,
    parse_int,
    require_fields,
)
from apps.common.errors import ValidationError
from main import db
from models import Shift, ShiftCategory

from . import volunteer

SHIFT_FIELDS = ("name", "shift_category_id", "start", "end", "location", "slots")


def update_from_json(shift: Shift, data: dict):
    require_fields(data, *SHIFT_FIELDS)

    slots = parse_int(data["slots"], "slots")
    if slots < 1:
        raise ValidationError("Slots must be at least 1")

    start = parse_datetime(data["start"], "start")
    end = parse_datetime(data["end"], "end")
    if end < start:
        raise ValidationError("Shift cannot end before it starts")

    shift.category = get_for_org_or_404(
        ShiftCategory, parse_int(data["shift_category_id"], "shift_category_id"), "Shift category"
    )
    shift.name = data["name"]
    shift.start = start
    shift.end = end
    shift.location = data["location"]
    shift.slots = slots


@volunteer.route("/shifts")
@login_required
def list_shifts():
    return jsonify([s.to_dict() for s in Shift.get_all(current_organization_id())])


@volunteer.route("/shifts/<int:shift_id>")
@login_required
def get_shift(shift_id):
    shift = get_for_org_or_404(Shift, shift_id, "Shift")
    return jsonify({**shift.to_dict(), "signups": [s.to_dict() for s in shift.signups]})


@volunteer.route("/shifts", methods=["POST"])
@login_required
def create_shift():
    shift = Shift(organization_id=current_organization_id())
    update_from_json(shift, get_json())
    db.session.add(shift)
    db.session.commit()
    return jsonify(shift.to_dict()), 201


@volunteer.route("/shifts/<int:shift_id>", methods=["PUT"])
@login_required
def update_shift(shift_id):
    data = get_json()
    shift = get_for_org_or_404(Shift, shift_id, "Shift")
    update_from_json(shift, data)
    db.session.commit()
    return jsonify(shift.to_dict())


@volunteer.route("/shifts/<int:shift_id>", methods=["DELETE"])
@login_required
def delete_shift(shift_id):
    shift = get_for_org_or_404(Shift, shift_id, "Shift")
    # Signups go with the shift
    db.session.delete(shift)
    db.session.commit()
    return jsonify({"success": True})
