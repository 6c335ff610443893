from flask import jsonify, request
from flask_login import login_required

from apps.common import (
    current_organization_id,
    get_for_org_or_404,
    get_json,
    parse_datetime,
    parse_int,
    require_fields,
)
from apps.common.errors import ConflictError, NotFoundError, ValidationError
from main import db
from models import Shift, ShiftSignup, User

from . import volunteer


def shift_from_args() -> Shift:
    shift_id = request.args.get("shift_id")
    if not shift_id:
        raise ValidationError("shift_id is required")
    return get_for_org_or_404(Shift, parse_int(shift_id, "shift_id"), "Shift")


def get_signup_or_404(signup_id: int) -> ShiftSignup:
    # Signups are scoped through their shift
    signup = db.session.get(ShiftSignup, signup_id)
    if signup is None or signup.shift.organization_id != current_organization_id():
        raise NotFoundError("Shift signup not found")
    return signup


def optional_datetime(data: dict, field: str):
    if not data.get(field):
        return None
    return parse_datetime(data[field], field)


def check_not_signed_up(user: User, shift: Shift, signup: ShiftSignup | None = None):
    existing = ShiftSignup.get_for(user.id, shift.id)
    if existing is not None and existing is not signup:
        raise ConflictError("User is already signed up for this shift")


@volunteer.route("/shiftsignups")
@login_required
def list_signups():
    shift = shift_from_args()
    return jsonify([s.to_dict() for s in shift.signups])


@volunteer.route("/shiftsignups", methods=["POST"])
@login_required
def create_signup():
    data = get_json()
    require_fields(data, "user_id", "shift_id")

    shift = get_for_org_or_404(Shift, parse_int(data["shift_id"], "shift_id"), "Shift")
    user = get_for_org_or_404(User, parse_int(data["user_id"], "user_id"), "User")
    check_not_signed_up(user, shift)

    meals_served = parse_int(data.get("meals_served") or 0, "meals_served", minimum=0)
    signup = ShiftSignup(user, shift, meals_served=meals_served)
    signup.check_in = optional_datetime(data, "check_in")
    signup.check_out = optional_datetime(data, "check_out")
    db.session.add(signup)
    db.session.commit()
    return jsonify(signup.to_dict()), 201


@volunteer.route("/shiftsignups/<int:signup_id>", methods=["PUT"])
@login_required
def update_signup(signup_id):
    data = get_json()
    signup = get_signup_or_404(signup_id)

    if data.get("user_id"):
        user = get_for_org_or_404(User, parse_int(data["user_id"], "user_id"), "User")
        check_not_signed_up(user, signup.shift, signup)
        signup.user = user

    if "check_in" in data:
        signup.check_in = optional_datetime(data, "check_in")
    if "check_out" in data:
        signup.check_out = optional_datetime(data, "check_out")
    if "meals_served" in data:
        signup.meals_served = parse_int(data["meals_served"] or 0, "meals_served", minimum=0)

    db.session.commit()
    return jsonify(signup.to_dict())


@volunteer.route("/shiftsignups/<int:signup_id>", methods=["DELETE"])
@login_required
def delete_signup(signup_id):
    signup = get_signup_or_404(signup_id)
    db.session.delete(signup)
    db.session.commit()
    return jsonify({"success": True})


@volunteer.route("/shift-employees")
@login_required
def shift_employees():
    """Users on a shift and everyone in the organization who isn't."""
    shift = shift_from_args()

    scheduled = [{"id": s.user.id, "name": s.user.name, "signup_id": s.id} for s in shift.signups]
    scheduled_ids = {u["id"] for u in scheduled}
    unscheduled = [
        {"id": u.id, "name": u.name}
        for u in User.get_all(current_organization_id())
        if u.id not in scheduled_ids
    ]
    return jsonify(
        {
            "scheduled": scheduled,
            "unscheduled": unscheduled,
            "slots": shift.slots,
            "booked": len(scheduled),
        }
    )
