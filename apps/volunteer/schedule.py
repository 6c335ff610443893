from flask import jsonify
from flask_login import login_required

from apps.common import current_organization_id, get_json

from . import volunteer
from .recurrence import materialize


@volunteer.route("/schedule-shift", methods=["POST"])
@login_required
def schedule_shift():
    """Sign users up for the next occurrence of a recurring shift."""
    data = get_json()
    result = materialize(current_organization_id(), data.get("recurring_shift_id"), data.get("user_ids"))
    return jsonify(result)
