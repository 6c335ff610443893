""" Turning weekly recurring shifts into concrete shifts.

    A recurring shift is only a template. Scheduling people onto it
    creates (or reuses) the Shift for its next occurrence and signs the
    users up to that. Everything happens in one transaction and shifts
    are unique per occurrence, so repeating a call is harmless.
"""

import logging
from datetime import date, datetime, time, timedelta

from main import db
from models import RecurringShift, Shift, ShiftSignup, User, naive_utcnow

from apps.common import parse_int
from apps.common.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def weekday(d: date) -> int:
    """Day of the week with 0 as Sunday."""
    return d.isoweekday() % 7


def next_occurrence(day_of_week: int, today: date) -> date:
    """The next date falling on ``day_of_week``, strictly after today."""
    day_diff = (day_of_week - weekday(today) + 7) % 7 or 7
    return today + timedelta(days=day_diff)


def at(on: date, t: time) -> datetime:
    return datetime.combine(on, time(t.hour, t.minute))


def occurrence_times(recurring: RecurringShift, on: date) -> tuple[datetime, datetime]:
    return at(on, recurring.start_time), at(on, recurring.end_time)


def get_or_create_shift(recurring: RecurringShift, on: date) -> tuple[Shift, bool]:
    start, end = occurrence_times(recurring, on)
    shift = Shift.get_occurrence(
        recurring.organization_id,
        recurring.shift_category_id,
        recurring.name,
        start,
        end,
        recurring.location,
    )
    if shift is not None:
        return shift, False

    shift = Shift(
        organization_id=recurring.organization_id,
        shift_category_id=recurring.shift_category_id,
        name=recurring.name,
        start=start,
        end=end,
        location=recurring.location,
        slots=recurring.slots,
    )
    db.session.add(shift)
    db.session.flush()
    return shift, True


def materialize(organization_id: int, recurring_shift_id, user_ids, today: date | None = None) -> dict:
    """Sign ``user_ids`` up for the next occurrence of a recurring shift.

    Users already signed up are skipped. Returns the counts and the id of
    the shift used.
    """
    if not recurring_shift_id or not isinstance(user_ids, list) or not user_ids:
        raise ValidationError("recurring_shift_id and user_ids are required")

    recurring_shift_id = parse_int(recurring_shift_id, "recurring_shift_id")
    user_ids = [parse_int(u, "user_ids") for u in user_ids]

    recurring = db.session.get(RecurringShift, recurring_shift_id)
    if recurring is None or recurring.organization_id != organization_id:
        raise NotFoundError("Recurring shift not found")

    if today is None:
        today = naive_utcnow().date()

    shift, new_shift = get_or_create_shift(recurring, next_occurrence(recurring.day_of_week, today))

    created = skipped = 0
    for user_id in user_ids:
        user = db.session.get(User, user_id)
        if user is None or user.organization_id != organization_id:
            raise NotFoundError(f"User {user_id} not found")

        if ShiftSignup.get_for(user.id, shift.id) is not None:
            skipped += 1
            continue

        db.session.add(ShiftSignup(user=user, shift=shift))
        db.session.flush()
        created += 1

    db.session.commit()
    logger.info(
        "Scheduled %s for %s (%s shift %s): %s created, %s skipped",
        recurring,
        shift.start,
        "new" if new_shift else "existing",
        shift.id,
        created,
        skipped,
    )
    return {"success": True, "created": created, "skipped": skipped, "shift_id": shift.id}
