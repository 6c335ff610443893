""" Volunteer system CLI tasks """
import click
from flask import current_app as app

from apps.common.errors import APIError
from main import db
from models import RecurringShift

from . import volunteer
from .recurrence import materialize


@volunteer.cli.command("schedule")
@click.argument("recurring_id", type=int)
@click.argument("user_ids", type=int, nargs=-1, required=True)
def schedule(recurring_id, user_ids):
    """Sign users up for the next occurrence of a recurring shift"""
    recurring = db.session.get(RecurringShift, recurring_id)
    if recurring is None:
        raise click.ClickException(f"Recurring shift {recurring_id} not found")

    try:
        result = materialize(recurring.organization_id, recurring_id, list(user_ids))
    except APIError as e:
        raise click.ClickException(e.description) from e

    app.logger.info(
        "Shift %s: %s signups created, %s skipped", result["shift_id"], result["created"], result["skipped"]
    )
