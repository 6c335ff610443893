""" Report builders.

    Each builder loads the facts for one organization and window, buckets
    them by reporting day and hands them to the pivot helpers. Weights
    stay in kilograms here; see ``units.convert_report``.
"""

from collections.abc import Callable
from dataclasses import dataclass

from sqlalchemy import func, select

from main import db
from models import (
    Donation,
    DonationCategory,
    DonationItem,
    Donor,
    Organization,
    Shift,
    ShiftCategory,
    ShiftSignup,
    User,
)

from .aggregation import HoursSession, Report, latest_dates, pivot, session_hours, user_hours, volunteer_hours
from .bucketing import ReportWindow, bucket_date

UNKNOWN_DONOR = "Unknown donor"


def category_names(organization_id: int) -> dict[int, str]:
    """Shift category id -> name, in creation order."""
    return {c.id: c.name for c in ShiftCategory.get_all(organization_id)}


def outgoing_stats(organization_id: int, window: ReportWindow) -> Report:
    """Meals served per reporting day and shift category. Every day with a
    shift in the window gets a row, whether or not anyone signed up."""
    names = category_names(organization_id)
    shifts = db.session.execute(
        select(Shift.id, Shift.start, Shift.shift_category_id)
        .where(Shift.organization_id == organization_id, *window.filter(Shift.start))
        .order_by(Shift.start)
    ).all()
    shift_info = {id: (bucket_date(start), names.get(category_id, "")) for id, start, category_id in shifts}

    signups = db.session.execute(
        select(ShiftSignup.shift_id, ShiftSignup.meals_served).where(
            ShiftSignup.shift_id.in_(list(shift_info))
        )
    ).all()
    facts = ((*shift_info[shift_id], meals or 0) for shift_id, meals in signups)

    columns = list(names.values())
    rows, totals = pivot(facts, columns, row_keys={date for date, _ in shift_info.values()})
    return Report(
        name="outgoing-stats",
        title="Outgoing Stats",
        columns=["Date", *columns, "Total"],
        rows=rows,
        totals=totals,
        grand_total=totals["Total"],
    )


def outgoing_shifts(organization_id: int, window: ReportWindow) -> Report:
    """Meals served per shift name within each category, with a subtotal
    line after each category."""
    names = category_names(organization_id)
    signups = db.session.execute(
        select(Shift.shift_category_id, Shift.name, ShiftSignup.meals_served)
        .select_from(ShiftSignup)
        .join(ShiftSignup.shift)
        .where(Shift.organization_id == organization_id, *window.filter(Shift.start))
        .order_by(Shift.start, Shift.id)
    ).all()

    meals: dict[int, dict[str, int]] = {}
    for category_id, shift_name, served in signups:
        by_name = meals.setdefault(category_id, {})
        by_name[shift_name] = by_name.get(shift_name, 0) + (served or 0)

    rows = []
    grand_total = 0
    for category_id, category in names.items():
        by_name = meals.get(category_id, {})
        for shift_name, total in by_name.items():
            rows.append({"Category": category, "Shift Name": shift_name, "Meals": total})
        category_total = sum(by_name.values())
        rows.append({"Category": category, "Shift Name": "Category Total", "Meals": category_total})
        grand_total += category_total

    return Report(
        name="outgoing-shifts",
        title="Outgoing Shifts",
        columns=["Category", "Shift Name", "Meals"],
        rows=rows,
        totals={"Category": "Total", "Shift Name": "", "Meals": grand_total},
        grand_total=grand_total,
        # Meals are recorded as kilograms of food served
        weight_columns=["Meals"],
    )


def volunteer_hours_report(organization_id: int, window: ReportWindow) -> Report:
    names = category_names(organization_id)
    signups = db.session.execute(
        select(
            ShiftSignup.user_id,
            ShiftSignup.check_in,
            ShiftSignup.check_out,
            Shift.start,
            Shift.end,
            Shift.shift_category_id,
        )
        .join(ShiftSignup.shift)
        .where(Shift.organization_id == organization_id, *window.filter(Shift.start))
    ).all()

    sessions = [
        HoursSession(
            date=bucket_date(start),
            category=names.get(category_id, ""),
            user_id=user_id,
            hours=session_hours(check_in, check_out, start, end),
        )
        for user_id, check_in, check_out, start, end, category_id in signups
    ]
    columns, rows, totals = volunteer_hours(sessions, list(names.values()))
    return Report(
        name="volunteer-hours",
        title="Volunteer Hours",
        columns=["Date", *columns, "Total Hours"],
        rows=rows,
        totals=totals,
        grand_total=totals["Total Hours"],
    )


def incoming_stats(organization_id: int, window: ReportWindow) -> Report:
    """Donated weight per reporting day and donor."""
    organization = db.session.get_one(Organization, organization_id)
    donations = db.session.execute(
        select(Donation.created_at, Donation.summary, Donor.name)
        .outerjoin(Donation.donor)
        .where(Donation.organization_id == organization_id, *window.filter(Donation.created_at))
        .order_by(Donation.created_at)
    ).all()

    columns = [d.name for d in Donor.get_all(organization_id)]
    if any(donor is None for _, _, donor in donations):
        columns.append(UNKNOWN_DONOR)

    facts = (
        (bucket_date(created_at), donor or UNKNOWN_DONOR, summary or 0)
        for created_at, summary, donor in donations
    )
    rows, totals = pivot(facts, columns, totals_label="Monthly Total")

    value = organization.incoming_dollar_value or 0
    donor_totals = {
        donor: {"weight": totals[donor], "value": round(totals[donor] * value, 2)} for donor in columns
    }
    return Report(
        name="incoming-stats",
        title="Incoming Stats",
        columns=["Date", *columns, "Total"],
        rows=rows,
        totals=totals,
        grand_total=totals["Total"],
        weight_columns=[*columns, "Total"],
        extras={
            "donor_totals": donor_totals,
            "incoming_dollar_value": value,
            "grand_total_value": round(totals["Total"] * value, 2),
        },
    )


def donation_items(organization_id: int, window: ReportWindow):
    return (
        select(DonationItem.weight_kg, DonationCategory.name, Donation.created_at, Donor.name)
        .join(DonationItem.donation)
        .join(DonationItem.category)
        .outerjoin(Donation.donor)
        .where(Donation.organization_id == organization_id, *window.filter(Donation.created_at))
    )


def inventory_categories(organization_id: int, window: ReportWindow) -> Report:
    """Total weight and latest reporting day per donation category. Only
    categories with stock are listed."""
    items = db.session.execute(donation_items(organization_id, window)).all()

    weights: dict[str, float] = {}
    for weight, category, _, _ in items:
        weights[category] = weights.get(category, 0) + (weight or 0)
    last_dates = latest_dates((category, bucket_date(created_at)) for _, category, created_at, _ in items)

    rows = [
        {"Category": c.name, "Weight": weights[c.name], "Last Donation": last_dates.get(c.name)}
        for c in DonationCategory.get_all(organization_id)
        if weights.get(c.name, 0) > 0
    ]
    total = sum(r["Weight"] for r in rows)
    return Report(
        name="inventory-categories",
        title="Inventory",
        columns=["Category", "Weight", "Last Donation"],
        rows=rows,
        totals={"Category": "Total", "Weight": total, "Last Donation": ""},
        grand_total=total,
        weight_columns=["Weight"],
    )


def inventory_table(organization_id: int, window: ReportWindow) -> Report:
    """Donated weight per donor and donation category."""
    items = db.session.execute(donation_items(organization_id, window)).all()
    columns = [c.name for c in DonationCategory.get_all(organization_id)]
    donors = [d.name for d in Donor.get_all(organization_id)]

    # Items from anonymous donations have no row to land in
    facts = ((donor, category, weight or 0) for weight, category, _, donor in items if donor is not None)
    rows, totals = pivot(facts, columns, row_keys=donors, label="Donor")
    return Report(
        name="inventory-table",
        title="Inventory by Donor",
        columns=["Donor", *columns, "Total"],
        rows=rows,
        totals=totals,
        grand_total=totals["Total"],
        weight_columns=[*columns, "Total"],
    )


def volunteer_summary(organization_id: int, window: ReportWindow) -> Report:
    signups = db.session.execute(
        select(
            User.id,
            User.first_name,
            User.last_name,
            User.role,
            ShiftSignup.check_in,
            ShiftSignup.check_out,
        )
        .select_from(ShiftSignup)
        .join(ShiftSignup.user)
        .join(ShiftSignup.shift)
        .where(Shift.organization_id == organization_id, *window.filter(Shift.start))
        .order_by(ShiftSignup.id)
    ).all()

    rows = user_hours(
        (id, f"{first} {last}".strip(), str(role), check_in, check_out)
        for id, first, last, role, check_in, check_out in signups
    )
    total = round(sum(r["Hours"] for r in rows), 2)
    return Report(
        name="volunteer-summary",
        title="Volunteer Summary",
        columns=["Name", "Role", "Hours"],
        rows=rows,
        totals={"Name": "Total", "Role": "", "Hours": total},
        grand_total=total,
    )


def dashboard_summary(organization_id: int, window: ReportWindow) -> dict:
    donations = db.session.execute(
        select(func.count(Donation.id), func.coalesce(func.sum(Donation.summary), 0)).where(
            Donation.organization_id == organization_id, *window.filter(Donation.created_at)
        )
    ).one()

    shift_count = db.session.scalar(
        select(func.count(Shift.id)).where(Shift.organization_id == organization_id, *window.filter(Shift.start))
    )

    signups = db.session.execute(
        select(ShiftSignup.user_id, ShiftSignup.meals_served, ShiftSignup.check_in, ShiftSignup.check_out)
        .join(ShiftSignup.shift)
        .where(Shift.organization_id == organization_id, *window.filter(Shift.start))
    ).all()
    worked = sum(
        (check_out - check_in).total_seconds() / 3600
        for _, _, check_in, check_out in signups
        if check_in and check_out
    )

    items = db.session.execute(
        select(func.count(DonationItem.id), func.coalesce(func.sum(DonationItem.weight_kg), 0))
        .join(DonationItem.donation)
        .where(Donation.organization_id == organization_id, *window.filter(Donation.created_at))
    ).one()

    return {
        "incoming": {"total_donations": donations[0], "total_weight": round(donations[1], 2)},
        "outgoing": {
            "total_meals": sum(meals or 0 for _, meals, _, _ in signups),
            "total_shifts": shift_count,
        },
        "volunteers": {
            "total_hours": round(worked, 2),
            "total_volunteers": len({user_id for user_id, _, _, _ in signups}),
        },
        "inventory": {"total_items": items[0], "total_weight": round(items[1], 2)},
    }


@dataclass(frozen=True)
class ReportType:
    build: Callable[[int, ReportWindow], Report]
    year_required: bool = True
    # Whether the report carries weights that honour the ``unit`` parameter
    weighted: bool = False


REPORTS: dict[str, ReportType] = {
    "outgoing-stats": ReportType(outgoing_stats),
    "outgoing-shifts": ReportType(outgoing_shifts, weighted=True),
    "volunteer-hours": ReportType(volunteer_hours_report),
    "incoming-stats": ReportType(incoming_stats, weighted=True),
    "inventory-categories": ReportType(inventory_categories, year_required=False, weighted=True),
    "inventory-table": ReportType(inventory_table, weighted=True),
    "volunteer-summary": ReportType(volunteer_summary),
}
