from datetime import datetime
from io import BytesIO

import pytest
from openpyxl import load_workbook

from apps.reports.xlsx import XLSX_MIMETYPE
from models import (
    Donation,
    DonationCategory,
    DonationItem,
    Donor,
    Shift,
    ShiftCategory,
    ShiftSignup,
    User,
    WeighingCategory,
)

JUNE = {"year": "2024", "month": "6"}


@pytest.fixture(scope="module")
def data(db, org, user):
    """June 2024 for a kitchen with morning and evening meal shifts."""
    org.incoming_dollar_value = 2.0
    morning = ShiftCategory(organization=org, name="Morning")
    evening = ShiftCategory(organization=org, name="Evening")
    alice = User("alice@example.com", "Alice", "Volunteer", organization=org)
    bob = User("bob@example.com", "Bob", "Volunteer", organization=org)

    def shift(category, name, start, end):
        return Shift(organization=org, category=category, name=name, start=start, end=end, location="Hall", slots=3)

    breakfast = shift(morning, "Breakfast", datetime(2024, 6, 14, 15, 0), datetime(2024, 6, 14, 17, 0))
    supper = shift(evening, "Supper", datetime(2024, 6, 14, 22, 0), datetime(2024, 6, 14, 23, 0))
    # No one signed up for this one
    late_supper = shift(evening, "Supper", datetime(2024, 6, 20, 23, 30), datetime(2024, 6, 21, 0, 30))
    july = shift(morning, "Breakfast", datetime(2024, 7, 2, 15, 0), datetime(2024, 7, 2, 16, 0))
    db.session.add_all([breakfast, supper, late_supper, july])

    two_hours = ShiftSignup(alice, breakfast, meals_served=10)
    two_hours.check_in, two_hours.check_out = datetime(2024, 6, 14, 15, 0), datetime(2024, 6, 14, 17, 0)
    twenty_minutes = ShiftSignup(bob, breakfast, meals_served=5)
    twenty_minutes.check_in, twenty_minutes.check_out = datetime(2024, 6, 14, 15, 0), datetime(2024, 6, 14, 15, 20)
    db.session.add_all(
        [two_hours, twenty_minutes, ShiftSignup(alice, supper, meals_served=7), ShiftSignup(bob, july, meals_served=100)]
    )

    alpha = Donor(organization=org, name="Alpha Farms")
    beta = Donor(organization=org, name="Beta Market")
    produce = DonationCategory(organization=org, name="Produce")
    dairy = DonationCategory(organization=org, name="Dairy")
    db.session.add_all([alpha, beta, produce, dairy])
    db.session.flush()

    def donation(donor, created_at, *items):
        d = Donation(
            organization=org,
            donor=donor,
            created_at=created_at,
            items=[DonationItem(category=c, weight_kg=w) for c, w in items],
            summary=sum(w for _, w in items),
        )
        db.session.add(d)

    donation(alpha, datetime(2024, 6, 14, 15, 0), (produce, 6), (dairy, 4))
    # Still the 13th in Halifax
    donation(beta, datetime(2024, 6, 14, 2, 0), (produce, 5))
    donation(None, datetime(2024, 6, 20, 12, 0), (dairy, 2))
    donation(alpha, datetime(2024, 7, 3, 15, 0), (produce, 50))

    weighing = WeighingCategory(organization=org, category="Banana box")
    weighing.set_weight(20, "kg")
    db.session.add(weighing)

    db.session.commit()


def get_report(client, auth_headers, name, **args):
    rv = client.get(f"/api/reports/{name}", query_string=args, headers=auth_headers)
    assert rv.status_code == 200, rv.json
    return rv.json


def test_outgoing_stats(client, auth_headers, data):
    report = get_report(client, auth_headers, "outgoing-stats", **JUNE)
    assert report["columns"] == ["Date", "Morning", "Evening", "Total"]
    assert report["rows"] == [
        {"Date": "2024-06-15", "Morning": 15, "Evening": 7, "Total": 22},
        {"Date": "2024-06-21", "Morning": 0, "Evening": 0, "Total": 0},
    ]
    assert report["totals"] == {"Date": "Total", "Morning": 15, "Evening": 7, "Total": 22}
    assert report["grand_total"] == 22


def test_outgoing_stats_for_the_year(client, auth_headers, data):
    report = get_report(client, auth_headers, "outgoing-stats", year="2024")
    assert [r["Date"] for r in report["rows"]] == ["2024-06-15", "2024-06-21", "2024-07-03"]
    assert report["grand_total"] == 122


def test_outgoing_stats_empty_window(client, auth_headers, data):
    report = get_report(client, auth_headers, "outgoing-stats", year="2023", month="6")
    assert report["rows"] == []
    assert report["grand_total"] == 0


def test_outgoing_shifts(client, auth_headers, data):
    report = get_report(client, auth_headers, "outgoing-shifts", **JUNE)
    assert report["rows"] == [
        {"Category": "Morning", "Shift Name": "Breakfast", "Meals": 15},
        {"Category": "Morning", "Shift Name": "Category Total", "Meals": 15},
        {"Category": "Evening", "Shift Name": "Supper", "Meals": 7},
        {"Category": "Evening", "Shift Name": "Category Total", "Meals": 7},
    ]
    assert report["grand_total"] == 22


def test_outgoing_shifts_in_other_units(client, auth_headers, data):
    report = get_report(client, auth_headers, "outgoing-shifts", unit="lb", **JUNE)
    assert report["unit"] == "lb"
    assert [r["Meals"] for r in report["rows"]] == [33.07, 33.07, 15.43, 15.43]
    assert report["grand_total"] == 48.5

    report = get_report(client, auth_headers, "outgoing-shifts", unit="Banana box", **JUNE)
    assert report["unit"] == "Banana box"
    assert [r["Meals"] for r in report["rows"]] == [0.75, 0.75, 0.35, 0.35]
    assert report["totals"]["Meals"] == 1.1


def test_volunteer_hours(client, auth_headers, data):
    report = get_report(client, auth_headers, "volunteer-hours", **JUNE)
    assert report["columns"] == ["Date", "Morning", "Evening", "Total Hours"]
    # Bob's 20 minutes count as an hour, Alice's supper uses the shift times
    assert report["rows"] == [{"Date": "2024-06-15", "Morning": 3, "Evening": 1, "Total Hours": 4}]


def test_volunteer_summary(client, auth_headers, data):
    report = get_report(client, auth_headers, "volunteer-summary", **JUNE)
    assert report["rows"] == [
        {"Name": "Alice Volunteer", "Role": "VOLUNTEER", "Hours": 2.0},
        {"Name": "Bob Volunteer", "Role": "VOLUNTEER", "Hours": 0.33},
    ]
    assert report["grand_total"] == 2.33


def test_incoming_stats(client, auth_headers, data):
    report = get_report(client, auth_headers, "incoming-stats", **JUNE)
    assert report["columns"] == ["Date", "Alpha Farms", "Beta Market", "Unknown donor", "Total"]
    assert report["rows"] == [
        {"Date": "2024-06-14", "Alpha Farms": 0, "Beta Market": 5, "Unknown donor": 0, "Total": 5},
        {"Date": "2024-06-15", "Alpha Farms": 10, "Beta Market": 0, "Unknown donor": 0, "Total": 10},
        {"Date": "2024-06-21", "Alpha Farms": 0, "Beta Market": 0, "Unknown donor": 2, "Total": 2},
    ]
    assert report["totals"]["Date"] == "Monthly Total"
    assert report["grand_total"] == 17
    assert report["unit"] == "kg"
    assert report["donor_totals"]["Alpha Farms"] == {"weight": 10, "value": 20.0}
    assert report["grand_total_value"] == 34.0


def test_incoming_stats_in_pounds(client, auth_headers, data):
    report = get_report(client, auth_headers, "incoming-stats", unit="Pounds (lb)", **JUNE)
    assert report["unit"] == "lb"
    assert report["totals"]["Alpha Farms"] == 22.05
    assert report["totals"]["Unknown donor"] == 4.41
    assert report["grand_total"] == 37.48


def test_inventory_categories_all_time(client, auth_headers, data):
    report = get_report(client, auth_headers, "inventory-categories")
    assert report["rows"] == [
        {"Category": "Produce", "Weight": 61, "Last Donation": "2024-07-04"},
        {"Category": "Dairy", "Weight": 6, "Last Donation": "2024-06-21"},
    ]
    assert report["grand_total"] == 67


def test_inventory_table(client, auth_headers, data):
    report = get_report(client, auth_headers, "inventory-table", **JUNE)
    assert report["columns"] == ["Donor", "Produce", "Dairy", "Total"]
    assert report["rows"] == [
        {"Donor": "Alpha Farms", "Produce": 6, "Dairy": 4, "Total": 10},
        {"Donor": "Beta Market", "Produce": 5, "Dairy": 0, "Total": 5},
    ]
    assert report["grand_total"] == 15


def test_inventory_table_in_custom_unit(client, auth_headers, data):
    report = get_report(client, auth_headers, "inventory-table", unit="Banana box", **JUNE)
    assert report["unit"] == "Banana box"
    assert report["rows"][0]["Total"] == 0.5


def test_dashboard_summary(client, auth_headers, data):
    rv = client.get("/api/dashboard-summary", query_string=JUNE, headers=auth_headers)
    assert rv.status_code == 200
    assert rv.json == {
        "incoming": {"total_donations": 3, "total_weight": 17},
        "outgoing": {"total_meals": 22, "total_shifts": 3},
        "volunteers": {"total_hours": 2.33, "total_volunteers": 2},
        "inventory": {"total_items": 4, "total_weight": 17},
    }


def test_export(client, auth_headers, data):
    rv = client.get("/api/reports/outgoing-stats/export", query_string=JUNE, headers=auth_headers)
    assert rv.status_code == 200
    assert rv.mimetype == XLSX_MIMETYPE
    assert rv.headers["Content-Disposition"] == 'attachment; filename="outgoing-stats-2024-6.xlsx"'

    ws = load_workbook(BytesIO(rv.data)).active
    rows = list(ws.iter_rows(values_only=True))
    assert rows[0] == ("Date", "Morning", "Evening", "Total")
    assert rows[1] == ("2024-06-15", 15, 7, 22)
    assert rows[-1] == ("Total", 15, 7, 22)
    assert ws["A1"].font.bold


def test_export_volunteer_hours_has_totals(client, auth_headers, data):
    rv = client.get("/api/reports/volunteer-hours/export", query_string=JUNE, headers=auth_headers)
    ws = load_workbook(BytesIO(rv.data)).active
    assert list(ws.iter_rows(values_only=True))[-1] == ("Total", 3, 1, 4)


def test_year_is_required(client, auth_headers, data):
    rv = client.get("/api/reports/outgoing-stats", query_string={"month": "6"}, headers=auth_headers)
    assert rv.status_code == 400
    assert rv.json == {"error": "Year is required"}

    rv = client.get("/api/dashboard-summary", headers=auth_headers)
    assert rv.status_code == 400


def test_unknown_report(client, auth_headers):
    rv = client.get("/api/reports/nonsense", query_string=JUNE, headers=auth_headers)
    assert rv.status_code == 404
    assert rv.json == {"error": "Report not found"}


def test_reports_need_a_token(client):
    rv = client.get("/api/reports/outgoing-stats", query_string=JUNE)
    assert rv.status_code == 401
    assert rv.json == {"error": "Authentication required"}
