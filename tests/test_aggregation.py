from datetime import datetime, timedelta

import pytest

from apps.reports.aggregation import (
    HoursSession,
    hours_columns,
    latest_dates,
    pivot,
    session_hours,
    user_hours,
    volunteer_hours,
)

START = datetime(2024, 6, 14, 15, 0)


def minutes(n):
    return START + timedelta(minutes=n)


def test_short_sessions_count_as_an_hour():
    assert session_hours(START, minutes(10), None, None) == 1
    assert session_hours(START, minutes(20), None, None) == 1
    assert session_hours(START, minutes(120), None, None) == 2


def test_empty_sessions_count_nothing():
    assert session_hours(START, START, None, None) == 0
    assert session_hours(minutes(30), START, None, None) == 0
    assert session_hours(None, None, None, None) == 0


def test_session_falls_back_to_shift_times():
    assert session_hours(None, None, START, minutes(90)) == 1.5
    assert session_hours(minutes(30), None, START, minutes(180)) == 2.5


def test_longest_session_wins():
    sessions = [
        HoursSession("2024-06-15", "Morning", 1, session_hours(START, minutes(20), None, None)),
        HoursSession("2024-06-15", "Morning", 1, session_hours(START, minutes(120), None, None)),
    ]
    columns, rows, totals = volunteer_hours(sessions, ["Morning"])
    assert columns == ["Morning"]
    assert rows == [{"Date": "2024-06-15", "Morning": 2, "Total Hours": 2}]
    assert totals["Total Hours"] == 2


def test_single_short_session():
    sessions = [HoursSession("2024-06-15", "Morning", 1, session_hours(START, minutes(10), None, None))]
    _, rows, _ = volunteer_hours(sessions, ["Morning"])
    assert rows[0]["Morning"] == 1


def test_hours_sum_across_volunteers():
    sessions = [
        HoursSession("2024-06-15", "Morning", 1, 2),
        HoursSession("2024-06-15", "Morning", 2, 3),
        HoursSession("2024-06-16", "Evening", 1, 1.5),
    ]
    _, rows, totals = volunteer_hours(sessions, ["Morning", "Evening"])
    assert rows == [
        {"Date": "2024-06-15", "Morning": 5, "Evening": 0, "Total Hours": 5},
        {"Date": "2024-06-16", "Morning": 0, "Evening": 1.5, "Total Hours": 1.5},
    ]
    assert totals == {"Date": "Total", "Morning": 5, "Evening": 1.5, "Total Hours": 6.5}


def test_collection_categories_fold_together():
    assert hours_columns(["Morning", "Food Collection", "Evening", "grocery collection"]) == [
        "Morning",
        "Collection",
        "Evening",
    ]

    sessions = [
        HoursSession("2024-06-15", "Food Collection", 1, 2),
        HoursSession("2024-06-15", "Grocery Collection", 2, 3),
    ]
    columns, rows, _ = volunteer_hours(sessions, ["Food Collection", "Grocery Collection"])
    assert columns == ["Collection"]
    assert rows == [{"Date": "2024-06-15", "Collection": 5, "Total Hours": 5}]


def test_same_volunteer_in_two_collections_counts_once():
    sessions = [
        HoursSession("2024-06-15", "Food Collection", 1, 2),
        HoursSession("2024-06-15", "Grocery Collection", 1, 3),
    ]
    _, rows, _ = volunteer_hours(sessions, ["Food Collection", "Grocery Collection"])
    assert rows[0]["Collection"] == 3


def test_pivot_includes_empty_rows_and_drops_unknown_columns():
    facts = [("2024-06-02", "A", 1), ("2024-06-01", "B", 2), ("2024-06-01", "A", 3), ("2024-06-01", "Z", 100)]
    rows, totals = pivot(facts, ["A", "B"], row_keys=["2024-06-03"])
    assert rows == [
        {"Date": "2024-06-01", "A": 3, "B": 2, "Total": 5},
        {"Date": "2024-06-02", "A": 1, "B": 0, "Total": 1},
        {"Date": "2024-06-03", "A": 0, "B": 0, "Total": 0},
    ]
    assert totals == {"Date": "Total", "A": 4, "B": 2, "Total": 6}


def test_pivot_with_no_facts():
    rows, totals = pivot([], ["A"], totals_label="Monthly Total")
    assert rows == []
    assert totals == {"Date": "Monthly Total", "A": 0, "Total": 0}


def test_pivot_counts_a_repeated_column_once():
    facts = [("2024-06-15", "Alpha", 10), ("2024-06-15", "Alpha", 5)]
    rows, totals = pivot(facts, ["Alpha", "Alpha"])
    assert rows == [{"Date": "2024-06-15", "Alpha": 15, "Total": 15}]
    assert totals == {"Date": "Total", "Alpha": 15, "Total": 15}


def test_pivot_refuses_columns_named_like_its_keys():
    with pytest.raises(ValueError):
        pivot([("2024-03-02", "Date", 9)], ["Date"])
    with pytest.raises(ValueError):
        pivot([("2024-03-02", "Total", 9)], ["Total"])
    with pytest.raises(ValueError):
        pivot([], ["Donor"], label="Donor")


def test_user_hours():
    rows = user_hours(
        [
            (1, "Alice", "VOLUNTEER", START, minutes(20)),
            (2, "Bob", "STAFF", START, minutes(180)),
            (1, "Alice", "VOLUNTEER", START, None),
            (3, "Carol", "VOLUNTEER", None, None),
        ]
    )
    assert rows == [
        {"Name": "Bob", "Role": "STAFF", "Hours": 3.0},
        {"Name": "Alice", "Role": "VOLUNTEER", "Hours": 0.33},
        {"Name": "Carol", "Role": "VOLUNTEER", "Hours": 0.0},
    ]


def test_latest_dates():
    assert latest_dates([("A", "2024-06-01"), ("B", "2024-05-01"), ("A", "2024-06-03"), ("A", "2024-06-02")]) == {
        "A": "2024-06-03",
        "B": "2024-05-01",
    }
