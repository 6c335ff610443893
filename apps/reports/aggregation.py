""" Pivot tables over bucketed facts.

    Nothing in here touches the database: builders turn rows from the
    store into plain facts, and these functions group and total them.
"""

import math
from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime

COLLECTION = "Collection"


@dataclass
class Report:
    """A rendered-agnostic table. ``weight_columns`` lists the columns
    holding kilograms, which are converted to the requested unit when
    the report is rendered."""

    name: str
    title: str
    columns: list[str]
    rows: list[dict]
    totals: dict | None = None
    grand_total: float = 0
    weight_columns: list[str] = field(default_factory=list)
    extras: dict = field(default_factory=dict)


def pivot(
    facts: Iterable[tuple[str, str, float]],
    columns: list[str],
    row_keys: Iterable[str] = (),
    label: str = "Date",
    total_column: str = "Total",
    totals_label: str = "Total",
) -> tuple[list[dict], dict]:
    """Sum ``(row_key, column, value)`` facts into one row per key.

    Rows are sorted by key. ``row_keys`` are included even when no fact
    lands on them. Facts for columns not listed are dropped, and a column
    listed twice is only counted once.
    """
    columns = list(dict.fromkeys(columns))
    clashes = {label, total_column} & set(columns)
    if clashes:
        raise ValueError(f"Column names {sorted(clashes)} clash with the row label or total")

    cells: dict[str, dict[str, float]] = {key: {} for key in row_keys}
    wanted = set(columns)
    for key, column, value in facts:
        row = cells.setdefault(key, {})
        if column in wanted:
            row[column] = row.get(column, 0) + value

    rows = []
    for key in sorted(cells):
        row = {label: key}
        for column in columns:
            row[column] = cells[key].get(column, 0)
        row[total_column] = sum(row[c] for c in columns)
        rows.append(row)

    totals = {label: totals_label}
    for column in [*columns, total_column]:
        totals[column] = sum(r[column] for r in rows)

    return rows, totals


def session_hours(
    check_in: datetime | None,
    check_out: datetime | None,
    shift_start: datetime | None,
    shift_end: datetime | None,
) -> float:
    """Billable hours for one signup.

    Missing check-in/out fall back to the shift's scheduled times. Anything
    under an hour counts as a full hour; non-positive durations count as 0.
    """
    start = check_in or shift_start
    end = check_out or shift_end
    if start is None or end is None:
        return 0

    hours = (end - start).total_seconds() / 3600
    if math.isnan(hours) or hours <= 0:
        return 0
    return max(hours, 1)


def is_collection(category: str) -> bool:
    return "collection" in category.lower()


def hours_column(category: str) -> str:
    return COLLECTION if is_collection(category) else category


def hours_columns(categories: Iterable[str]) -> list[str]:
    """Category columns for the hours table, with every collection
    category merged into one column where the first of them sits."""
    columns: list[str] = []
    for category in categories:
        column = hours_column(category)
        if column not in columns:
            columns.append(column)
    return columns


@dataclass(frozen=True)
class HoursSession:
    date: str
    category: str
    user_id: int
    hours: float


def volunteer_hours(
    sessions: Iterable[HoursSession], categories: list[str]
) -> tuple[list[str], list[dict], dict]:
    """Per day and category, each volunteer contributes their longest
    session, not the sum of their sessions."""
    longest: dict[tuple[str, str, int], float] = defaultdict(float)
    for s in sessions:
        key = (s.date, hours_column(s.category), s.user_id)
        longest[key] = max(longest[key], s.hours)

    columns = hours_columns(categories)
    facts = ((date, column, hours) for (date, column, _), hours in longest.items())
    rows, totals = pivot(facts, columns, total_column="Total Hours")

    for row in [*rows, totals]:
        for column in [*columns, "Total Hours"]:
            row[column] = round(row[column], 2)

    return columns, rows, totals


def user_hours(signups: Iterable[tuple[int, str, str, datetime | None, datetime | None]]) -> list[dict]:
    """Hours worked per user from ``(user_id, name, role, check_in, check_out)``.

    Only signups with both a check-in and a check-out count. Sorted by
    hours, most first.
    """
    users: dict[int, dict] = {}
    for user_id, name, role, check_in, check_out in signups:
        entry = users.setdefault(user_id, {"Name": name, "Role": role, "Hours": 0.0})
        if check_in and check_out:
            entry["Hours"] += (check_out - check_in).total_seconds() / 3600

    result = [{**entry, "Hours": round(entry["Hours"], 2)} for entry in users.values()]
    return sorted(result, key=lambda e: e["Hours"], reverse=True)


def latest_dates(facts: Iterable[tuple[str, str]]) -> dict[str, str]:
    """Latest date key per category from ``(category, date)`` pairs."""
    latest: dict[str, str] = {}
    for category, date in facts:
        if category not in latest or date > latest[category]:
            latest[category] = date
    return latest
