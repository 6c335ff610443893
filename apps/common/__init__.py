from datetime import datetime, time
from typing import TypeVar

import pytz
from dateutil.parser import ParserError, parse
from flask import request
from flask_login import current_user

from main import db

from .errors import NotFoundError, ValidationError


# Labels used as row and total keys in report tables
RESERVED_NAMES = frozenset({"Date", "Donor", "Total", "Total Hours"})

M = TypeVar("M")


def check_not_reserved(name: str):
    """Category and donor names become report columns, so they can't
    shadow the report's own keys."""
    if isinstance(name, str) and name in RESERVED_NAMES:
        raise ValidationError(f'"{name}" is a reserved name')


def current_organization_id() -> int:
    return current_user.organization_id


def get_json() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def require_fields(data: dict, *fields: str):
    """Raise a ValidationError flagging every missing or empty field."""
    missing = {f: True for f in fields if data.get(f) in (None, "", [])}
    if missing:
        raise ValidationError("Missing required fields", details=missing)


def get_for_org_or_404(model: type[M], id, name: str | None = None) -> M:
    """Load a tenant-scoped record, treating records owned by another
    organization as missing."""
    obj = db.session.get(model, id)
    if obj is None or obj.organization_id != current_organization_id():
        raise NotFoundError(f"{name or model.__name__} not found")
    return obj


def parse_int(value, field: str, minimum: int | None = None, maximum: int | None = None) -> int:
    try:
        result = int(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"{field} must be an integer") from e

    if minimum is not None and maximum is not None:
        if not minimum <= result <= maximum:
            raise ValidationError(f"{field} must be between {minimum} and {maximum}")
    elif minimum is not None and result < minimum:
        raise ValidationError(f"{field} must be at least {minimum}")
    elif maximum is not None and result > maximum:
        raise ValidationError(f"{field} must be at most {maximum}")
    return result


def parse_float(value, field: str) -> float:
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"{field} must be a number") from e


def parse_datetime(value, field: str) -> datetime:
    """Parse an ISO-ish timestamp into naive UTC."""
    if isinstance(value, datetime):
        dt = value
    else:
        try:
            dt = parse(str(value))
        except (ParserError, OverflowError) as e:
            raise ValidationError(f"{field} is not a valid date") from e

    if dt.tzinfo is not None:
        dt = dt.astimezone(pytz.utc).replace(tzinfo=None)
    return dt


def parse_time(value, field: str) -> time:
    """Accept "HH:MM" or a full timestamp; only the time of day is kept."""
    return parse_datetime(value, field).time().replace(second=0, microsecond=0)

