from flask import Blueprint

volunteer = Blueprint("volunteer", __name__)


from . import (
    categories,  # noqa: F401
    recurring,  # noqa: F401
    schedule,  # noqa: F401
    shifts,  # noqa: F401
    signups,  # noqa: F401
    tasks,  # noqa: F401
)
