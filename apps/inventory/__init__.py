""" Donors, donations and the units they are weighed in. """
from flask import Blueprint

inventory = Blueprint("inventory", __name__)


from . import (
    donations,  # noqa: F401
    weighing,  # noqa: F401
)
