""" Organizations (tenants) and the users that belong to them. """
from flask import Blueprint
from flask.cli import AppGroup

organizations = Blueprint("organizations", __name__, cli_group=None)

users_cli = AppGroup("users")
organizations.cli.add_command(users_cli)


from . import (
    orgs,  # noqa: F401
    tasks,  # noqa: F401
    users,  # noqa: F401
)
