""" User CLI tasks """
import click
from flask import current_app as app

from models import User

from . import users_cli


@users_cli.command("token")
@click.argument("email")
def token(email):
    """Print a bearer token for a user"""
    user = User.get_by_email(email)
    if user is None:
        raise click.ClickException(f"No user with email {email}")

    click.echo(user.generate_api_token(app.config["SECRET_KEY"], app.config.get("TOKEN_EXPIRY_DAYS", 7)))
