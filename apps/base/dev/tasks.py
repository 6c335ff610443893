""" Development CLI tasks """
import click
from flask import current_app as app

from main import db

from . import dev_cli
from .fake import FakeDataGenerator


@dev_cli.command("createdb")
def create_db():
    """Create all tables without running migrations"""
    db.create_all()
    app.logger.info("Created tables")


@dev_cli.command("data")
@click.option("--organization", default="Demo Kitchen", help="Name of the demo organization")
@click.option("--days", default=90, help="Days of shifts and donations to generate")
def dev_data(organization, days):
    """Make a demo organization full of fake data"""
    FakeDataGenerator(organization, days).run()
    app.logger.info("Created fake data for %s", organization)
