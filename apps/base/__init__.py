from flask import Blueprint, jsonify
from sqlalchemy import text

from main import db

base = Blueprint("base", __name__, cli_group=None)


@base.route("/api/health")
def health():
    db.session.execute(text("SELECT 1"))
    return jsonify({"status": "ok"})


from . import dev  # noqa: F401
