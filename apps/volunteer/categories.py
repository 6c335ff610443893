from flask import jsonify
from flask_login import login_required

from apps.common import (
    check_not_reserved,
    current_organization_id,
    get_for_org_or_404,
    get_json,
    require_fields,
)
from apps.common.errors import ConflictError, ValidationError
from main import db
from models import ShiftCategory

from . import volunteer


def check_category_name(name: str, category: ShiftCategory | None = None):
    check_not_reserved(name)
    existing = ShiftCategory.get_by_name(current_organization_id(), name)
    if existing is not None and existing is not category:
        raise ConflictError("Category with this name already exists")


@volunteer.route("/shift-categories")
@login_required
def list_categories():
    return jsonify([c.to_dict() for c in ShiftCategory.get_all(current_organization_id())])


@volunteer.route("/shift-categories", methods=["POST"])
@login_required
def create_category():
    data = get_json()
    require_fields(data, "name")
    check_category_name(data["name"])

    category = ShiftCategory(
        organization_id=current_organization_id(), name=data["name"], icon=data.get("icon")
    )
    db.session.add(category)
    db.session.commit()
    return jsonify(category.to_dict()), 201


@volunteer.route("/shift-categories/<int:category_id>", methods=["PUT"])
@login_required
def update_category(category_id):
    data = get_json()
    require_fields(data, "name")
    category = get_for_org_or_404(ShiftCategory, category_id, "Category")
    check_category_name(data["name"], category)

    category.name = data["name"]
    category.icon = data.get("icon", category.icon)
    db.session.commit()
    return jsonify(category.to_dict())


@volunteer.route("/shift-categories/<int:category_id>", methods=["DELETE"])
@login_required
def delete_category(category_id):
    category = get_for_org_or_404(ShiftCategory, category_id, "Category")
    if category.is_in_use():
        raise ValidationError("Cannot delete category that is in use by shifts or recurring shifts")

    db.session.delete(category)
    db.session.commit()
    return jsonify({"success": True})
