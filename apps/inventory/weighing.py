from flask import jsonify
from flask_login import login_required

from apps.common import current_organization_id, get_for_org_or_404, get_json, parse_float
from apps.common.errors import ConflictError, ValidationError
from main import db
from models import WeighingCategory

from . import inventory


def update_from_json(weighing: WeighingCategory, data: dict):
    if not data.get("category"):
        raise ValidationError("Category name is required")

    weight = parse_float(data.get("weight"), "weight")
    if weight <= 0:
        raise ValidationError("Valid weight value is required")

    existing = WeighingCategory.get_by_name(current_organization_id(), data["category"])
    if existing is not None and existing is not weighing:
        raise ConflictError("Category with this name already exists")

    try:
        weighing.set_weight(weight, data.get("unit"))
    except ValueError as e:
        raise ValidationError(str(e)) from e
    weighing.category = data["category"]


@inventory.route("/weighing-categories")
@login_required
def list_weighing_categories():
    return jsonify([w.to_dict() for w in WeighingCategory.get_all(current_organization_id())])


@inventory.route("/weighing-categories", methods=["POST"])
@login_required
def create_weighing_category():
    weighing = WeighingCategory(organization_id=current_organization_id())
    update_from_json(weighing, get_json())
    db.session.add(weighing)
    db.session.commit()
    return jsonify(weighing.to_dict()), 201


@inventory.route("/weighing-categories/stats")
@login_required
def weighing_stats():
    categories = WeighingCategory.get_all(current_organization_id())
    recent = sorted(categories, key=lambda w: w.id, reverse=True)[:10]
    return jsonify(
        {
            "total_weighings": len(categories),
            "total_categories": len({w.category for w in categories}),
            "recent_weighings": [w.to_dict() for w in recent],
            "category_stats": [
                {"category": w.category, "total_kilograms": w.kilograms, "total_pounds": w.pounds}
                for w in categories
            ],
        }
    )


@inventory.route("/weighing-categories/<int:weighing_id>", methods=["PUT"])
@login_required
def update_weighing_category(weighing_id):
    data = get_json()
    weighing = get_for_org_or_404(WeighingCategory, weighing_id, "Weighing category")
    update_from_json(weighing, data)
    db.session.commit()
    return jsonify(weighing.to_dict())


@inventory.route("/weighing-categories/<int:weighing_id>", methods=["DELETE"])
@login_required
def delete_weighing_category(weighing_id):
    weighing = get_for_org_or_404(WeighingCategory, weighing_id, "Weighing category")
    db.session.delete(weighing)
    db.session.commit()
    return jsonify({"success": True})
