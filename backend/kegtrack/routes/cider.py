# Overview: Flask API routes for cider production records (types, batches, ingredients).

"""
Cider Production Routes

- /api/cider-types: the product lineup; names are unique (case-insensitive)
- /api/cider-batches: production runs, optionally filtered by ciderTypeId
- /api/cider-ingredients: ingredients of one batch (batchId is required to list)

Deletes are idempotent and do not cascade.
"""

from flask import Blueprint, request, jsonify

from ..decorators import handle_errors
from ..extensions import get_store
from ..schemas import (
    CIDER_TYPE_SCHEMA,
    CIDER_BATCH_SCHEMA,
    CIDER_INGREDIENT_SCHEMA,
    validate_create,
    validate_update,
)


cider_types_bp = Blueprint("cider_types", __name__, url_prefix="/api/cider-types")
cider_batches_bp = Blueprint("cider_batches", __name__, url_prefix="/api/cider-batches")
cider_ingredients_bp = Blueprint("cider_ingredients", __name__, url_prefix="/api/cider-ingredients")


# ---------------------------------------------------------------------------
# Cider types
# ---------------------------------------------------------------------------

@cider_types_bp.get("")
@handle_errors("fetch cider types")
def list_cider_types_route():
    """
    List cider types alphabetically.

    Query parameters:
    - active: "true" to hide inactive types
    """
    cider_types = get_store().get_all_cider_types()
    if request.args.get("active", "false").lower() == "true":
        cider_types = [t for t in cider_types if t.is_active]
    return jsonify([t.to_dict() for t in cider_types])


@cider_types_bp.get("/<cider_type_id>")
@handle_errors("fetch cider type")
def get_cider_type_route(cider_type_id: str):
    cider_type = get_store().get_cider_type(cider_type_id)
    if cider_type is None:
        return jsonify({"message": "Cider type not found"}), 404
    return jsonify(cider_type.to_dict())


@cider_types_bp.post("")
@handle_errors("create cider type")
def create_cider_type_route():
    patch = validate_create(CIDER_TYPE_SCHEMA, request.get_json(silent=True)).unwrap()
    cider_type = get_store().create_cider_type(patch)
    return jsonify(cider_type.to_dict()), 201


@cider_types_bp.patch("/<cider_type_id>")
@handle_errors("update cider type")
def update_cider_type_route(cider_type_id: str):
    patch = validate_update(CIDER_TYPE_SCHEMA, request.get_json(silent=True)).unwrap()
    cider_type = get_store().update_cider_type(cider_type_id, patch)
    return jsonify(cider_type.to_dict())


@cider_types_bp.delete("/<cider_type_id>")
@handle_errors("delete cider type")
def delete_cider_type_route(cider_type_id: str):
    get_store().delete_cider_type(cider_type_id)
    return "", 204


# ---------------------------------------------------------------------------
# Cider batches
# ---------------------------------------------------------------------------

@cider_batches_bp.get("")
@handle_errors("fetch cider batches")
def list_cider_batches_route():
    store = get_store()
    cider_type_id = request.args.get("ciderTypeId")
    if cider_type_id:
        batches = store.get_cider_batches_by_type(cider_type_id)
    else:
        batches = store.get_all_cider_batches()
    return jsonify([b.to_dict() for b in batches])


@cider_batches_bp.get("/<batch_id>")
@handle_errors("fetch cider batch")
def get_cider_batch_route(batch_id: str):
    batch = get_store().get_cider_batch(batch_id)
    if batch is None:
        return jsonify({"message": "Cider batch not found"}), 404
    return jsonify(batch.to_dict())


@cider_batches_bp.post("")
@handle_errors("create cider batch")
def create_cider_batch_route():
    """
    Record a production run.

    Request body (abridged):
    {
        "ciderTypeId": "...",          // required
        "batchNumber": "CB-2024-001",  // required
        "liquidIngredients": [{"type": "Apple juice", "volume": "40"}],  // up to 5
        "juices": [{"type": "Peach", "volume": "5"}],                    // up to 3
        "cansFilled": [{"date": "2024-03-01", "quantity": 120}],
        "halfBarrelsPackaged": 2, "sixthBarrelsPackaged": 4,
        "productLostDuringPackaging": "1.5"
    }
    """
    patch = validate_create(CIDER_BATCH_SCHEMA, request.get_json(silent=True)).unwrap()
    batch = get_store().create_cider_batch(patch)
    return jsonify(batch.to_dict()), 201


@cider_batches_bp.patch("/<batch_id>")
@handle_errors("update cider batch")
def update_cider_batch_route(batch_id: str):
    patch = validate_update(CIDER_BATCH_SCHEMA, request.get_json(silent=True)).unwrap()
    batch = get_store().update_cider_batch(batch_id, patch)
    return jsonify(batch.to_dict())


@cider_batches_bp.delete("/<batch_id>")
@handle_errors("delete cider batch")
def delete_cider_batch_route(batch_id: str):
    get_store().delete_cider_batch(batch_id)
    return "", 204


# ---------------------------------------------------------------------------
# Cider ingredients
# ---------------------------------------------------------------------------

@cider_ingredients_bp.get("")
@handle_errors("fetch cider ingredients")
def list_cider_ingredients_route():
    batch_id = request.args.get("batchId")
    if not batch_id:
        return jsonify({"message": "batchId query parameter is required"}), 400
    ingredients = get_store().get_cider_ingredients_by_batch(batch_id)
    return jsonify([i.to_dict() for i in ingredients])


@cider_ingredients_bp.post("")
@handle_errors("create cider ingredient")
def create_cider_ingredient_route():
    patch = validate_create(CIDER_INGREDIENT_SCHEMA, request.get_json(silent=True)).unwrap()
    ingredient = get_store().create_cider_ingredient(patch)
    return jsonify(ingredient.to_dict()), 201


@cider_ingredients_bp.patch("/<ingredient_id>")
@handle_errors("update cider ingredient")
def update_cider_ingredient_route(ingredient_id: str):
    patch = validate_update(CIDER_INGREDIENT_SCHEMA, request.get_json(silent=True)).unwrap()
    ingredient = get_store().update_cider_ingredient(ingredient_id, patch)
    return jsonify(ingredient.to_dict())


@cider_ingredients_bp.delete("/<ingredient_id>")
@handle_errors("delete cider ingredient")
def delete_cider_ingredient_route(ingredient_id: str):
    get_store().delete_cider_ingredient(ingredient_id)
    return "", 204
