# Overview: Flask API routes for fermentation batch records.

from flask import Blueprint, request, jsonify

from ..decorators import handle_errors
from ..extensions import get_store
from ..schemas import FERMENTATION_BATCH_SCHEMA, validate_create, validate_update


fermentation_bp = Blueprint("fermentation", __name__, url_prefix="/api/fermentation-batches")


@fermentation_bp.get("")
@handle_errors("fetch fermentation batches")
def list_fermentation_batches_route():
    """List fermentation batches, newest date first."""
    batches = get_store().get_all_fermentation_batches()
    return jsonify([b.to_dict() for b in batches])


@fermentation_bp.get("/<batch_id>")
@handle_errors("fetch fermentation batch")
def get_fermentation_batch_route(batch_id: str):
    batch = get_store().get_fermentation_batch(batch_id)
    if batch is None:
        return jsonify({"message": "Fermentation batch not found"}), 404
    return jsonify(batch.to_dict())


@fermentation_bp.post("")
@handle_errors("create fermentation batch")
def create_fermentation_batch_route():
    """
    Record a fermentation batch.

    Request body:
    {
        "fermentationId": "F-101",   // required
        "date": "2024-03-01",        // required
        "volume": "120",             // required, gallons
        "sulfiteAdded": "12.5",      // grams
        "yeastWeight": "40",         // grams
        "copperSulfateAdded": "3",   // ml
        "rackingDates": ["2024-03-10", ...],
        ...
    }

    Measurements are accepted as numbers or numeric strings and returned as strings.
    """
    patch = validate_create(FERMENTATION_BATCH_SCHEMA, request.get_json(silent=True)).unwrap()
    batch = get_store().create_fermentation_batch(patch)
    return jsonify(batch.to_dict()), 201


@fermentation_bp.patch("/<batch_id>")
@handle_errors("update fermentation batch")
def update_fermentation_batch_route(batch_id: str):
    patch = validate_update(FERMENTATION_BATCH_SCHEMA, request.get_json(silent=True)).unwrap()
    batch = get_store().update_fermentation_batch(batch_id, patch)
    return jsonify(batch.to_dict())


@fermentation_bp.delete("/<batch_id>")
@handle_errors("delete fermentation batch")
def delete_fermentation_batch_route(batch_id: str):
    get_store().delete_fermentation_batch(batch_id)
    return "", 204
