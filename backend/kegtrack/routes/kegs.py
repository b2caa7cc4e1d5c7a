# Overview: Flask API routes for keg operations; parses input and returns JSON responses.

"""
Keg Routes

Kegs are never deleted. After creation they change only through the status
endpoints, which also write the activity log.
"""

from flask import Blueprint, request, jsonify

from ..decorators import handle_errors
from ..extensions import get_store
from ..models import KEG_STATUSES
from ..schemas import KEG_SCHEMA, KEG_BATCH_SCHEMA, validate_create
from ..services import keg_service
from ..services.identifier_service import extract_keg_id_from_qr, is_valid_qr_code, normalize_scan
from ..services.lifecycle_service import validate_status_update
from ..validation import FieldError, ValidationError


kegs_bp = Blueprint("kegs", __name__, url_prefix="/api/kegs")


def _with_cider_type_alias(data: dict) -> dict:
    # Scanner clients still send beerType
    if isinstance(data, dict) and "beerType" in data and "ciderType" not in data:
        data = dict(data)
        data["ciderType"] = data.pop("beerType")
    return data


@kegs_bp.get("")
@handle_errors("list kegs")
def list_kegs_route():
    """
    List kegs, most recently updated first.

    Query parameters:
    - status: only kegs in this status
    - customer: only kegs at this customer (ignored when status is given)
    """
    store = get_store()
    status = request.args.get("status")
    customer_id = request.args.get("customer")

    if status:
        if status not in KEG_STATUSES:
            raise ValidationError(
                "Invalid keg status",
                [FieldError(("status",), f"status must be one of: {', '.join(KEG_STATUSES)}")],
            )
        kegs = store.get_kegs_by_status(status)
    elif customer_id:
        kegs = store.get_kegs_by_customer(customer_id)
    else:
        kegs = store.get_all_kegs()

    return jsonify([k.to_dict() for k in kegs])


@kegs_bp.get("/<keg_id>")
@handle_errors("fetch keg")
def get_keg_route(keg_id: str):
    keg = get_store().get_keg(keg_id)
    if keg is None:
        return jsonify({"message": "Keg not found"}), 404
    return jsonify(keg.to_dict())


@kegs_bp.get("/qr/<qr_code>")
@handle_errors("fetch keg by QR code")
def get_keg_by_qr_route(qr_code: str):
    """
    Look up a keg by scanned QR text.

    Input is normalized (trimmed, uppercased, spaces removed). A well-formed
    code whose keg was stored under a different QR value still resolves
    through the id it encodes.
    """
    store = get_store()
    scanned = normalize_scan(qr_code)

    keg = store.get_keg_by_qr_code(scanned)
    if keg is None and is_valid_qr_code(scanned):
        keg = store.get_keg(extract_keg_id_from_qr(scanned))
    if keg is None:
        return jsonify({"message": "Keg not found"}), 404
    return jsonify(keg.to_dict())


@kegs_bp.get("/customer/<customer_id>")
@handle_errors("fetch customer kegs")
def list_customer_kegs_route(customer_id: str):
    kegs = get_store().get_kegs_by_customer(customer_id)
    return jsonify([k.to_dict() for k in kegs])


@kegs_bp.post("")
@handle_errors("create keg")
def create_keg_route():
    """
    Register a keg under a caller-supplied id.

    Request body:
    {
        "id": "K-12345678",     // required
        "size": "half_bbl",     // required, half_bbl | sixth_bbl
        "qrCode": "SK12345678", // optional, derived from id
        "status": "clean",      // optional
        "ciderType": "...",     // required when status is full
        "location": "...",
        "customerId": "..."
    }

    Returns:
        201 Keg, 409 when the id or QR code is taken
    """
    data = _with_cider_type_alias(request.get_json(silent=True))
    patch = validate_create(KEG_SCHEMA, data).unwrap()
    keg = get_store().create_keg(patch)
    return jsonify(keg.to_dict()), 201


@kegs_bp.post("/batch")
@handle_errors("create keg batch")
def create_keg_batch_route():
    """
    Register several new kegs with generated ids.

    Request body: {"quantity": 5, "size": "sixth_bbl", "status": "clean", "ciderType": ..., "location": ...}

    Returns:
        201 [Keg, ...]
    """
    data = _with_cider_type_alias(request.get_json(silent=True))
    patch = validate_create(KEG_BATCH_SCHEMA, data).unwrap()
    kegs = keg_service.create_kegs(get_store(), **patch)
    return jsonify([k.to_dict() for k in kegs]), 201


@kegs_bp.patch("/batch/status")
@handle_errors("update keg batch status")
def update_keg_batch_status_route():
    """
    Apply status updates from the batch scanner.

    Request body: {"updates": [{"id": "K-...", "status": "dirty", ...}, ...]}

    Each keg is updated independently; failures are reported, not rolled back.

    Returns:
        {updated: Keg[], failed: [{id, index, message}]}
    """
    data = request.get_json(silent=True) or {}
    updates = data.get("updates")
    if isinstance(updates, list):
        updates = [_with_cider_type_alias(u) for u in updates]

    result = keg_service.update_kegs_status(get_store(), updates)
    return jsonify({
        "updated": [k.to_dict() for k in result["updated"]],
        "failed": result["failed"],
    })


@kegs_bp.patch("/<keg_id>/status")
@handle_errors("update keg status")
def update_keg_status_route(keg_id: str):
    """
    Move a keg to a new status.

    Request body:
    {
        "status": "full",        // required
        "ciderType": "Apple",    // required for full, rejected for clean
        "location": "...",
        "customerId": "...",
        "notes": "...",
        "action": "filled"       // optional activity label
    }

    Returns:
        Updated Keg; 400 on a cider-type violation, 404 for an unknown keg
    """
    data = _with_cider_type_alias(request.get_json(silent=True))
    update = validate_status_update(data)
    keg = get_store().update_keg_status(keg_id, update)
    return jsonify(keg.to_dict())
