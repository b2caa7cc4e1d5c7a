# Overview: Flask API routes for customer notes.

from flask import Blueprint, request, jsonify

from ..decorators import handle_errors
from ..extensions import get_store
from ..schemas import CUSTOMER_NOTE_SCHEMA, validate_create, validate_update


customer_notes_bp = Blueprint("customer_notes", __name__, url_prefix="/api/customer-notes")


# GET takes a customer id, PATCH/DELETE take a note id.
@customer_notes_bp.get("/<customer_id>")
@handle_errors("fetch customer notes")
def list_customer_notes_route(customer_id: str):
    notes = get_store().get_customer_notes_by_customer(customer_id)
    return jsonify([n.to_dict() for n in notes])


@customer_notes_bp.post("")
@handle_errors("create customer note")
def create_customer_note_route():
    patch = validate_create(CUSTOMER_NOTE_SCHEMA, request.get_json(silent=True)).unwrap()
    note = get_store().create_customer_note(patch)
    return jsonify(note.to_dict()), 201


@customer_notes_bp.patch("/<note_id>")
@handle_errors("update customer note")
def update_customer_note_route(note_id: str):
    patch = validate_update(CUSTOMER_NOTE_SCHEMA, request.get_json(silent=True)).unwrap()
    note = get_store().update_customer_note(note_id, patch)
    return jsonify(note.to_dict())


@customer_notes_bp.delete("/<note_id>")
@handle_errors("delete customer note")
def delete_customer_note_route(note_id: str):
    get_store().delete_customer_note(note_id)
    return "", 204
