# Overview: Flask API routes for customer operations; parses input and returns JSON responses.

from flask import Blueprint, request, jsonify

from ..decorators import handle_errors
from ..extensions import get_store
from ..schemas import CUSTOMER_SCHEMA, validate_create, validate_update


customers_bp = Blueprint("customers", __name__, url_prefix="/api/customers")


@customers_bp.get("")
@handle_errors("fetch customers")
def list_customers_route():
    """List customers alphabetically by name."""
    return jsonify([c.to_dict() for c in get_store().get_all_customers()])


@customers_bp.get("/<customer_id>")
@handle_errors("fetch customer")
def get_customer_route(customer_id: str):
    customer = get_store().get_customer(customer_id)
    if customer is None:
        return jsonify({"message": "Customer not found"}), 404
    return jsonify(customer.to_dict())


@customers_bp.post("")
@handle_errors("create customer")
def create_customer_route():
    """
    Create a customer.

    Request body:
    {
        "name": "The Tipsy Tavern",  // required
        "email": "...", "phone": "...", "address": "...",
        "contactPerson": "...", "notes": "...", "isActive": true
    }
    """
    patch = validate_create(CUSTOMER_SCHEMA, request.get_json(silent=True)).unwrap()
    customer = get_store().create_customer(patch)
    return jsonify(customer.to_dict()), 201


@customers_bp.patch("/<customer_id>")
@handle_errors("update customer")
def update_customer_route(customer_id: str):
    patch = validate_update(CUSTOMER_SCHEMA, request.get_json(silent=True)).unwrap()
    customer = get_store().update_customer(customer_id, patch)
    return jsonify(customer.to_dict())
