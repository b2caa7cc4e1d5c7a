# Overview: Flask API routes for weekly order operations; parses input and returns JSON responses.

"""
Order Routes

totalKegs is computed from the items and cannot be set by clients.
"""

from flask import Blueprint, request, jsonify

from ..decorators import handle_errors
from ..extensions import get_store
from ..schemas import ORDER_SCHEMA, validate_create, validate_update
from ..services import reporting_service


orders_bp = Blueprint("orders", __name__, url_prefix="/api/orders")


@orders_bp.get("")
@handle_errors("fetch orders")
def list_orders_route():
    return jsonify([o.to_dict() for o in get_store().get_all_orders()])


@orders_bp.get("/customer/<customer_id>")
@handle_errors("fetch customer orders")
def list_customer_orders_route(customer_id: str):
    orders = get_store().get_orders_by_customer(customer_id)
    return jsonify([o.to_dict() for o in orders])


@orders_bp.get("/date-range")
@handle_errors("fetch orders by date range")
def list_orders_by_date_range_route():
    """
    Orders whose week starts within [startDate, endDate].

    A date-only endDate includes that whole day.
    """
    try:
        start, end = reporting_service.parse_range(
            request.args.get("startDate"),
            request.args.get("endDate"),
        )
    except reporting_service.ReportError as exc:
        return jsonify({"message": str(exc)}), 400

    orders = get_store().get_orders_by_date_range(start, end)
    return jsonify([o.to_dict() for o in orders])


@orders_bp.get("/<order_id>")
@handle_errors("fetch order")
def get_order_route(order_id: str):
    order = get_store().get_order(order_id)
    if order is None:
        return jsonify({"message": "Order not found"}), 404
    return jsonify(order.to_dict())


@orders_bp.post("")
@handle_errors("create order")
def create_order_route():
    """
    Create a weekly order.

    Request body:
    {
        "customerId": "customer-1",        // required
        "weekStartDate": "2024-01-01",     // required
        "status": "pending",
        "items": [{"ciderType": "Apple", "quantity": 2}, ...],
        "notes": "..."
    }
    """
    patch = validate_create(ORDER_SCHEMA, request.get_json(silent=True)).unwrap()
    order = get_store().create_order(patch)
    return jsonify(order.to_dict()), 201


@orders_bp.patch("/<order_id>")
@handle_errors("update order")
def update_order_route(order_id: str):
    patch = validate_update(ORDER_SCHEMA, request.get_json(silent=True)).unwrap()
    order = get_store().update_order(order_id, patch)
    return jsonify(order.to_dict())


@orders_bp.delete("/<order_id>")
@handle_errors("delete order")
def delete_order_route(order_id: str):
    get_store().delete_order(order_id)
    return "", 204
