"""
Input schemas, one per entity.

Each schema is used twice: partial=False for POST (required fields
enforced) and partial=True for PATCH (only supplied keys validated).
"""

from __future__ import annotations

from typing import Any

from kegtrack.models import (
    KEG_SIZES,
    KEG_STATUSES,
    ORDER_STATUSES,
    NOTE_CATEGORIES,
    INGREDIENT_TYPES,
    MAX_LIQUID_INGREDIENTS,
    MAX_JUICES,
    OrderItem,
    IngredientLine,
    CanFill,
)
from kegtrack.services.identifier_service import generate_qr_code, is_valid_keg_id
from kegtrack.services.lifecycle_service import cider_type_coupling_errors
from kegtrack.validation import (
    EntitySchema,
    FieldError,
    FieldSpec,
    ValidationResult,
    item_datetime,
    item_record,
    item_value,
    validate_payload,
)


# Upper bound for kegs created by one batch request or CLI call
MAX_BATCH_KEGS = 500


# ---------------------------------------------------------------------------
# List entries
# ---------------------------------------------------------------------------

_ITEM_CIDER_TYPE = FieldSpec("ciderType", "cider_type")
_ITEM_BEER_TYPE = FieldSpec("beerType", "cider_type")
_ITEM_QUANTITY = FieldSpec("quantity", "quantity", kind="int", min_value=0)
_LINE_TYPE = FieldSpec("type", "type")
_LINE_VOLUME = FieldSpec("volume", "volume", kind="decimal", min_value=0)
_FILL_DATE = FieldSpec("date", "date", kind="datetime")


def _order_item(raw: Any) -> OrderItem:
    record = item_record(raw)
    # Older clients send beerType
    spec = _ITEM_BEER_TYPE if "beerType" in record and "ciderType" not in record else _ITEM_CIDER_TYPE
    return OrderItem(
        cider_type=item_value(spec, record),
        quantity=item_value(_ITEM_QUANTITY, record),
    )


def _ingredient_line(raw: Any) -> IngredientLine:
    record = item_record(raw)
    return IngredientLine(
        type=item_value(_LINE_TYPE, record),
        volume=item_value(_LINE_VOLUME, record, required=False),
    )


def _can_fill(raw: Any) -> CanFill:
    record = item_record(raw)
    return CanFill(
        date=item_value(_FILL_DATE, record),
        quantity=item_value(_ITEM_QUANTITY, record),
    )


# ---------------------------------------------------------------------------
# Kegs
# ---------------------------------------------------------------------------

def _keg_rules(patch: dict) -> list[FieldError]:
    errors = []
    keg_id = patch.get("id")
    if keg_id and not is_valid_keg_id(keg_id):
        errors.append(FieldError(("id",), "id must look like K-12345678"))
    qr_code = patch.get("qr_code")
    if keg_id and qr_code and qr_code != generate_qr_code(keg_id):
        errors.append(FieldError(("qrCode",), f"qrCode must be {generate_qr_code(keg_id)} for keg {keg_id}"))
    errors.extend(cider_type_coupling_errors(patch.get("status", "clean"), patch.get("cider_type")))
    return errors


KEG_SCHEMA = EntitySchema(
    name="keg",
    fields=(
        FieldSpec("id", "id", nullable=False, max_length=16),
        FieldSpec("qrCode", "qr_code", max_length=16),
        FieldSpec("size", "size", kind="enum", nullable=False, choices=KEG_SIZES),
        FieldSpec("status", "status", kind="enum", nullable=False, choices=KEG_STATUSES),
        FieldSpec("ciderType", "cider_type", max_length=120),
        FieldSpec("location", "location", max_length=255),
        FieldSpec("customerId", "customer_id"),
    ),
    required_on_create=frozenset({"id", "size"}),
    rules=(_keg_rules,),
)


def _keg_batch_rules(patch: dict) -> list[FieldError]:
    return cider_type_coupling_errors(patch.get("status", "clean"), patch.get("cider_type"))


KEG_BATCH_SCHEMA = EntitySchema(
    name="keg batch",
    fields=(
        FieldSpec("quantity", "quantity", kind="int", nullable=False, min_value=1, max_value=MAX_BATCH_KEGS),
        FieldSpec("size", "size", kind="enum", nullable=False, choices=KEG_SIZES),
        FieldSpec("status", "status", kind="enum", nullable=False, choices=KEG_STATUSES),
        FieldSpec("ciderType", "cider_type", max_length=120),
        FieldSpec("location", "location", max_length=255),
    ),
    required_on_create=frozenset({"quantity", "size"}),
    rules=(_keg_batch_rules,),
)


# ---------------------------------------------------------------------------
# Customers, orders, notes
# ---------------------------------------------------------------------------

CUSTOMER_SCHEMA = EntitySchema(
    name="customer",
    fields=(
        FieldSpec("name", "name", nullable=False, max_length=255),
        FieldSpec("email", "email", max_length=255),
        FieldSpec("phone", "phone", max_length=32),
        FieldSpec("address", "address"),
        FieldSpec("contactPerson", "contact_person", max_length=255),
        FieldSpec("notes", "notes"),
        FieldSpec("isActive", "is_active", kind="bool", nullable=False),
    ),
    required_on_create=frozenset({"name"}),
)

ORDER_SCHEMA = EntitySchema(
    name="order",
    fields=(
        FieldSpec("customerId", "customer_id", nullable=False),
        FieldSpec("weekStartDate", "week_start_date", kind="datetime", nullable=False),
        FieldSpec("status", "status", kind="enum", nullable=False, choices=ORDER_STATUSES),
        FieldSpec("items", "items", kind="list", nullable=False, item=_order_item),
        FieldSpec("notes", "notes"),
    ),
    required_on_create=frozenset({"customerId", "weekStartDate"}),
)

CUSTOMER_NOTE_SCHEMA = EntitySchema(
    name="note",
    fields=(
        FieldSpec("customerId", "customer_id", nullable=False),
        FieldSpec("content", "content", nullable=False),
        FieldSpec("category", "category", kind="enum", nullable=False, choices=NOTE_CATEGORIES),
    ),
    required_on_create=frozenset({"customerId", "content"}),
)


# ---------------------------------------------------------------------------
# Production records
# ---------------------------------------------------------------------------

CIDER_TYPE_SCHEMA = EntitySchema(
    name="cider type",
    fields=(
        FieldSpec("name", "name", nullable=False, max_length=120),
        FieldSpec("description", "description"),
        FieldSpec("style", "style", max_length=120),
        FieldSpec("abv", "abv", kind="decimal", min_value=0),
        FieldSpec("ibu", "ibu", kind="int", min_value=0),
        FieldSpec("srm", "srm", kind="decimal", min_value=0),
        FieldSpec("isActive", "is_active", kind="bool", nullable=False),
    ),
    required_on_create=frozenset({"name"}),
)

CIDER_BATCH_SCHEMA = EntitySchema(
    name="cider batch",
    fields=(
        FieldSpec("ciderTypeId", "cider_type_id", nullable=False),
        FieldSpec("batchNumber", "batch_number", nullable=False, max_length=64),
        FieldSpec("date", "date", kind="datetime"),
        FieldSpec("brix", "brix", kind="decimal", min_value=0),
        FieldSpec(
            "liquidIngredients", "liquid_ingredients", kind="list", nullable=False,
            item=_ingredient_line, max_items=MAX_LIQUID_INGREDIENTS,
        ),
        FieldSpec("juices", "juices", kind="list", nullable=False, item=_ingredient_line, max_items=MAX_JUICES),
        FieldSpec("poundsSugar", "pounds_sugar", kind="decimal", min_value=0),
        FieldSpec("additionalIngredientNotes", "additional_ingredient_notes"),
        FieldSpec("batchNotes", "batch_notes"),
        FieldSpec("halfBarrelsPackaged", "half_barrels_packaged", kind="int", nullable=False, min_value=0),
        FieldSpec("sixthBarrelsPackaged", "sixth_barrels_packaged", kind="int", nullable=False, min_value=0),
        FieldSpec("cansFilled", "cans_filled", kind="list", nullable=False, item=_can_fill),
        FieldSpec(
            "productLostDuringPackaging", "product_lost_during_packaging",
            kind="decimal", nullable=False, min_value=0,
        ),
    ),
    required_on_create=frozenset({"ciderTypeId", "batchNumber"}),
)

CIDER_INGREDIENT_SCHEMA = EntitySchema(
    name="cider ingredient",
    fields=(
        FieldSpec("batchId", "batch_id", nullable=False),
        FieldSpec("ingredientName", "ingredient_name", nullable=False, max_length=120),
        FieldSpec("ingredientType", "ingredient_type", kind="enum", nullable=False, choices=INGREDIENT_TYPES),
        FieldSpec("quantity", "quantity", kind="decimal", min_value=0),
        FieldSpec("unit", "unit", max_length=32),
        FieldSpec("supplier", "supplier", max_length=120),
        FieldSpec("notes", "notes"),
    ),
    required_on_create=frozenset({"batchId", "ingredientName", "ingredientType"}),
)

FERMENTATION_BATCH_SCHEMA = EntitySchema(
    name="fermentation batch",
    fields=(
        FieldSpec("fermentationId", "fermentation_id", nullable=False, max_length=64),
        FieldSpec("date", "date", kind="datetime", nullable=False),
        FieldSpec("volume", "volume", kind="decimal", nullable=False, min_value=0),
        FieldSpec("incomingJuiceId", "incoming_juice_id", max_length=64),
        FieldSpec("incomingJuiceVolume", "incoming_juice_volume", kind="decimal", min_value=0),
        FieldSpec("juiceSource", "juice_source", max_length=120),
        FieldSpec("brix", "brix", kind="decimal", min_value=0),
        FieldSpec("abv", "abv", kind="decimal", min_value=0),
        FieldSpec("sulfiteAdded", "sulfite_added", kind="decimal", min_value=0),
        FieldSpec("yeastStrain", "yeast_strain", max_length=120),
        FieldSpec("yeastWeight", "yeast_weight", kind="decimal", min_value=0),
        FieldSpec("ph", "ph", kind="decimal", min_value=0),
        FieldSpec("titratableAcidity", "titratable_acidity", kind="decimal", min_value=0),
        FieldSpec("copperSulfateAdded", "copper_sulfate_added", kind="decimal", min_value=0),
        FieldSpec("rackingDates", "racking_dates", kind="list", nullable=False, item=item_datetime),
        FieldSpec("notes", "notes"),
    ),
    required_on_create=frozenset({"fermentationId", "date", "volume"}),
)


def validate_create(schema: EntitySchema, payload: Any) -> ValidationResult:
    return validate_payload(schema=schema, payload=payload, partial=False)


def validate_update(schema: EntitySchema, payload: Any) -> ValidationResult:
    return validate_payload(schema=schema, payload=payload, partial=True)
