"""
Domain Store - sole owner of every entity collection

All reads and writes go through one DomainStore instance. create_app builds
it once and hangs it on the Flask app; tests build their own.

CONTRACTS:
- create_*: input is an already-validated dict keyed by attribute name.
  Omitted optional fields get explicit None/defaults. Ids are uuid4 strings,
  except kegs, whose id is supplied by the caller.
- get_*(id): entity or None. Never raises for a missing id.
- list operations return new lists, explicitly sorted (newest first for
  time series, alphabetical for named entities).
- update_*: NotFoundError for a missing id, otherwise overwrite only the
  supplied fields and refresh updated_at.
- delete_*: idempotent; a missing id is not an error.

LOCKING: one RLock per collection. Operations touching kegs and activities
take the keg lock first.
"""

from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import fields, replace
from datetime import datetime, timedelta
from typing import Any, Callable, Iterable, TypeVar

from kegtrack.models import (
    Keg,
    Activity,
    Customer,
    Order,
    CustomerNote,
    CiderType,
    CiderBatch,
    CiderIngredient,
    FermentationBatch,
    KEG_STATUSES,
)
from kegtrack.services.identifier_service import generate_qr_code, normalize_scan
from kegtrack.services.lifecycle_service import (
    StatusUpdate,
    apply_status_update,
    build_activity,
    cider_type_coupling_errors,
    validate_status_update,
)
from kegtrack.time_utils import days_ago, utcnow
from kegtrack.validation import ConflictError, ValidationError


logger = logging.getLogger(__name__)

T = TypeVar("T")

_EPOCH = datetime.min


class NotFoundError(LookupError):
    """Raised when an update targets an id the store does not hold."""

    def __init__(self, entity: str, entity_id: str):
        super().__init__(f"{entity} not found")
        self.entity = entity
        self.entity_id = entity_id
        self.message = f"{entity} not found"


class _Table:
    """A keyed collection and the lock that guards it."""

    def __init__(self, label: str):
        self.label = label
        self.rows: dict[str, Any] = {}
        self.lock = threading.RLock()

    def values(self) -> list:
        with self.lock:
            return list(self.rows.values())

    def require(self, entity_id: str):
        row = self.rows.get(entity_id)
        if row is None:
            raise NotFoundError(self.label, entity_id)
        return row


def _newest_first(items: Iterable[T], key: Callable[[T], datetime | None]) -> list[T]:
    # Ties keep the later insertion first.
    indexed = list(enumerate(items))
    indexed.sort(key=lambda pair: (key(pair[1]) or _EPOCH, pair[0]), reverse=True)
    return [item for _, item in indexed]


def _by_name(items: Iterable[T], key: Callable[[T], str]) -> list[T]:
    return sorted(items, key=lambda item: key(item).casefold())


def _merge(entity: T, patch: dict, **stamps) -> T:
    """Field-by-field: a field present in the patch overwrites, anything else is kept."""
    changes = {f.name: patch[f.name] for f in fields(entity) if f.name in patch and f.name != "id"}
    changes.update(stamps)
    return replace(entity, **changes)


def _new_id() -> str:
    return str(uuid.uuid4())


class DomainStore:
    def __init__(self, *, clock: Callable[[], datetime] = utcnow):
        self.clock = clock
        self._kegs = _Table("Keg")
        self._activities = _Table("Activity")
        self._customers = _Table("Customer")
        self._orders = _Table("Order")
        self._customer_notes = _Table("Customer note")
        self._cider_types = _Table("Cider type")
        self._cider_batches = _Table("Cider batch")
        self._cider_ingredients = _Table("Cider ingredient")
        self._fermentation_batches = _Table("Fermentation batch")

    def _insert(self, table: _Table, entity):
        with table.lock:
            table.rows[entity.id] = entity
        logger.debug("Created %s %s", table.label.lower(), entity.id)
        return entity

    def _update(self, table: _Table, entity_id: str, patch: dict, **stamps):
        with table.lock:
            current = table.require(entity_id)
            updated = _merge(current, patch, **stamps)
            table.rows[entity_id] = updated
            return updated

    def _delete(self, table: _Table, entity_id: str) -> None:
        with table.lock:
            removed = table.rows.pop(entity_id, None)
        if removed is not None:
            logger.debug("Deleted %s %s", table.label.lower(), entity_id)

    def counts(self) -> dict[str, int]:
        return {
            "kegs": len(self._kegs.rows),
            "activities": len(self._activities.rows),
            "customers": len(self._customers.rows),
            "orders": len(self._orders.rows),
            "customerNotes": len(self._customer_notes.rows),
            "ciderTypes": len(self._cider_types.rows),
            "ciderBatches": len(self._cider_batches.rows),
            "ciderIngredients": len(self._cider_ingredients.rows),
            "fermentationBatches": len(self._fermentation_batches.rows),
        }

    # ------------------------------------------------------------------
    # Kegs
    # ------------------------------------------------------------------

    def get_keg(self, keg_id: str) -> Keg | None:
        return self._kegs.rows.get(keg_id)

    def keg_exists(self, keg_id: str) -> bool:
        return keg_id in self._kegs.rows

    def get_keg_by_qr_code(self, qr_code: str) -> Keg | None:
        wanted = normalize_scan(qr_code)
        for keg in self._kegs.values():
            if keg.qr_code == wanted:
                return keg
        return None

    def get_all_kegs(self) -> list[Keg]:
        return _newest_first(self._kegs.values(), lambda k: k.last_updated)

    def get_kegs_by_status(self, status: str) -> list[Keg]:
        kegs = [k for k in self._kegs.values() if k.status == status]
        return _newest_first(kegs, lambda k: k.last_updated)

    def get_kegs_by_customer(self, customer_id: str) -> list[Keg]:
        kegs = [k for k in self._kegs.values() if k.customer_id == customer_id]
        return _newest_first(kegs, lambda k: k.last_updated)

    def create_keg(self, data: dict) -> Keg:
        """
        Insert a new keg and its `created` activity.

        Raises:
            ConflictError: the id or its QR code is already taken
            ValidationError: status/cider-type combination is invalid
        """
        keg_id = data["id"]
        qr_code = data.get("qr_code") or generate_qr_code(keg_id)
        status = data.get("status") or "clean"

        errors = cider_type_coupling_errors(status, data.get("cider_type"))
        if errors:
            raise ValidationError(errors[0].message, errors)

        now = self.clock()
        keg = Keg(
            id=keg_id,
            qr_code=qr_code,
            size=data["size"],
            status=status,
            cider_type=None if status == "clean" else data.get("cider_type"),
            location=data.get("location"),
            customer_id=data.get("customer_id"),
            filled_at=now if status == "full" else None,
            deployed_at=now if status == "deployed" else None,
            last_updated=now,
            created_at=now,
        )

        with self._kegs.lock, self._activities.lock:
            if keg_id in self._kegs.rows:
                raise ConflictError(f"Keg {keg_id} already exists")
            if any(k.qr_code == qr_code for k in self._kegs.rows.values()):
                raise ConflictError(f"QR code {qr_code} is already assigned")
            self._kegs.rows[keg_id] = keg
            activity = build_activity(previous=None, current=keg, update=None, now=now, action="created")
            self._activities.rows[activity.id] = activity

        logger.info("Created keg %s (%s, %s)", keg.id, keg.size, keg.status)
        return keg

    def update_keg_status(self, keg_id: str, update: StatusUpdate | dict) -> Keg:
        """
        Move a keg to a new status and append the matching activity.

        Raises:
            ValidationError: malformed update or cider-type violation
            NotFoundError: no keg with this id
        """
        if not isinstance(update, StatusUpdate):
            update = validate_status_update(update)

        with self._kegs.lock, self._activities.lock:
            previous = self._kegs.require(keg_id)
            now = self.clock()
            current = apply_status_update(previous, update, now=now)
            activity = build_activity(previous=previous, current=current, update=update, now=now)
            self._kegs.rows[keg_id] = current
            self._activities.rows[activity.id] = activity

        logger.info("Keg %s: %s -> %s (%s)", keg_id, previous.status, current.status, activity.action)
        return current

    # ------------------------------------------------------------------
    # Activities
    # ------------------------------------------------------------------

    def create_activity(self, data: dict) -> Activity:
        activity = Activity(id=_new_id(), timestamp=self.clock(), **data)
        return self._insert(self._activities, activity)

    def get_activities_by_keg(self, keg_id: str) -> list[Activity]:
        activities = [a for a in self._activities.values() if a.keg_id == keg_id]
        return _newest_first(activities, lambda a: a.timestamp)

    def get_recent_activities(self, limit: int = 10) -> list[Activity]:
        return _newest_first(self._activities.values(), lambda a: a.timestamp)[:limit]

    def get_all_activities(self) -> list[Activity]:
        return _newest_first(self._activities.values(), lambda a: a.timestamp)

    # ------------------------------------------------------------------
    # Customers
    # ------------------------------------------------------------------

    def get_customer(self, customer_id: str) -> Customer | None:
        return self._customers.rows.get(customer_id)

    def get_all_customers(self) -> list[Customer]:
        return _by_name(self._customers.values(), lambda c: c.name)

    def create_customer(self, data: dict) -> Customer:
        customer = Customer(id=data.get("id") or _new_id(), created_at=self.clock(), **_without(data, "id"))
        return self._insert(self._customers, customer)

    def update_customer(self, customer_id: str, patch: dict) -> Customer:
        return self._update(self._customers, customer_id, patch)

    # ------------------------------------------------------------------
    # Orders
    # ------------------------------------------------------------------

    def get_order(self, order_id: str) -> Order | None:
        return self._orders.rows.get(order_id)

    def get_all_orders(self) -> list[Order]:
        return _newest_first(self._orders.values(), lambda o: o.week_start_date)

    def get_orders_by_customer(self, customer_id: str) -> list[Order]:
        orders = [o for o in self._orders.values() if o.customer_id == customer_id]
        return _newest_first(orders, lambda o: o.week_start_date)

    def get_orders_by_week(self, week_start: datetime) -> list[Order]:
        start = week_start.replace(hour=0, minute=0, second=0, microsecond=0)
        end = start + timedelta(days=7)
        orders = [o for o in self._orders.values() if start <= o.week_start_date < end]
        return _newest_first(orders, lambda o: o.created_at)

    def get_orders_by_date_range(self, start: datetime, end: datetime) -> list[Order]:
        """Orders whose week_start_date falls within [start, end], both inclusive."""
        orders = [o for o in self._orders.values() if start <= o.week_start_date <= end]
        return _newest_first(orders, lambda o: o.week_start_date)

    def create_order(self, data: dict) -> Order:
        now = self.clock()
        items = list(data.get("items") or [])
        order = Order(
            id=_new_id(),
            created_at=now,
            updated_at=now,
            total_kegs=sum(item.quantity for item in items),
            **{**_without(data, "items", "total_kegs"), "items": items},
        )
        return self._insert(self._orders, order)

    def update_order(self, order_id: str, patch: dict) -> Order:
        patch = _without(patch, "total_kegs")
        if "items" in patch:
            patch["total_kegs"] = sum(item.quantity for item in patch["items"])
        return self._update(self._orders, order_id, patch, updated_at=self.clock())

    def delete_order(self, order_id: str) -> None:
        self._delete(self._orders, order_id)

    # ------------------------------------------------------------------
    # Customer notes
    # ------------------------------------------------------------------

    def get_customer_note(self, note_id: str) -> CustomerNote | None:
        return self._customer_notes.rows.get(note_id)

    def get_all_customer_notes(self) -> list[CustomerNote]:
        return _newest_first(self._customer_notes.values(), lambda n: n.created_at)

    def get_customer_notes_by_customer(self, customer_id: str) -> list[CustomerNote]:
        notes = [n for n in self._customer_notes.values() if n.customer_id == customer_id]
        return _newest_first(notes, lambda n: n.created_at)

    def create_customer_note(self, data: dict) -> CustomerNote:
        now = self.clock()
        note = CustomerNote(id=_new_id(), created_at=now, updated_at=now, **data)
        return self._insert(self._customer_notes, note)

    def update_customer_note(self, note_id: str, patch: dict) -> CustomerNote:
        return self._update(self._customer_notes, note_id, patch, updated_at=self.clock())

    def delete_customer_note(self, note_id: str) -> None:
        self._delete(self._customer_notes, note_id)

    # ------------------------------------------------------------------
    # Cider types
    # ------------------------------------------------------------------

    def get_cider_type(self, cider_type_id: str) -> CiderType | None:
        return self._cider_types.rows.get(cider_type_id)

    def get_all_cider_types(self) -> list[CiderType]:
        return _by_name(self._cider_types.values(), lambda t: t.name)

    def _ensure_cider_type_name_free(self, name: str, *, exclude_id: str | None = None) -> None:
        wanted = name.casefold()
        for cider_type in self._cider_types.rows.values():
            if cider_type.id != exclude_id and cider_type.name.casefold() == wanted:
                raise ConflictError(f"Cider type '{name}' already exists")

    def create_cider_type(self, data: dict) -> CiderType:
        now = self.clock()
        cider_type = CiderType(id=_new_id(), created_at=now, updated_at=now, **data)
        with self._cider_types.lock:
            self._ensure_cider_type_name_free(cider_type.name)
            return self._insert(self._cider_types, cider_type)

    def update_cider_type(self, cider_type_id: str, patch: dict) -> CiderType:
        with self._cider_types.lock:
            self._cider_types.require(cider_type_id)
            if "name" in patch:
                self._ensure_cider_type_name_free(patch["name"], exclude_id=cider_type_id)
            return self._update(self._cider_types, cider_type_id, patch, updated_at=self.clock())

    def delete_cider_type(self, cider_type_id: str) -> None:
        self._delete(self._cider_types, cider_type_id)

    # ------------------------------------------------------------------
    # Cider batches
    # ------------------------------------------------------------------

    def get_cider_batch(self, batch_id: str) -> CiderBatch | None:
        return self._cider_batches.rows.get(batch_id)

    def get_all_cider_batches(self) -> list[CiderBatch]:
        return _newest_first(self._cider_batches.values(), lambda b: b.date)

    def get_cider_batches_by_type(self, cider_type_id: str) -> list[CiderBatch]:
        batches = [b for b in self._cider_batches.values() if b.cider_type_id == cider_type_id]
        return _newest_first(batches, lambda b: b.date)

    def create_cider_batch(self, data: dict) -> CiderBatch:
        now = self.clock()
        batch = CiderBatch(id=_new_id(), created_at=now, updated_at=now, **data)
        return self._insert(self._cider_batches, batch)

    def update_cider_batch(self, batch_id: str, patch: dict) -> CiderBatch:
        return self._update(self._cider_batches, batch_id, patch, updated_at=self.clock())

    def delete_cider_batch(self, batch_id: str) -> None:
        self._delete(self._cider_batches, batch_id)

    # ------------------------------------------------------------------
    # Cider ingredients
    # ------------------------------------------------------------------

    def get_cider_ingredient(self, ingredient_id: str) -> CiderIngredient | None:
        return self._cider_ingredients.rows.get(ingredient_id)

    def get_all_cider_ingredients(self) -> list[CiderIngredient]:
        return _newest_first(self._cider_ingredients.values(), lambda i: i.created_at)

    def get_cider_ingredients_by_batch(self, batch_id: str) -> list[CiderIngredient]:
        ingredients = [i for i in self._cider_ingredients.values() if i.batch_id == batch_id]
        return _newest_first(ingredients, lambda i: i.created_at)

    def create_cider_ingredient(self, data: dict) -> CiderIngredient:
        ingredient = CiderIngredient(id=_new_id(), created_at=self.clock(), **data)
        return self._insert(self._cider_ingredients, ingredient)

    def update_cider_ingredient(self, ingredient_id: str, patch: dict) -> CiderIngredient:
        return self._update(self._cider_ingredients, ingredient_id, patch)

    def delete_cider_ingredient(self, ingredient_id: str) -> None:
        self._delete(self._cider_ingredients, ingredient_id)

    # ------------------------------------------------------------------
    # Fermentation batches
    # ------------------------------------------------------------------

    def get_fermentation_batch(self, batch_id: str) -> FermentationBatch | None:
        return self._fermentation_batches.rows.get(batch_id)

    def get_all_fermentation_batches(self) -> list[FermentationBatch]:
        return _newest_first(self._fermentation_batches.values(), lambda b: b.date)

    def create_fermentation_batch(self, data: dict) -> FermentationBatch:
        now = self.clock()
        batch = FermentationBatch(id=_new_id(), created_at=now, updated_at=now, **data)
        return self._insert(self._fermentation_batches, batch)

    def update_fermentation_batch(self, batch_id: str, patch: dict) -> FermentationBatch:
        return self._update(self._fermentation_batches, batch_id, patch, updated_at=self.clock())

    def delete_fermentation_batch(self, batch_id: str) -> None:
        self._delete(self._fermentation_batches, batch_id)

    # ------------------------------------------------------------------
    # Analytics
    # ------------------------------------------------------------------

    def get_keg_stats(self) -> dict[str, int]:
        kegs = self._kegs.values()
        stats = {status: 0 for status in KEG_STATUSES}
        for keg in kegs:
            stats[keg.status] += 1
        stats["total"] = len(kegs)
        return stats

    def get_overdue_kegs(self, days: int = 7) -> list[Keg]:
        """Deployed kegs out longer than `days`, longest-out first."""
        cutoff = days_ago(days, now=self.clock())
        overdue = [
            k for k in self._kegs.values()
            if k.status == "deployed" and k.deployed_at is not None and k.deployed_at < cutoff
        ]
        return sorted(overdue, key=lambda k: k.deployed_at)


def _without(data: dict, *keys: str) -> dict:
    return {k: v for k, v in data.items() if k not in keys}
