"""
Keg lifecycle rules.

STATE MACHINE:
    clean, full, dirty, deployed

    Any state may move to any other state; there is no transition graph.
    What IS enforced is the cider-type coupling:

    clean:    cider_type is always cleared
    full:     cider_type must be non-empty
    deployed: deployed_at stamped on entry
    dirty:    no extra rules

Historical timestamps (filled_at, deployed_at) survive leaving their state.
Every accepted change produces exactly one Activity.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, replace
from datetime import datetime

from kegtrack.models import Keg, Activity, KEG_STATUSES, ACTIVITY_ACTIONS
from kegtrack.validation import (
    EntitySchema,
    FieldError,
    FieldSpec,
    ValidationError,
    validate_payload,
)


CLEAN_WITH_CIDER_TYPE = "Clean kegs cannot have a cider type"
FULL_WITHOUT_CIDER_TYPE = "Cider type is required for full kegs"

# Action recorded when the caller does not say what happened.
DEFAULT_ACTIONS = {
    "full": "filled",
    "deployed": "deployed",
    "dirty": "returned",
    "clean": "cleaned",
}


def cider_type_coupling_errors(status: str | None, cider_type: str | None) -> list[FieldError]:
    """
    Check the status/cider-type invariant for a target status.

    Returns an empty list when the pair is acceptable.
    """
    has_cider_type = bool(cider_type and cider_type.strip())
    if status == "clean" and has_cider_type:
        return [FieldError(("ciderType",), CLEAN_WITH_CIDER_TYPE)]
    if status == "full" and not has_cider_type:
        return [FieldError(("ciderType",), FULL_WITHOUT_CIDER_TYPE)]
    return []


def _status_update_rule(patch: dict) -> list[FieldError]:
    return cider_type_coupling_errors(patch.get("status"), patch.get("cider_type"))


STATUS_UPDATE_SCHEMA = EntitySchema(
    name="status update",
    fields=(
        FieldSpec("status", "status", kind="enum", nullable=False, choices=KEG_STATUSES),
        FieldSpec("location", "location"),
        FieldSpec("customerId", "customer_id"),
        FieldSpec("ciderType", "cider_type"),
        FieldSpec("notes", "notes"),
        FieldSpec("action", "action", kind="enum", choices=ACTIVITY_ACTIONS),
    ),
    required_on_create=frozenset({"status"}),
    rules=(_status_update_rule,),
)


@dataclass(frozen=True)
class StatusUpdate:
    """
    A validated request to move a keg to a new status.

    Fields left as None were not supplied and keep the keg's current value,
    except cider_type on entering clean, which is always cleared.
    """
    status: str
    location: str | None = None
    customer_id: str | None = None
    cider_type: str | None = None
    notes: str | None = None
    action: str | None = None
    supplied: frozenset[str] = frozenset()


def validate_status_update(payload) -> StatusUpdate:
    """
    Validate a status-change payload.

    Raises:
        ValidationError: shape problems (with field paths) or a cider-type
            coupling violation.
    """
    result = validate_payload(schema=STATUS_UPDATE_SCHEMA, payload=payload, partial=False)
    if not result.ok:
        coupling = [
            e for e in result.errors
            if e.message in (CLEAN_WITH_CIDER_TYPE, FULL_WITHOUT_CIDER_TYPE)
        ]
        if coupling:
            raise ValidationError(coupling[0].message, result.errors)
    patch = result.unwrap()
    return StatusUpdate(supplied=frozenset(patch.keys()), **patch)


def ensure_status_update(update: StatusUpdate) -> None:
    """Re-check an update built in code rather than parsed from JSON."""
    if update.status not in KEG_STATUSES:
        raise ValidationError(
            "Invalid status update data",
            [FieldError(("status",), f"status must be one of: {', '.join(KEG_STATUSES)}")],
        )
    errors = cider_type_coupling_errors(update.status, update.cider_type)
    if errors:
        raise ValidationError(errors[0].message, errors)


def apply_status_update(keg: Keg, update: StatusUpdate, *, now: datetime) -> Keg:
    """
    Compute the keg state after the update. The input keg is not modified.
    """
    ensure_status_update(update)

    changes: dict = {"status": update.status, "last_updated": now}
    if "location" in update.supplied:
        changes["location"] = update.location
    if "customer_id" in update.supplied:
        changes["customer_id"] = update.customer_id
    if "cider_type" in update.supplied:
        changes["cider_type"] = update.cider_type

    if update.status == "clean":
        changes["cider_type"] = None
    if update.status == "full":
        changes["filled_at"] = now
    if update.status == "deployed":
        changes["deployed_at"] = now

    return replace(keg, **changes)


def build_activity(
    *,
    previous: Keg | None,
    current: Keg,
    update: StatusUpdate | None,
    now: datetime,
    action: str | None = None,
) -> Activity:
    """
    Activity for one accepted change. The action label comes from the
    caller when given, otherwise from the target status.
    """
    if action is None and update is not None:
        action = update.action
    if action is None:
        action = DEFAULT_ACTIONS[current.status]

    return Activity(
        id=str(uuid.uuid4()),
        keg_id=current.id,
        action=action,
        previous_status=previous.status if previous else None,
        new_status=current.status,
        location=current.location,
        customer_id=current.customer_id,
        notes=update.notes if update else None,
        timestamp=now,
    )
