"""
Keg workflows that span more than one store operation.

Batch operations are sequences of independent store calls. A failure on one
keg does not undo the kegs already handled.
"""

from __future__ import annotations

import logging

from kegtrack.models import Keg
from kegtrack.services.identifier_service import generate_unique_keg_id
from kegtrack.services.lifecycle_service import validate_status_update
from kegtrack.services.store import DomainStore, NotFoundError
from kegtrack.validation import FieldError, ValidationError


logger = logging.getLogger(__name__)


def create_kegs(
    store: DomainStore,
    *,
    quantity: int,
    size: str,
    status: str = "clean",
    location: str | None = None,
    cider_type: str | None = None,
) -> list[Keg]:
    """
    Create `quantity` kegs with freshly generated ids.

    Raises:
        IdentifierExhaustedError: no free id could be generated
        ValidationError: status/cider-type combination is invalid
    """
    created = []
    for _ in range(quantity):
        keg_id = generate_unique_keg_id(store.keg_exists)
        created.append(store.create_keg({
            "id": keg_id,
            "size": size,
            "status": status,
            "location": location,
            "cider_type": cider_type,
        }))
    logger.info("Created %d %s kegs", len(created), size)
    return created


def update_kegs_status(store: DomainStore, updates) -> dict:
    """
    Apply a list of `{id, status, ...}` updates, one keg at a time.

    Returns:
        {"updated": [Keg, ...], "failed": [{"id": ..., "message": ...}, ...]}
    """
    if not isinstance(updates, list):
        raise ValidationError(
            "Invalid batch status update data",
            [FieldError(("updates",), "updates must be a list")],
        )

    updated: list[Keg] = []
    failed: list[dict] = []

    for index, entry in enumerate(updates):
        if not isinstance(entry, dict) or not entry.get("id"):
            failed.append({"id": None, "index": index, "message": "id is required"})
            continue
        if not isinstance(entry["id"], str):
            failed.append({"id": None, "index": index, "message": "id must be a string"})
            continue

        body = dict(entry)
        keg_id = body.pop("id")
        try:
            update = validate_status_update(body)
            updated.append(store.update_keg_status(keg_id, update))
        except (ValidationError, NotFoundError) as e:
            failed.append({"id": keg_id, "index": index, "message": e.message})

    if failed:
        logger.warning("Batch status update: %d updated, %d failed", len(updated), len(failed))
    return {"updated": updated, "failed": failed}
