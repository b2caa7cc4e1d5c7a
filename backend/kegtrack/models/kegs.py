from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from kegtrack.time_utils import to_utc_z


KEG_SIZES = ("half_bbl", "sixth_bbl")
KEG_STATUSES = ("full", "dirty", "clean", "deployed")
ACTIVITY_ACTIONS = ("filled", "deployed", "returned", "cleaned", "created")


@dataclass
class Keg:
    """
    A physical keg. Identity (id, qr_code) and size never change after
    creation; everything else moves only through a status update.
    """
    id: str
    qr_code: str
    size: str
    status: str = "clean"
    cider_type: str | None = None
    location: str | None = None
    customer_id: str | None = None
    filled_at: datetime | None = None
    deployed_at: datetime | None = None
    last_updated: datetime | None = None
    created_at: datetime | None = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "qrCode": self.qr_code,
            "size": self.size,
            "status": self.status,
            "ciderType": self.cider_type,
            "location": self.location,
            "customerId": self.customer_id,
            "filledAt": to_utc_z(self.filled_at),
            "deployedAt": to_utc_z(self.deployed_at),
            "lastUpdated": to_utc_z(self.last_updated),
            "createdAt": to_utc_z(self.created_at),
        }


@dataclass(frozen=True)
class Activity:
    """Append-only record of one keg status change."""
    id: str
    keg_id: str
    action: str
    new_status: str
    previous_status: str | None = None
    location: str | None = None
    customer_id: str | None = None
    notes: str | None = None
    timestamp: datetime | None = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "kegId": self.keg_id,
            "action": self.action,
            "previousStatus": self.previous_status,
            "newStatus": self.new_status,
            "location": self.location,
            "customerId": self.customer_id,
            "notes": self.notes,
            "timestamp": to_utc_z(self.timestamp),
        }
