from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from kegtrack.time_utils import to_utc_z


ORDER_STATUSES = ("pending", "confirmed", "fulfilled", "cancelled")
NOTE_CATEGORIES = ("interaction", "order", "delivery", "payment", "general")


@dataclass
class Customer:
    """
    An account that receives kegs. Kegs, orders and notes reference a
    customer by id only; the customer does not own them.
    """
    id: str
    name: str
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    contact_person: str | None = None
    notes: str | None = None
    is_active: bool = True
    created_at: datetime | None = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "address": self.address,
            "contactPerson": self.contact_person,
            "notes": self.notes,
            "isActive": self.is_active,
            "createdAt": to_utc_z(self.created_at),
        }


@dataclass(frozen=True)
class OrderItem:
    cider_type: str
    quantity: int

    def to_dict(self) -> dict:
        return {"ciderType": self.cider_type, "quantity": self.quantity}


@dataclass
class Order:
    """Weekly keg order. total_kegs is kept equal to the sum of item quantities."""
    id: str
    customer_id: str
    week_start_date: datetime
    status: str = "pending"
    items: list[OrderItem] = field(default_factory=list)
    total_kegs: int = 0
    notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "customerId": self.customer_id,
            "weekStartDate": to_utc_z(self.week_start_date),
            "status": self.status,
            "items": [item.to_dict() for item in self.items],
            "totalKegs": self.total_kegs,
            "notes": self.notes,
            "createdAt": to_utc_z(self.created_at),
            "updatedAt": to_utc_z(self.updated_at),
        }


@dataclass
class CustomerNote:
    id: str
    customer_id: str
    content: str
    category: str = "general"
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "customerId": self.customer_id,
            "content": self.content,
            "category": self.category,
            "createdAt": to_utc_z(self.created_at),
            "updatedAt": to_utc_z(self.updated_at),
        }
