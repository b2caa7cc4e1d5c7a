from __future__ import annotations

from collections import Counter
from datetime import datetime

from kegtrack.models import ORDER_STATUSES
from kegtrack.services.store import DomainStore
from kegtrack.time_utils import parse_iso_datetime, to_utc_z


# Order sheet code for a customer who wants nothing this week.
NO_ORDER_CODE = "DNA"
NO_ORDER_LABEL = "Don't Need Anything"


class ReportError(Exception):
    """Raised when report parameters are unusable."""
    pass


def parse_range(start: str | None, end: str | None) -> tuple[datetime, datetime]:
    """
    Parse a required startDate/endDate pair.

    Date-only end values cover the whole day.
    """
    if not start or not end:
        raise ReportError("startDate and endDate are required")
    try:
        start_dt = parse_iso_datetime(start)
        end_dt = parse_iso_datetime(end)
    except ValueError:
        raise ReportError("startDate and endDate must be ISO-8601 dates")
    if start_dt is None or end_dt is None:
        raise ReportError("startDate and endDate are required")
    if len(end.strip()) == 10:
        end_dt = end_dt.replace(hour=23, minute=59, second=59, microsecond=999999)
    if start_dt > end_dt:
        raise ReportError("startDate must be on or before endDate")
    return start_dt, end_dt


def cider_type_label(cider_type: str) -> str:
    return NO_ORDER_LABEL if cider_type == NO_ORDER_CODE else cider_type


def order_summary(store: DomainStore, start: datetime, end: datetime) -> dict:
    """
    Orders placed for weeks in [start, end], with totals for the order sheet.

    Cider type counts skip zero-quantity lines.
    """
    orders = sorted(store.get_orders_by_date_range(start, end), key=lambda o: o.week_start_date)

    status_counts = {status: 0 for status in ORDER_STATUSES}
    cider_counts: Counter[str] = Counter()
    rows = []

    for order in orders:
        status_counts[order.status] += 1
        for item in order.items:
            if item.quantity > 0:
                cider_counts[cider_type_label(item.cider_type)] += item.quantity

        customer = store.get_customer(order.customer_id)
        row = order.to_dict()
        row["customerName"] = customer.name if customer else "Unknown Customer"
        rows.append(row)

    return {
        "startDate": to_utc_z(start),
        "endDate": to_utc_z(end),
        "totalOrders": len(orders),
        "totalKegs": sum(o.total_kegs for o in orders),
        "statusCounts": status_counts,
        "ciderTypeCounts": dict(sorted(cider_counts.items())),
        "orders": rows,
    }
