"""
Demo data for a fresh store: a handful of kegs in every status, the regular
customers, and the standing cider lineup.

Seeding an already seeded store is a no-op.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from kegtrack.services.identifier_service import generate_unique_keg_id
from kegtrack.services.store import DomainStore


logger = logging.getLogger(__name__)


DEMO_CUSTOMERS = [
    {"id": "customer-1", "name": "The Tipsy Tavern", "email": "orders@tipsytavern.com",
     "phone": "555-0101", "contact_person": "Mike Johnson"},
    {"id": "customer-2", "name": "Brewhouse Bistro", "email": "contact@brewhouse.com",
     "phone": "555-0102", "contact_person": "Sarah Chen"},
    {"id": "customer-3", "name": "The Local Pub", "email": "manager@localpub.com",
     "phone": "555-0103", "contact_person": "David Wilson"},
    {"id": "customer-4", "name": "Craft Corner", "email": "info@craftcorner.com",
     "phone": "555-0104", "contact_person": "Emma Davis"},
]

DEMO_CIDER_TYPES = [
    {"name": "Prickly Pear", "style": "Fruit Cider", "abv": "6.2", "ibu": 8, "srm": "4.5", "is_active": True,
     "description": "A unique desert cider featuring the sweet, refreshing taste of prickly pear cactus"},
    {"name": "Peach", "style": "Fruit Cider", "abv": "5.8", "ibu": 10, "srm": "5.2", "is_active": True,
     "description": "Sweet and juicy peach cider with notes of summer orchard fruit"},
    {"name": "Apple", "style": "Traditional Cider", "abv": "5.0", "ibu": 10, "srm": "6.2", "is_active": True,
     "description": "Classic apple cider with crisp orchard fruit and a hint of spice"},
    {"name": "Rhubarb", "style": "Fruit Cider", "abv": "5.5", "ibu": 12, "srm": "3.8", "is_active": True,
     "description": "Tart and refreshing rhubarb cider with a perfect balance of sweet and sour"},
    {"name": "Seasonal Berry Blend", "style": "Specialty Cider", "abv": "6.0", "ibu": 9, "srm": "7.1",
     "is_active": False,
     "description": "Limited edition blend of seasonal berries creating a complex, fruity profile"},
]

DEMO_KEGS = [
    {"size": "half_bbl", "status": "clean"},
    {"size": "half_bbl", "status": "dirty"},
    {"size": "sixth_bbl", "status": "clean", "moves": [
        {"status": "full", "ciderType": "Apple", "location": "Warehouse A"},
    ]},
    {"size": "sixth_bbl", "status": "clean", "moves": [
        {"status": "full", "ciderType": "Peach", "location": "Warehouse A"},
        {"status": "deployed", "location": "Bar Downtown", "customerId": "customer-1"},
    ]},
    {"size": "half_bbl", "status": "clean"},
]


def seed_demo_data(store: DomainStore) -> dict[str, int]:
    """
    Load demo records into `store`.

    Returns:
        Counts of records created per collection (all zero when the store
        already holds the demo customers).
    """
    created = {"kegs": 0, "customers": 0, "ciderTypes": 0, "activities": 0}
    if store.get_customer(DEMO_CUSTOMERS[0]["id"]) is not None:
        logger.info("Demo data already present, skipping seed")
        return created

    for data in DEMO_CUSTOMERS:
        store.create_customer(data)
        created["customers"] += 1

    for data in DEMO_CIDER_TYPES:
        store.create_cider_type({
            **data,
            "abv": Decimal(data["abv"]),
            "srm": Decimal(data["srm"]),
        })
        created["ciderTypes"] += 1

    for data in DEMO_KEGS:
        record = {k: v for k, v in data.items() if k != "moves"}
        keg = store.create_keg({"id": generate_unique_keg_id(store.keg_exists), **record})
        created["kegs"] += 1
        created["activities"] += 1
        # Full and deployed kegs start clean and move forward
        for move in data.get("moves", []):
            store.update_keg_status(keg.id, move)
            created["activities"] += 1

    logger.info(
        "Seeded %d kegs, %d customers and %d cider types",
        created["kegs"], created["customers"], created["ciderTypes"],
    )
    return created
