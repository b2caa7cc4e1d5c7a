from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from kegtrack.time_utils import to_utc_z


INGREDIENT_TYPES = ("malt", "hops", "yeast", "adjunct", "fruit", "spice", "other")
MAX_LIQUID_INGREDIENTS = 5
MAX_JUICES = 3


def decimal_str(value: Decimal | None) -> str | None:
    # Measurements go over the wire as strings so no precision is lost.
    return None if value is None else str(value)


@dataclass
class CiderType:
    id: str
    name: str
    description: str | None = None
    style: str | None = None
    abv: Decimal | None = None
    ibu: int | None = None
    srm: Decimal | None = None
    is_active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "style": self.style,
            "abv": decimal_str(self.abv),
            "ibu": self.ibu,
            "srm": decimal_str(self.srm),
            "isActive": self.is_active,
            "createdAt": to_utc_z(self.created_at),
            "updatedAt": to_utc_z(self.updated_at),
        }


@dataclass(frozen=True)
class IngredientLine:
    """A liquid ingredient or juice added to a batch, by type and volume."""
    type: str
    volume: Decimal | None = None

    def to_dict(self) -> dict:
        return {"type": self.type, "volume": decimal_str(self.volume)}


@dataclass(frozen=True)
class CanFill:
    date: datetime
    quantity: int

    def to_dict(self) -> dict:
        return {"date": to_utc_z(self.date), "quantity": self.quantity}


@dataclass
class CiderBatch:
    """
    One production run of a cider type: ingredients in, packaging out.
    """
    id: str
    cider_type_id: str
    batch_number: str
    date: datetime | None = None
    brix: Decimal | None = None
    liquid_ingredients: list[IngredientLine] = field(default_factory=list)
    juices: list[IngredientLine] = field(default_factory=list)
    pounds_sugar: Decimal | None = None
    additional_ingredient_notes: str | None = None
    batch_notes: str | None = None
    half_barrels_packaged: int = 0
    sixth_barrels_packaged: int = 0
    cans_filled: list[CanFill] = field(default_factory=list)
    product_lost_during_packaging: Decimal = Decimal("0")
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def total_cans_filled(self) -> int:
        return sum(fill.quantity for fill in self.cans_filled)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "ciderTypeId": self.cider_type_id,
            "batchNumber": self.batch_number,
            "date": to_utc_z(self.date),
            "brix": decimal_str(self.brix),
            "liquidIngredients": [line.to_dict() for line in self.liquid_ingredients],
            "juices": [line.to_dict() for line in self.juices],
            "poundsSugar": decimal_str(self.pounds_sugar),
            "additionalIngredientNotes": self.additional_ingredient_notes,
            "batchNotes": self.batch_notes,
            "halfBarrelsPackaged": self.half_barrels_packaged,
            "sixthBarrelsPackaged": self.sixth_barrels_packaged,
            "cansFilled": [fill.to_dict() for fill in self.cans_filled],
            "totalCansFilled": self.total_cans_filled,
            "productLostDuringPackaging": decimal_str(self.product_lost_during_packaging),
            "createdAt": to_utc_z(self.created_at),
            "updatedAt": to_utc_z(self.updated_at),
        }


@dataclass
class CiderIngredient:
    id: str
    batch_id: str
    ingredient_name: str
    ingredient_type: str
    quantity: Decimal | None = None
    unit: str | None = None
    supplier: str | None = None
    notes: str | None = None
    created_at: datetime | None = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "batchId": self.batch_id,
            "ingredientName": self.ingredient_name,
            "ingredientType": self.ingredient_type,
            "quantity": decimal_str(self.quantity),
            "unit": self.unit,
            "supplier": self.supplier,
            "notes": self.notes,
            "createdAt": to_utc_z(self.created_at),
        }


@dataclass
class FermentationBatch:
    """Process parameters measured on one fermentation vessel."""
    id: str
    fermentation_id: str
    date: datetime
    volume: Decimal
    incoming_juice_id: str | None = None
    incoming_juice_volume: Decimal | None = None
    juice_source: str | None = None
    brix: Decimal | None = None
    abv: Decimal | None = None
    sulfite_added: Decimal | None = None  # grams
    yeast_strain: str | None = None
    yeast_weight: Decimal | None = None  # grams
    ph: Decimal | None = None
    titratable_acidity: Decimal | None = None
    copper_sulfate_added: Decimal | None = None  # ml
    racking_dates: list[datetime] = field(default_factory=list)
    notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "fermentationId": self.fermentation_id,
            "date": to_utc_z(self.date),
            "volume": decimal_str(self.volume),
            "incomingJuiceId": self.incoming_juice_id,
            "incomingJuiceVolume": decimal_str(self.incoming_juice_volume),
            "juiceSource": self.juice_source,
            "brix": decimal_str(self.brix),
            "abv": decimal_str(self.abv),
            "sulfiteAdded": decimal_str(self.sulfite_added),
            "yeastStrain": self.yeast_strain,
            "yeastWeight": decimal_str(self.yeast_weight),
            "ph": decimal_str(self.ph),
            "titratableAcidity": decimal_str(self.titratable_acidity),
            "copperSulfateAdded": decimal_str(self.copper_sulfate_added),
            "rackingDates": [to_utc_z(d) for d in self.racking_dates],
            "notes": self.notes,
            "createdAt": to_utc_z(self.created_at),
            "updatedAt": to_utc_z(self.updated_at),
        }
