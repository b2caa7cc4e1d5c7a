from .kegs import Keg, Activity, KEG_SIZES, KEG_STATUSES, ACTIVITY_ACTIONS
from .customers import Customer, Order, OrderItem, CustomerNote, ORDER_STATUSES, NOTE_CATEGORIES
from .production import (
    CiderType,
    CiderBatch,
    CiderIngredient,
    FermentationBatch,
    IngredientLine,
    CanFill,
    INGREDIENT_TYPES,
    MAX_LIQUID_INGREDIENTS,
    MAX_JUICES,
)
