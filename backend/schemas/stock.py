# backend/schemas/stock.py
from datetime import datetime
from pydantic import Field
from typing import List, Optional

from models.log import ActivityType, ItemType
from models.product import Category
from schemas.base import ORMBase
from schemas.product import ProductResponse

# Tower slots are exactly two digits, e.g. "01", "12"
TOWER_PATTERN = r"^\d{2}$"


# --- Picos ---

class PicoCreate(ORMBase):
    product_code: str = Field(min_length=1)
    bases: int = Field(0, ge=0)
    loose_units: int = Field(0, ge=0)
    tower_location: str = Field(pattern=TOWER_PATTERN)

# Omitted fields keep their stored values; total_units is always recomputed
class PicoUpdate(ORMBase):
    bases: Optional[int] = Field(None, ge=0)
    loose_units: Optional[int] = Field(None, ge=0)
    tower_location: Optional[str] = Field(None, pattern=TOWER_PATTERN)

class PicoResponse(ORMBase):
    id: int
    product_id: int
    bases: int
    loose_units: int
    total_units: int
    tower_location: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class PicoWithProduct(PicoResponse):
    product: ProductResponse


# --- Paletizado stock ---

# Adds to the product's existing stock row when there is one
class PaletizadoStockCreate(ORMBase):
    product_code: str = Field(min_length=1)
    quantity: int = Field(gt=0)

# Sets the absolute quantity
class PaletizadoStockUpdate(ORMBase):
    quantity: int = Field(ge=0)

class PaletizadoStockResponse(ORMBase):
    id: int
    product_id: int
    quantity: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class PaletizadoStockWithProduct(PaletizadoStockResponse):
    product: ProductResponse


# --- Activity log & dashboard ---

class ActivityLogResponse(ORMBase):
    id: int
    type: ActivityType
    product_code: str
    product_description: str
    quantity: int
    category: Category
    item_type: ItemType
    created_at: Optional[datetime] = None

class DashboardStats(ORMBase):
    total_picos: int
    total_paletizados: int
    alta_rotacao: int
    baixa_rotacao: int
    recent_entries: List[ActivityLogResponse]
    recent_exits: List[ActivityLogResponse]
