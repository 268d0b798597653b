# backend/schemas/product.py
from datetime import datetime
from pydantic import Field, field_validator
from typing import Optional

from models.product import Category
from schemas.base import ORMBase


def _strip_required(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("must not be blank")
    return v


# Shared base attributes for product entities
class ProductBase(ORMBase):
    code: str = Field(min_length=1)
    description: str = Field(min_length=1)
    quantity_bases: int = Field(ge=0)
    units_per_base: int = Field(gt=0)
    category: Category

    @field_validator("code", "description")
    @classmethod
    def strip_text(cls, v: str) -> str:
        return _strip_required(v)


# Schema for creating a new product
class ProductCreate(ProductBase):
    pass


# Schema for partial product updates
class ProductUpdate(ORMBase):
    """All fields optional. Category may be echoed back but not changed."""
    code: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = Field(None, min_length=1)
    quantity_bases: Optional[int] = Field(None, ge=0)
    units_per_base: Optional[int] = Field(None, gt=0)
    category: Optional[Category] = None

    @field_validator("code", "description")
    @classmethod
    def strip_text(cls, v: Optional[str]) -> Optional[str]:
        # Omitted fields stay None; sent ones must not be blank
        return None if v is None else _strip_required(v)


# Full product representation including ID
class ProductResponse(ProductBase):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
