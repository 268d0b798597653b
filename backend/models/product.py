import enum
from sqlalchemy import Column, Integer, String, DateTime, Enum, CheckConstraint, func
from sqlalchemy.orm import relationship
from database import Base

# Turnover category, fixed when the product is created
class Category(str, enum.Enum):
    ALTA_ROTACAO = "alta_rotacao"
    BAIXA_ROTACAO = "baixa_rotacao"

# Model Product
# Catalog entry for a palletized product: code, description and the
# pallet geometry (bases per pallet, units per base) used by stock records.
class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    code = Column(String, unique=True, nullable=False, index=True)
    description = Column(String, nullable=False)

    quantity_bases = Column(Integer, CheckConstraint("quantity_bases >= 0"), nullable=False)
    units_per_base = Column(Integer, CheckConstraint("units_per_base > 0"), nullable=False)

    category = Column(
        Enum(Category, name="category", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    picos = relationship("Pico", back_populates="product")
    paletizado_stock = relationship("PaletizadoStock", back_populates="product")
