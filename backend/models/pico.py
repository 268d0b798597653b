from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, func
from sqlalchemy.orm import relationship
from database import Base

# Partial pallet stack of a product stored at a two-digit tower slot
class Pico(Base):
    __tablename__ = "picos"

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)

    bases = Column(Integer, nullable=False, default=0)
    loose_units = Column(Integer, nullable=False, default=0)
    # bases * product.units_per_base + loose_units, written by the caller
    total_units = Column(Integer, nullable=False)

    tower_location = Column(String(2), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    product = relationship("Product", back_populates="picos")
