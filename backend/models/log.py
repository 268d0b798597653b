import enum
from sqlalchemy import Column, Integer, String, DateTime, Enum, func
from database import Base
from models.product import Category


class ActivityType(str, enum.Enum):
    ENTRY = "entry"
    EXIT = "exit"


class ItemType(str, enum.Enum):
    PICO = "pico"
    PALETIZADO = "paletizado"


# Append-only record of stock entries and exits.
# Product fields are copied so rows survive the product being deleted.
class ActivityLog(Base):
    __tablename__ = "activity_log"

    id = Column(Integer, primary_key=True, index=True)
    type = Column(String, nullable=False, index=True)
    product_code = Column(String, nullable=False)
    product_description = Column(String, nullable=False)
    quantity = Column(Integer, nullable=False)
    category = Column(
        Enum(Category, name="category", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    item_type = Column(String, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
