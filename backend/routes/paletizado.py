# backend/routes/paletizado.py
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from database import get_db
from models.log import ActivityType, ItemType
from models.paletizado import PaletizadoStock
from models.users import User
from schemas.base import MessageResponse
import schemas.stock as stock_schemas
from storage import DatabaseStorage
from utils.audit import write_activity
from utils.session import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/paletizado-stock", tags=["Paletizado stock"])


def _get_stock_or_404(storage: DatabaseStorage, stock_id: int) -> PaletizadoStock:
    stock = storage.get_paletizado_stock(stock_id)
    if not stock:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Stock not found")
    return stock


@router.get("", response_model=List[stock_schemas.PaletizadoStockWithProduct])
def list_stock(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return DatabaseStorage(db).get_all_paletizado_stock()


@router.get("/{stock_id}", response_model=stock_schemas.PaletizadoStockWithProduct)
def get_stock(
    stock_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return _get_stock_or_404(DatabaseStorage(db), stock_id)


# Receive pallets: adds to the product's stock row (created on first entry)
@router.post("", response_model=stock_schemas.PaletizadoStockResponse)
def receive_stock(
    payload: stock_schemas.PaletizadoStockCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    storage = DatabaseStorage(db)
    product = storage.get_product_by_code(payload.product_code)
    if not product:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    product_id = product.id

    stock = storage.increment_paletizado_stock(product_id, payload.quantity)
    # The increment may have rolled back a conflicting insert; reload the product
    product = storage.get_product(product_id)
    write_activity(storage, type=ActivityType.ENTRY, product=product, quantity=payload.quantity, item_type=ItemType.PALETIZADO)
    db.commit()
    db.refresh(stock)

    logger.info("Stock for %s +%s (now %s) by %s", product.code, payload.quantity, stock.quantity, current_user.username)
    return stock


# Set the absolute quantity of a stock row
@router.put("/{stock_id}", response_model=stock_schemas.PaletizadoStockResponse)
def update_stock(
    stock_id: int,
    payload: stock_schemas.PaletizadoStockUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    storage = DatabaseStorage(db)
    stock = _get_stock_or_404(storage, stock_id)
    return storage.update_paletizado_stock(stock, {"quantity": payload.quantity})


# Remove a stock row and log an "exit" with its last quantity
@router.delete("/{stock_id}", response_model=MessageResponse)
def delete_stock(
    stock_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    storage = DatabaseStorage(db)
    stock = _get_stock_or_404(storage, stock_id)

    product, quantity = stock.product, stock.quantity
    storage.delete_paletizado_stock(stock, commit=False)
    write_activity(storage, type=ActivityType.EXIT, product=product, quantity=quantity, item_type=ItemType.PALETIZADO)
    db.commit()

    logger.info("Stock %s removed by %s", stock_id, current_user.username)
    return {"message": "Stock removed successfully"}
