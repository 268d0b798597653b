# backend/routes/picos.py
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from database import get_db
from models.log import ActivityType, ItemType
from models.pico import Pico
from models.users import User
from schemas.base import MessageResponse
import schemas.stock as stock_schemas
from storage import DatabaseStorage
from utils.audit import write_activity
from utils.session import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/picos", tags=["Picos"])


def compute_total_units(bases: int, loose_units: int, units_per_base: int) -> int:
    return bases * units_per_base + loose_units


def _get_pico_or_404(storage: DatabaseStorage, pico_id: int) -> Pico:
    pico = storage.get_pico(pico_id)
    if not pico:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Pico not found")
    return pico


@router.get("", response_model=List[stock_schemas.PicoWithProduct])
def list_picos(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return DatabaseStorage(db).get_all_picos()


@router.get("/{pico_id}", response_model=stock_schemas.PicoWithProduct)
def get_pico(
    pico_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return _get_pico_or_404(DatabaseStorage(db), pico_id)


# Register a pico and its "entry" activity in one transaction
@router.post("", response_model=stock_schemas.PicoResponse)
def create_pico(
    payload: stock_schemas.PicoCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    storage = DatabaseStorage(db)
    product = storage.get_product_by_code(payload.product_code)
    if not product:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")

    total_units = compute_total_units(payload.bases, payload.loose_units, product.units_per_base)

    pico = storage.create_pico(
        {
            "product_id": product.id,
            "bases": payload.bases,
            "loose_units": payload.loose_units,
            "total_units": total_units,
            "tower_location": payload.tower_location,
        },
        commit=False,
    )
    write_activity(storage, type=ActivityType.ENTRY, product=product, quantity=total_units, item_type=ItemType.PICO)
    db.commit()
    db.refresh(pico)

    logger.info("Pico %s created for %s at tower %s by %s", pico.id, product.code, pico.tower_location, current_user.username)
    return pico


# Partial update; total_units is recomputed from the merged values
@router.put("/{pico_id}", response_model=stock_schemas.PicoResponse)
def update_pico(
    pico_id: int,
    payload: stock_schemas.PicoUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    storage = DatabaseStorage(db)
    pico = _get_pico_or_404(storage, pico_id)

    updates = payload.model_dump(exclude_unset=True, exclude_none=True)
    bases = updates.get("bases", pico.bases)
    loose_units = updates.get("loose_units", pico.loose_units)
    updates["total_units"] = compute_total_units(bases, loose_units, pico.product.units_per_base)

    return storage.update_pico(pico, updates)


# Remove a pico and log an "exit" with the quantity it held
@router.delete("/{pico_id}", response_model=MessageResponse)
def delete_pico(
    pico_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    storage = DatabaseStorage(db)
    pico = _get_pico_or_404(storage, pico_id)

    product, total_units = pico.product, pico.total_units
    storage.delete_pico(pico, commit=False)
    write_activity(storage, type=ActivityType.EXIT, product=product, quantity=total_units, item_type=ItemType.PICO)
    db.commit()

    logger.info("Pico %s removed by %s", pico_id, current_user.username)
    return {"message": "Pico removed successfully"}
