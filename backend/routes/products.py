# backend/routes/products.py
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from database import get_db
from models.product import Product
from models.users import User
from schemas.base import MessageResponse
import schemas.product as product_schemas
from storage import DatabaseStorage
from utils.session import get_current_user, require_admin

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/products", tags=["Products"])

SEARCH_LIMIT = 10


def _get_product_or_404(storage: DatabaseStorage, product_id: int) -> Product:
    product = storage.get_product(product_id)
    if not product:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    return product


# =========================
# PRODUCT LIST
# =========================
@router.get("", response_model=List[product_schemas.ProductResponse])
def list_products(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return DatabaseStorage(db).get_all_products()


# Code or description contains q, case-insensitive; declared before /{product_id}
@router.get("/search", response_model=List[product_schemas.ProductResponse])
def search_products(
    q: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if not q or not q.strip():
        return []
    return DatabaseStorage(db).search_products(q.strip(), limit=SEARCH_LIMIT)


# =========================
# SINGLE PRODUCT
# =========================
@router.get("/{product_id}", response_model=product_schemas.ProductResponse)
def get_product(
    product_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return _get_product_or_404(DatabaseStorage(db), product_id)


# =========================
# CREATE PRODUCT
# =========================
@router.post("", response_model=product_schemas.ProductResponse)
def create_product(
    payload: product_schemas.ProductCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    storage = DatabaseStorage(db)
    if storage.get_product_by_code(payload.code):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Product code already exists")

    product = storage.create_product(payload.model_dump())
    logger.info("Product %s created by %s", product.code, current_user.username)
    return product


# =========================
# UPDATE PRODUCT
# =========================
@router.put("/{product_id}", response_model=product_schemas.ProductResponse)
def update_product(
    product_id: int,
    payload: product_schemas.ProductUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    storage = DatabaseStorage(db)
    product = _get_product_or_404(storage, product_id)

    updates = payload.model_dump(exclude_unset=True, exclude_none=True)

    # Category is fixed at creation; resending the current value is allowed
    category = updates.pop("category", None)
    if category is not None and category != product.category:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Product category cannot be changed")

    if "code" in updates and updates["code"] != product.code:
        if storage.get_product_by_code(updates["code"]):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Product code already exists")

    return storage.update_product(product, updates)


# =========================
# DELETE PRODUCT
# =========================
@router.delete("/{product_id}", response_model=MessageResponse)
def delete_product(
    product_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    storage = DatabaseStorage(db)
    product = _get_product_or_404(storage, product_id)

    if storage.product_in_use(product.id):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Product still has stock records")

    code = product.code
    storage.delete_product(product)
    logger.info("Product %s deleted by %s", code, current_user.username)

    return {"message": "Product deleted successfully"}
