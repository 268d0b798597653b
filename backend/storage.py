# backend/storage.py
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from models.users import User
from models.product import Product, Category
from models.pico import Pico
from models.paletizado import PaletizadoStock
from models.log import ActivityLog, ActivityType
from models.session import SessionRecord

logger = logging.getLogger(__name__)


class DatabaseStorage:
    """
    Data access for users, products, stock records and the activity log.

    Reads return None when the row does not exist. Write methods commit by
    default; pass commit=False to only flush, so the caller can group several
    writes into one transaction and commit once.
    """

    def __init__(self, db: Session):
        self.db = db

    def _save(self, obj, commit: bool):
        if commit:
            self.db.commit()
            self.db.refresh(obj)
        else:
            self.db.flush()
        return obj

    def _apply(self, obj, updates: Dict[str, Any], commit: bool):
        for field, value in updates.items():
            setattr(obj, field, value)
        return self._save(obj, commit)

    # ==================== USERS ====================

    def get_user(self, user_id: int) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    def get_user_by_username(self, username: str) -> Optional[User]:
        return self.db.query(User).filter(User.username == username).first()

    def create_user(self, data: Dict[str, Any], commit: bool = True) -> User:
        user = User(**data)
        self.db.add(user)
        return self._save(user, commit)

    def update_user(self, user: User, updates: Dict[str, Any], commit: bool = True) -> User:
        return self._apply(user, updates, commit)

    def update_user_password(self, user: User, hashed_password: str) -> User:
        return self._apply(user, {"password": hashed_password, "is_first_login": False}, True)

    def delete_user(self, user: User) -> None:
        # Drop stored sessions too; SQLite does not enforce ON DELETE CASCADE by default
        self.db.query(SessionRecord).filter(SessionRecord.user_id == user.id).delete(synchronize_session=False)
        self.db.delete(user)
        self.db.commit()

    def get_all_users(self) -> List[User]:
        return self.db.query(User).order_by(User.name).all()

    # ==================== PRODUCTS ====================

    def get_product(self, product_id: int) -> Optional[Product]:
        return self.db.query(Product).filter(Product.id == product_id).first()

    def get_product_by_code(self, code: str) -> Optional[Product]:
        return self.db.query(Product).filter(Product.code == code).first()

    def create_product(self, data: Dict[str, Any]) -> Product:
        product = Product(**data)
        self.db.add(product)
        return self._save(product, True)

    def update_product(self, product: Product, updates: Dict[str, Any]) -> Product:
        return self._apply(product, updates, True)

    def delete_product(self, product: Product) -> None:
        self.db.delete(product)
        self.db.commit()

    def get_all_products(self) -> List[Product]:
        return self.db.query(Product).order_by(Product.code).all()

    def search_products(self, query: str, limit: int = 10) -> List[Product]:
        # Wildcards typed by the user match literally
        escaped = query.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        like = f"%{escaped}%"
        return (
            self.db.query(Product)
            .filter(or_(
                Product.code.ilike(like, escape="\\"),
                Product.description.ilike(like, escape="\\"),
            ))
            .order_by(Product.code)
            .limit(limit)
            .all()
        )

    def product_in_use(self, product_id: int) -> bool:
        """True when a pico or paletizado row still references the product."""
        has_picos = self.db.query(Pico.id).filter(Pico.product_id == product_id).first() is not None
        has_stock = (
            self.db.query(PaletizadoStock.id).filter(PaletizadoStock.product_id == product_id).first()
            is not None
        )
        return has_picos or has_stock

    # ==================== PICOS ====================

    def get_pico(self, pico_id: int) -> Optional[Pico]:
        return (
            self.db.query(Pico)
            .options(joinedload(Pico.product))
            .filter(Pico.id == pico_id)
            .first()
        )

    def create_pico(self, data: Dict[str, Any], commit: bool = True) -> Pico:
        pico = Pico(**data)
        self.db.add(pico)
        return self._save(pico, commit)

    def update_pico(self, pico: Pico, updates: Dict[str, Any], commit: bool = True) -> Pico:
        return self._apply(pico, updates, commit)

    def delete_pico(self, pico: Pico, commit: bool = True) -> None:
        self.db.delete(pico)
        if commit:
            self.db.commit()
        else:
            self.db.flush()

    def get_all_picos(self) -> List[Pico]:
        return (
            self.db.query(Pico)
            .options(joinedload(Pico.product))
            .order_by(Pico.created_at.desc(), Pico.id.desc())
            .all()
        )

    # ==================== PALETIZADO STOCK ====================

    def get_paletizado_stock(self, stock_id: int) -> Optional[PaletizadoStock]:
        return (
            self.db.query(PaletizadoStock)
            .options(joinedload(PaletizadoStock.product))
            .filter(PaletizadoStock.id == stock_id)
            .first()
        )

    def get_paletizado_stock_by_product_id(self, product_id: int) -> Optional[PaletizadoStock]:
        return (
            self.db.query(PaletizadoStock)
            .options(joinedload(PaletizadoStock.product))
            .filter(PaletizadoStock.product_id == product_id)
            .first()
        )

    def create_paletizado_stock(self, data: Dict[str, Any], commit: bool = True) -> PaletizadoStock:
        stock = PaletizadoStock(**data)
        self.db.add(stock)
        return self._save(stock, commit)

    def update_paletizado_stock(self, stock: PaletizadoStock, updates: Dict[str, Any], commit: bool = True) -> PaletizadoStock:
        return self._apply(stock, updates, commit)

    def delete_paletizado_stock(self, stock: PaletizadoStock, commit: bool = True) -> None:
        self.db.delete(stock)
        if commit:
            self.db.commit()
        else:
            self.db.flush()

    def get_all_paletizado_stock(self) -> List[PaletizadoStock]:
        return (
            self.db.query(PaletizadoStock)
            .options(joinedload(PaletizadoStock.product))
            .order_by(PaletizadoStock.created_at.desc(), PaletizadoStock.id.desc())
            .all()
        )

    def _add_to_stock(self, product_id: int, delta: int) -> int:
        return (
            self.db.query(PaletizadoStock)
            .filter(PaletizadoStock.product_id == product_id)
            .update(
                {
                    PaletizadoStock.quantity: PaletizadoStock.quantity + delta,
                    PaletizadoStock.updated_at: func.now(),
                },
                synchronize_session=False,
            )
        )

    def increment_paletizado_stock(self, product_id: int, delta: int) -> PaletizadoStock:
        """
        Add delta to the product's stock row, creating the row when missing.

        The increment runs as a single UPDATE in the database, and the insert
        is guarded by the unique constraint on product_id: when a concurrent
        request inserted first, the insert is rolled back and the UPDATE is
        repeated. Must be the first write of the unit of work, since the
        conflict path rolls the session back. Nothing is committed here.
        """
        if not self._add_to_stock(product_id, delta):
            try:
                self.db.add(PaletizadoStock(product_id=product_id, quantity=delta))
                self.db.flush()
            except IntegrityError:
                self.db.rollback()
                logger.info("Concurrent stock insert for product %s, retrying as update", product_id)
                self._add_to_stock(product_id, delta)

        return (
            self.db.query(PaletizadoStock)
            .populate_existing()
            .filter(PaletizadoStock.product_id == product_id)
            .one()
        )

    # ==================== ACTIVITY LOG ====================

    def create_activity_log(self, data: Dict[str, Any], commit: bool = True) -> ActivityLog:
        entry = ActivityLog(**data)
        self.db.add(entry)
        return self._save(entry, commit)

    def get_recent_activity(self, limit: int = 10, type: Optional[ActivityType] = None) -> List[ActivityLog]:
        query = self.db.query(ActivityLog)
        if type is not None:
            query = query.filter(ActivityLog.type == type.value)
        return query.order_by(ActivityLog.created_at.desc(), ActivityLog.id.desc()).limit(limit).all()

    # ==================== DASHBOARD ====================

    def get_dashboard_stats(self) -> Dict[str, Any]:
        total_picos = self.db.query(func.count(Pico.id)).scalar() or 0
        total_paletizados = self.db.query(func.count(PaletizadoStock.id)).scalar() or 0

        # Products per category in one grouped query
        by_category = dict(
            self.db.query(Product.category, func.count(Product.id)).group_by(Product.category).all()
        )

        return {
            "total_picos": total_picos,
            "total_paletizados": total_paletizados,
            "alta_rotacao": by_category.get(Category.ALTA_ROTACAO, 0),
            "baixa_rotacao": by_category.get(Category.BAIXA_ROTACAO, 0),
            "recent_entries": self.get_recent_activity(5, ActivityType.ENTRY),
            "recent_exits": self.get_recent_activity(5, ActivityType.EXIT),
        }
