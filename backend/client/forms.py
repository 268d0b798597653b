# backend/client/forms.py
"""
Form controllers for the user, product, pico and paletizado dialogs.

Each form holds the editable values, checks them locally before any request
(raising FormError), and submits through InventoryClient. Validation reuses
the server's pydantic schemas so both sides apply the same rules.
"""
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional

from pydantic import BaseModel, ValidationError

from client.queries import InventoryClient
from models.product import Category
from models.users import UserRole
from schemas.product import ProductCreate, ProductUpdate
from schemas.stock import (
    PaletizadoStockCreate, PaletizadoStockUpdate, PicoCreate, PicoUpdate, TOWER_PATTERN,
)
from schemas.user import PasswordChange, UserCreate, UserLogin, UserUpdate

Record = Dict[str, Any]


class FormError(ValueError):
    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field


def _payload(schema: type, data: Dict[str, Any], **dump_options) -> Dict[str, Any]:
    """Validate data with schema and return the camelCase request body."""
    try:
        model: BaseModel = schema.model_validate(data)
    except ValidationError as e:
        first = e.errors()[0]
        loc = first.get("loc") or ()
        raise FormError(first["msg"], str(loc[-1]) if loc else None) from e
    return model.model_dump(mode="json", by_alias=True, **dump_options)


def pad_tower(raw: str) -> str:
    """Normalise tower input: digits only, at most two, left-padded with zeros."""
    digits = re.sub(r"\D", "", raw or "")[:2]
    return digits.rjust(2, "0") if digits else ""


def total_units(bases: int, loose_units: int, units_per_base: int) -> int:
    return bases * units_per_base + loose_units


# ==================== AUTH ====================

@dataclass
class LoginForm:
    username: str = ""
    password: str = ""

    def submit(self, client: InventoryClient) -> Record:
        body = _payload(UserLogin, {"username": self.username, "password": self.password})
        return client.login(body["username"], body["password"])


@dataclass
class PasswordChangeForm:
    new_password: str = ""
    confirm_password: str = ""

    def submit(self, client: InventoryClient) -> Record:
        if self.new_password != self.confirm_password:
            raise FormError("Passwords do not match", "confirmPassword")
        body = _payload(PasswordChange, {"new_password": self.new_password, "confirm_password": self.confirm_password})
        return client.change_password(body["newPassword"], body["confirmPassword"])


# ==================== USERS ====================

@dataclass
class UserForm:
    name: str = ""
    nickname: str = ""
    username: str = ""
    password: str = ""
    role: UserRole = UserRole.ARMAZENISTA
    user: Optional[Record] = None  # record being edited

    @classmethod
    def for_edit(cls, user: Record) -> "UserForm":
        # The password field starts empty; leaving it empty keeps the current one
        return cls(
            name=user["name"],
            nickname=user["nickname"],
            username=user["username"],
            role=UserRole(user["role"]),
            user=user,
        )

    def payload(self) -> Record:
        data = {"name": self.name, "nickname": self.nickname, "username": self.username, "role": self.role}
        if self.user is None:
            if not self.password:
                raise FormError("Password is required for new users", "password")
            return _payload(UserCreate, {**data, "password": self.password})
        if self.password:
            data["password"] = self.password
        for required in ("name", "nickname", "username"):
            if not data[required]:
                raise FormError("Field is required", required)
        return _payload(UserUpdate, data, exclude_none=True)

    def submit(self, client: InventoryClient) -> Record:
        if self.user is None:
            return client.create_user(self.payload())
        return client.update_user(self.user["id"], self.payload())


# ==================== PRODUCTS ====================

@dataclass
class ProductForm:
    code: str = ""
    description: str = ""
    quantity_bases: int = 0
    units_per_base: int = 0
    category: Category = Category.BAIXA_ROTACAO
    product: Optional[Record] = None

    @classmethod
    def for_edit(cls, product: Record) -> "ProductForm":
        return cls(
            code=product["code"],
            description=product["description"],
            quantity_bases=product["quantityBases"],
            units_per_base=product["unitsPerBase"],
            category=Category(product["category"]),
            product=product,
        )

    @property
    def category_locked(self) -> bool:
        return self.product is not None

    def payload(self) -> Record:
        data = {
            "code": self.code,
            "description": self.description,
            "quantity_bases": self.quantity_bases,
            "units_per_base": self.units_per_base,
        }
        if self.product is None:
            return _payload(ProductCreate, {**data, "category": self.category})
        # Category is fixed after creation and never sent on edit
        return _payload(ProductUpdate, data, exclude_none=True)

    def submit(self, client: InventoryClient) -> Record:
        if self.product is None:
            return client.create_product(self.payload())
        return client.update_product(self.product["id"], self.payload())


# ==================== PICOS ====================

@dataclass
class PicoForm:
    product: Optional[Record] = None  # selected through ProductAutocomplete
    bases: int = 0
    loose_units: int = 0
    tower_location: str = ""
    pico: Optional[Record] = None

    @classmethod
    def for_edit(cls, pico: Record) -> "PicoForm":
        return cls(
            product=pico["product"],
            bases=pico["bases"],
            loose_units=pico["looseUnits"],
            tower_location=pico.get("towerLocation") or "",
            pico=pico,
        )

    def set_tower(self, raw: str) -> None:
        self.tower_location = pad_tower(raw)

    @property
    def total_units(self) -> int:
        """Preview of the total the server will compute."""
        if self.product is None:
            return 0
        return total_units(self.bases, self.loose_units, self.product["unitsPerBase"])

    def payload(self) -> Record:
        if self.product is None:
            raise FormError("Select a valid product", "productCode")
        if self.bases < 0 or self.loose_units < 0:
            raise FormError("Quantities cannot be negative", "bases" if self.bases < 0 else "looseUnits")
        if self.bases == 0 and self.loose_units == 0:
            raise FormError("Enter at least one base or loose unit", "bases")
        if not re.match(TOWER_PATTERN, self.tower_location or ""):
            raise FormError("Tower must have exactly 2 digits (e.g. 01, 12)", "towerLocation")

        data = {"bases": self.bases, "loose_units": self.loose_units, "tower_location": self.tower_location}
        if self.pico is None:
            return _payload(PicoCreate, {**data, "product_code": self.product["code"]})
        return _payload(PicoUpdate, data, exclude_none=True)

    def submit(self, client: InventoryClient) -> Record:
        if self.pico is None:
            return client.create_pico(self.payload())
        return client.update_pico(self.pico["id"], self.payload())

    def remove(self, client: InventoryClient) -> Record:
        if self.pico is None:
            raise FormError("Nothing to remove")
        return client.delete_pico(self.pico["id"])


# ==================== PALETIZADO STOCK ====================

@dataclass
class PaletizadoForm:
    product: Optional[Record] = None
    quantity: int = 0
    stock: Optional[Record] = None

    @classmethod
    def for_edit(cls, stock: Record) -> "PaletizadoForm":
        return cls(product=stock["product"], quantity=stock["quantity"], stock=stock)

    def payload(self) -> Record:
        if self.product is None:
            raise FormError("Select a valid product", "productCode")
        if self.quantity <= 0:
            raise FormError("Quantity must be greater than zero", "quantity")
        if self.stock is None:
            return _payload(PaletizadoStockCreate, {"product_code": self.product["code"], "quantity": self.quantity})
        return _payload(PaletizadoStockUpdate, {"quantity": self.quantity})

    def submit(self, client: InventoryClient) -> Record:
        if self.stock is None:
            return client.create_paletizado_stock(self.payload())
        return client.update_paletizado_stock(self.stock["id"], self.payload())

    def remove(self, client: InventoryClient) -> Record:
        if self.stock is None:
            raise FormError("Nothing to remove")
        return client.delete_paletizado_stock(self.stock["id"])
