# backend/client/tables.py
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from models.product import Category
from models.users import UserRole

Record = Dict[str, Any]

ALL_CATEGORIES = "all"

CATEGORY_LABELS = {
    Category.ALTA_ROTACAO.value: "Alta Rotação",
    Category.BAIXA_ROTACAO.value: "Baixa Rotação",
}

ROLE_LABELS = {
    UserRole.ADMINISTRADOR.value: "Administrador",
    UserRole.ARMAZENISTA.value: "Armazenista",
}


def category_label(category: str) -> str:
    return CATEGORY_LABELS.get(category, category)


def role_label(role: str) -> str:
    return ROLE_LABELS.get(role, role)


def _matches(product: Record, search: str) -> bool:
    needle = search.lower()
    return needle in product["code"].lower() or needle in product["description"].lower()


def filter_products(products: Iterable[Record], search: str = "", category: str = ALL_CATEGORIES) -> List[Record]:
    """Products whose code or description contains search, optionally limited to one category."""
    return [
        p for p in products
        if _matches(p, search) and (category == ALL_CATEGORIES or p["category"] == category)
    ]


def filter_stock(rows: Iterable[Record], search: str = "") -> List[Record]:
    """Picos or paletizado rows whose joined product matches search."""
    return [row for row in rows if _matches(row["product"], search)]


# --- Role gating ---

def is_admin(user: Optional[Record]) -> bool:
    return bool(user) and user.get("role") == UserRole.ADMINISTRADOR.value


def can_manage_users(user: Optional[Record]) -> bool:
    return is_admin(user)


def can_manage_products(user: Optional[Record]) -> bool:
    return is_admin(user)


# --- Dashboard ---

def _percentage(part: int, total: int) -> int:
    # Half rounds up, as the dashboard always displayed it
    return math.floor(part / total * 100 + 0.5)


@dataclass
class DashboardView:
    total_picos: int = 0
    total_paletizados: int = 0
    alta_rotacao: int = 0
    baixa_rotacao: int = 0
    recent_entries: List[Record] = field(default_factory=list)
    recent_exits: List[Record] = field(default_factory=list)

    @classmethod
    def from_stats(cls, stats: Optional[Record]) -> "DashboardView":
        stats = stats or {}
        return cls(
            total_picos=stats.get("totalPicos") or 0,
            total_paletizados=stats.get("totalPaletizados") or 0,
            alta_rotacao=stats.get("altaRotacao") or 0,
            baixa_rotacao=stats.get("baixaRotacao") or 0,
            recent_entries=list(stats.get("recentEntries") or []),
            recent_exits=list(stats.get("recentExits") or []),
        )

    @property
    def total_products(self) -> int:
        return self.alta_rotacao + self.baixa_rotacao

    # Percentages are only shown when both categories have products
    @property
    def alta_rotacao_percent(self) -> int:
        if not (self.alta_rotacao and self.baixa_rotacao):
            return 0
        return _percentage(self.alta_rotacao, self.total_products)

    @property
    def baixa_rotacao_percent(self) -> int:
        if not (self.alta_rotacao and self.baixa_rotacao):
            return 0
        return _percentage(self.baixa_rotacao, self.total_products)
