# backend/client/autocomplete.py
from typing import Any, Dict, List, Optional

from client.queries import InventoryClient

Record = Dict[str, Any]

# Suggestions only start after this many characters
MIN_TERM_LENGTH = 2
MAX_SUGGESTIONS = 10


class ProductAutocomplete:
    """
    Product picker shared by the pico and paletizado forms.

    Typing in the code field suggests by code, typing in the description
    field suggests by description. Picking a suggestion (or typing an exact
    code or description) fills both fields and sets `selected`.
    """

    def __init__(self, client: InventoryClient):
        self.client = client
        self.code = ""
        self.description = ""
        self.selected: Optional[Record] = None

    def suggest(self, term: str, by_description: bool = False) -> List[Record]:
        term = (term or "").strip()
        if len(term) < MIN_TERM_LENGTH:
            return []

        needle = term.lower()
        field = "description" if by_description else "code"
        matches = [p for p in self.client.list_products() if needle in p[field].lower()]
        return matches[:MAX_SUGGESTIONS]

    def type_code(self, code: str) -> List[Record]:
        self.code = code
        self.selected = None
        suggestions = self.suggest(code)
        exact = self.resolve(code)
        if exact is not None:
            self.select(exact)
        return suggestions

    def type_description(self, description: str) -> List[Record]:
        self.description = description
        self.selected = None
        suggestions = self.suggest(description, by_description=True)
        exact = self.resolve(description, by_description=True)
        if exact is not None:
            self.select(exact)
        return suggestions

    def resolve(self, term: str, by_description: bool = False) -> Optional[Record]:
        """Exact, case-insensitive code (or description) match among the loaded products."""
        term = (term or "").strip().lower()
        if not term:
            return None
        field = "description" if by_description else "code"
        for product in self.client.list_products():
            if product[field].strip().lower() == term:
                return product
        return None

    def select(self, product: Record) -> Record:
        self.selected = product
        self.code = product["code"]
        self.description = product["description"]
        return product

    def clear(self) -> None:
        self.code = ""
        self.description = ""
        self.selected = None
