# ===== IMPORTS & DEPENDENCIES =====
from typing import List, Optional

from game_catalog.config import ALL_CATEGORIES
from game_catalog.core.catalog import CatalogIndex
from game_catalog.models.item import Item


# ===== CORE BUSINESS LOGIC =====
class SelectionState:
    """What the consumer currently looks at: category filter, search term and focused item. No I/O."""

    def __init__(self, active_category: str = ALL_CATEGORIES):
        self.active_category = active_category
        self.search_term = ""
        self.focused_item_id: Optional[str] = None

    def __repr__(self) -> str:
        return (f"SelectionState(active_category={self.active_category!r}, "
                f"search_term={self.search_term!r}, focused_item_id={self.focused_item_id!r})")

    def set_category(self, category: str) -> None:
        """Switching category always clears the search term and the focused item."""
        self.active_category = category
        self.search_term = ""
        self.focused_item_id = None

    def set_search(self, term: str) -> None:
        self.search_term = term

    def focus(self, item_id: Optional[str]) -> None:
        self.focused_item_id = item_id

    def visible_items(self, catalog: CatalogIndex) -> List[Item]:
        return catalog.search(self.search_term, catalog.by_category(self.active_category))

    def focused_item(self, catalog: CatalogIndex) -> Optional[Item]:
        """Resolves the focused id against `catalog`, preferring the active category."""
        if self.focused_item_id is None:
            return None
        if self.active_category != ALL_CATEGORIES:
            item = catalog.get(self.active_category, self.focused_item_id)
            if item is not None:
                return item
        return catalog.find(self.focused_item_id)
