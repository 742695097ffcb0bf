# ===== IMPORTS & DEPENDENCIES =====
import logging
from typing import Dict, Iterable, List, Optional, Tuple

from game_catalog.models.item import Item

# ===== CONFIGURATION & CONSTANTS =====
logger = logging.getLogger(__name__)

ItemKey = Tuple[str, str]

# ===== CORE BUSINESS LOGIC =====
class Deduplicator:
    """
    Decides which item survives when two share a (category, id) identity.

    Precedence is looked up per category first, then per source; the higher rank wins.
    Equal or undeclared ranks keep the item that was seen first.
    """

    def __init__(
        self,
        precedence: Optional[Dict[str, Dict[str, int]]] = None,
        source_ranks: Optional[Dict[str, int]] = None
    ):
        self._precedence = {category: dict(ranks) for category, ranks in (precedence or {}).items()}
        self._source_ranks = dict(source_ranks or {})

    @staticmethod
    def key(item: Item) -> ItemKey:
        return item['category'], item['id']

    def rank(self, item: Item) -> int:
        category_ranks = self._precedence.get(item['category'], {})
        if item['source_id'] in category_ranks:
            return category_ranks[item['source_id']]
        return self._source_ranks.get(item['source_id'], 0)

    def prefers(self, existing: Item, candidate: Item) -> bool:
        """True when `candidate` should replace `existing`."""
        return self.rank(candidate) > self.rank(existing)

    def merge(self, items: Iterable[Item]) -> List[Item]:
        """Collapses a sequence to one item per (category, id), keeping first-seen order of keys."""
        unique_items: Dict[ItemKey, Item] = {}
        collisions = 0
        for item in items:
            key = self.key(item)
            if key in unique_items:
                collisions += 1
                if self.prefers(unique_items[key], item):
                    unique_items[key] = item
            else:
                unique_items[key] = item
        if collisions:
            logger.debug(f"[{self.__class__.__name__}] Resolved {collisions} collisions.")
        return list(unique_items.values())
