# ===== IMPORTS & DEPENDENCIES =====
import logging
from typing import Dict, Iterable, List, Optional, Sequence

from game_catalog.config import ALL_CATEGORIES
from game_catalog.core.deduplicator import Deduplicator, ItemKey
from game_catalog.models.item import Item, UpsertStats

# ===== CONFIGURATION & CONSTANTS =====
logger = logging.getLogger(__name__)

# ===== CORE BUSINESS LOGIC =====
class CatalogIndex:
    """
    Holds the normalized, de-duplicated items of one aggregation pass.

    The orchestrator fills a fresh index during a pass and seals it when the pass
    settles. A sealed index is the read-only snapshot the view layer queries.
    """

    def __init__(self, deduplicator: Optional[Deduplicator] = None):
        self._deduplicator = deduplicator or Deduplicator()
        self._items: Dict[ItemKey, Item] = {}
        self._sorted: Optional[List[Item]] = None
        self._sealed = False

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, key: object) -> bool:
        return key in self._items

    @property
    def sealed(self) -> bool:
        return self._sealed

    def seal(self) -> 'CatalogIndex':
        """Freezes the index; later upserts raise RuntimeError."""
        self._sealed = True
        return self

    def upsert_batch(self, items: Iterable[Item]) -> UpsertStats:
        """Merges one adapter's batch into the working set, applying the deduplication rule."""
        if self._sealed:
            raise RuntimeError("Cannot modify a sealed catalog snapshot")

        stats = UpsertStats(inserted=0, updated=0, dropped=0)
        for item in items:
            key = self._deduplicator.key(item)
            existing = self._items.get(key)
            if existing is None:
                self._items[key] = item
                stats['inserted'] += 1
            elif self._deduplicator.prefers(existing, item):
                self._items[key] = item
                stats['updated'] += 1
            else:
                stats['dropped'] += 1

        if stats['inserted'] or stats['updated']:
            self._sorted = None
        return stats

    def _all_sorted(self) -> List[Item]:
        if self._sorted is None:
            self._sorted = sorted(self._items.values(), key=lambda i: (i['name'].casefold(), i['id']))
        return self._sorted

    @staticmethod
    def _detached(item: Item) -> Item:
        """Copy handed to readers so edits never reach the snapshot or its sort order."""
        detached = Item(**item)
        detached['attributes'] = dict(item['attributes'])
        return detached

    def by_category(self, category: str = ALL_CATEGORIES) -> List[Item]:
        """Items of `category` (or every item for 'All'), sorted case-insensitively by name."""
        return [
            self._detached(item) for item in self._all_sorted()
            if category == ALL_CATEGORIES or item['category'] == category
        ]

    @staticmethod
    def search(term: str, within: Sequence[Item]) -> List[Item]:
        """Case-insensitive substring match on name. An empty term returns `within` unchanged."""
        if not term or not term.strip():
            return list(within)
        needle = term.casefold()
        return [item for item in within if needle in item['name'].casefold()]

    def categories(self) -> List[str]:
        """'All' followed by every category present, sorted."""
        return [ALL_CATEGORIES] + sorted({item['category'] for item in self._items.values()})

    def get(self, category: str, item_id: str) -> Optional[Item]:
        item = self._items.get((category, item_id))
        return self._detached(item) if item is not None else None

    def find(self, item_id: str) -> Optional[Item]:
        """Looks an id up across categories; the first match in sorted order wins."""
        for item in self._all_sorted():
            if item['id'] == item_id:
                return self._detached(item)
        return None
