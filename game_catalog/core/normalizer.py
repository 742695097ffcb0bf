# ===== IMPORTS & DEPENDENCIES =====
import logging
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Tuple

from game_catalog.core.errors import MalformedRecord
from game_catalog.models.item import Item, MappedRecord, Scalar, TaggedRecord
from game_catalog.utils.item_utils import clean_description, coerce_number, slugify, to_scalar

# ===== CONFIGURATION & CONSTANTS =====
logger = logging.getLogger(__name__)

# ===== CORE BUSINESS LOGIC =====
class Normalizer:
    """Turns an adapter's raw records into complete Items, filling fallbacks and dropping bad records."""

    def __init__(self, adapter):
        self.adapter = adapter
        self.source_id: str = adapter.source_id
        self.placeholder_image: str = adapter.placeholder_image
        self.numeric_attributes: Dict[str, FrozenSet[str]] = adapter.numeric_attributes
        self.received = 0
        self.malformed = 0

    def _build_attributes(self, category: str, raw_attributes: Optional[Dict[str, Any]]) -> Dict[str, Scalar]:
        numeric = self.numeric_attributes.get(category, frozenset())
        attributes: Dict[str, Scalar] = {}
        for key, value in (raw_attributes or {}).items():
            if key in numeric:
                number = coerce_number(value)
                if number is not None:
                    attributes[key] = number
                continue
            scalar = to_scalar(value)
            if scalar is not None:
                attributes[key] = scalar
        return attributes

    def normalize_record(self, category: str, mapped: MappedRecord) -> Optional[Item]:
        """Completes one mapped record. Returns None when no name can be resolved."""
        raw_name = mapped.get('name')
        name = str(raw_name).strip() if raw_name is not None else ''
        if not name:
            return None

        raw_id = mapped.get('id')
        item_id = str(raw_id).strip() if raw_id is not None else ''
        if not item_id:
            # Deterministic so repeated passes produce the same identity
            item_id = f"{slugify(category)}-{slugify(name)}"

        image_url = mapped.get('image_url')
        if not isinstance(image_url, str) or not image_url.strip():
            image_url = self.placeholder_image

        return Item(
            id=item_id,
            name=name,
            category=category,
            image_url=image_url.strip(),
            description=clean_description(mapped.get('description')),
            attributes=self._build_attributes(category, mapped.get('attributes')),
            source_id=self.source_id,
        )

    def normalize(self, category: str, raw: Any) -> Optional[Item]:
        """Applies the adapter's mapping and completes the result, counting what gets dropped."""
        self.received += 1
        if not isinstance(raw, dict):
            self.malformed += 1
            logger.debug(f"[{self.__class__.__name__}] Dropping non-object record from {self.source_id}: {type(raw).__name__}")
            return None
        try:
            mapped = self.adapter.map_record(category, raw)
            item = self.normalize_record(category, mapped) if mapped is not None else None
        except MalformedRecord as e:
            self.malformed += 1
            logger.debug(f"[{self.__class__.__name__}] {e}")
            return None
        except (AttributeError, TypeError, KeyError, ValueError, IndexError) as e:
            # An unexpected record shape only costs that record, never the batch
            self.malformed += 1
            logger.debug(f"[{self.__class__.__name__}] Malformed record from {self.source_id}: {type(e).__name__}: {e}")
            return None

        if item is None:
            self.malformed += 1
        return item

    def normalize_all(self, records: Iterable[TaggedRecord]) -> Tuple[List[Item], int]:
        """Normalizes a whole batch; returns the items and the number of records dropped."""
        items = [item for category, raw in records if (item := self.normalize(category, raw)) is not None]
        return items, self.malformed
