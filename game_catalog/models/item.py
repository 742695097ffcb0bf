# ===== TYPES & INTERFACES =====

from enum import Enum
from typing import TypedDict, Dict, List, Optional, Tuple, Union, Any

# Attribute values are kept flat so every renderer can print them directly
Scalar = Union[str, int, float, bool]

# One untouched record as decoded from an upstream JSON payload
RawRecord = Dict[str, Any]

# What an adapter's fetch() yields: the category label plus the raw record
TaggedRecord = Tuple[str, RawRecord]


class Item(TypedDict):
    """
    The unified catalog entity every source is normalized into.

    Attributes:
        id (str): Stable identity, unique within its category after deduplication.
        name (str): Display name. Records without one never become Items.
        category (str): Closed tag assigned by the adapter (e.g., 'Agent', 'Map').
        image_url (str): Primary image, or the adapter's 'no image' placeholder. Never empty.
        description (Optional[str]): Plain-text description, HTML already stripped.
        attributes (Dict[str, Scalar]): Category-specific fields (damage, rarity, team...).
        source_id (str): Which adapter produced the item. Internal, not for display.
    """
    id: str
    name: str
    category: str
    image_url: str
    description: Optional[str]
    attributes: Dict[str, Scalar]
    source_id: str


class MappedRecord(TypedDict, total=False):
    """
    The partial item an adapter's mapping function returns.
    The Normalizer turns it into a full Item by filling fallbacks.
    """
    id: Optional[str]
    name: Optional[str]
    image_url: Optional[str]
    description: Optional[str]
    attributes: Dict[str, Any]


class UpsertStats(TypedDict):
    """Counts returned by CatalogIndex.upsert_batch for one adapter batch."""
    inserted: int
    updated: int
    dropped: int


class SourceStats(TypedDict):
    """Per-adapter statistics for one aggregation pass."""
    source_id: str
    received: int
    malformed: int
    inserted: int
    updated: int
    dropped: int


class PassState(str, Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    SETTLED = "settled"


class RefreshOutcome(TypedDict):
    """
    The result of a settled pass that produced at least one batch.

    Attributes:
        status (str): 'complete' when every adapter succeeded, otherwise 'partial'.
        unavailable_sources (List[str]): source_ids of adapters that failed this pass.
        sources (List[SourceStats]): Statistics for each adapter that succeeded.
        item_count (int): Number of items in the new snapshot.
        duration_seconds (float): Wall-clock time of the pass.
    """
    status: str
    unavailable_sources: List[str]
    sources: List[SourceStats]
    item_count: int
    duration_seconds: float
