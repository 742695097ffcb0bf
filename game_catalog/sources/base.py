# ===== IMPORTS & DEPENDENCIES =====
import logging
import asyncio
import aiohttp
import os
from typing import AsyncIterator, Any, Dict, FrozenSet, Iterable, List, Optional, Sequence

from game_catalog.core.base_client import BaseWebClient
from game_catalog.core.errors import SourceUnavailable
from game_catalog.models.item import MappedRecord, RawRecord, TaggedRecord
from game_catalog.config import CACHE_DIR, DEFAULT_CACHE_TTL, NO_IMAGE_PLACEHOLDER

# ===== CONFIGURATION & CONSTANTS =====
logger = logging.getLogger(__name__)

# ===== CORE BUSINESS LOGIC =====
class SourceAdapter(BaseWebClient):
    """
    Translates one upstream JSON API into the unified Item model.

    Subclasses declare their URL(s), the category they tag, and `map_record`.
    `fetch()` is an async generator: it is lazy, finite, and must be called
    again for every refresh.
    """

    # Key path to the item collection inside each payload, e.g. ('data', 'entries')
    envelope: Sequence[str] = ()
    placeholder_image: str = NO_IMAGE_PLACEHOLDER
    # {category: attribute names that must be numbers}
    numeric_attributes: Dict[str, FrozenSet[str]] = {}

    def __init__(
        self,
        session: aiohttp.ClientSession,
        source_id: str,
        category: str,
        urls: Sequence[str],
        headers: Optional[Dict[str, str]] = None,
        precedence: int = 0,
        cache_ttl: int = DEFAULT_CACHE_TTL,
        **client_options: Any
    ):
        super().__init__(
            session=session,
            cache_dir=os.path.join(CACHE_DIR, source_id.replace(':', '_')),
            cache_ttl=cache_ttl,
            name=source_id,
            **client_options
        )
        self.source_id = source_id
        self.category = category
        self.urls = list(urls)
        self.headers = dict(headers or {})
        self.precedence = precedence

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.source_id} ({self.category})>"

    async def _fetch_payloads(self) -> List[Any]:
        """Fetches every declared URL concurrently; any failure fails the whole adapter."""
        tasks = [self._fetch(url, headers=self.headers) for url in self.urls]
        return list(await asyncio.gather(*tasks))

    def extract_records(self, payload: Any) -> Iterable[RawRecord]:
        """
        Unwraps the envelope and returns the item collection.
        Accepts a top-level array or an object whose values form the collection.
        """
        collection = payload
        for key in self.envelope:
            if not isinstance(collection, dict) or key not in collection:
                raise SourceUnavailable(self.source_id, detail=f"payload is missing '{'.'.join(self.envelope)}'")
            collection = collection[key]

        if isinstance(collection, list):
            return collection
        if isinstance(collection, dict):
            return list(collection.values())
        raise SourceUnavailable(self.source_id, detail=f"unexpected payload type {type(collection).__name__}")

    async def fetch(self) -> AsyncIterator[TaggedRecord]:
        """Yields (category, raw record) pairs for one pass."""
        payloads = await self._fetch_payloads()
        for payload in payloads:
            for record in self.extract_records(payload):
                yield self.category, record

    def map_record(self, category: str, raw: RawRecord) -> Optional[MappedRecord]:
        """
        Maps one raw record into a partial item.
        Returns None to drop the record, raises MalformedRecord for unusable shapes.
        """
        raise NotImplementedError
