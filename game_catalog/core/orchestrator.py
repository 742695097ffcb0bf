# ===== IMPORTS & DEPENDENCIES =====
import asyncio
import logging
import time
from typing import List, Optional, Sequence, Tuple

from game_catalog.config import ADAPTER_TIMEOUT, DEDUPE_PRECEDENCE
from game_catalog.core.catalog import CatalogIndex
from game_catalog.core.deduplicator import Deduplicator
from game_catalog.core.errors import AlreadyInProgress, CatalogUnavailable, SourceUnavailable
from game_catalog.core.normalizer import Normalizer
from game_catalog.models.item import Item, PassState, RefreshOutcome, SourceStats
from game_catalog.sources.base import SourceAdapter

# ===== CONFIGURATION & CONSTANTS =====
logger = logging.getLogger(__name__)

# (items, records received, records dropped)
AdapterBatch = Tuple[List[Item], int, int]

# ===== CORE BUSINESS LOGIC =====
class FetchOrchestrator:
    """
    Runs aggregation passes over a fixed set of source adapters.

    Every pass fans out to all adapters at once and waits for each of them to
    either deliver a batch or fail. Successful batches are merged into a fresh
    CatalogIndex, which replaces the previous snapshot only once the pass has
    settled. Readers of `catalog` therefore never see a half-built index.
    """

    def __init__(
        self,
        adapters: Sequence[SourceAdapter],
        deduplicator: Optional[Deduplicator] = None,
        adapter_timeout: float = ADAPTER_TIMEOUT
    ):
        if not adapters:
            raise ValueError("At least one source adapter must be configured")
        source_ids = [adapter.source_id for adapter in adapters]
        if len(set(source_ids)) != len(source_ids):
            raise ValueError(f"Source ids must be unique, got {source_ids}")

        self.adapters = list(adapters)
        self._deduplicator = deduplicator or Deduplicator(
            precedence=DEDUPE_PRECEDENCE,
            source_ranks={adapter.source_id: adapter.precedence for adapter in self.adapters}
        )
        self._adapter_timeout = adapter_timeout
        self._catalog = CatalogIndex(self._deduplicator).seal()
        self._pass_id = 0
        self._has_settled = False
        self.state = PassState.IDLE
        self.last_outcome: Optional[RefreshOutcome] = None

    @property
    def catalog(self) -> CatalogIndex:
        """The last settled snapshot (empty until the first successful pass)."""
        return self._catalog

    async def _drain(self, adapter: SourceAdapter, normalizer: Normalizer) -> List[Item]:
        items: List[Item] = []
        async for category, raw in adapter.fetch():
            item = normalizer.normalize(category, raw)
            if item is not None:
                items.append(item)
        return items

    async def _run_adapter(self, adapter: SourceAdapter) -> AdapterBatch:
        """Fetches and normalizes one adapter. Every failure surfaces as SourceUnavailable."""
        normalizer = Normalizer(adapter)
        try:
            if self._adapter_timeout and self._adapter_timeout > 0:
                items = await asyncio.wait_for(self._drain(adapter, normalizer), timeout=self._adapter_timeout)
            else:
                items = await self._drain(adapter, normalizer)
        except SourceUnavailable:
            raise
        except asyncio.TimeoutError as e:
            raise SourceUnavailable(adapter.source_id, e, detail=f"timed out after {self._adapter_timeout}s") from e
        except Exception as e:
            raise SourceUnavailable(adapter.source_id, e) from e
        return items, normalizer.received, normalizer.malformed

    async def _gather(self) -> list:
        tasks = [self._run_adapter(adapter) for adapter in self.adapters]
        return await asyncio.gather(*tasks, return_exceptions=True)

    async def refresh(self) -> RefreshOutcome:
        """
        Runs one pass and swaps in the new snapshot.
        Raises AlreadyInProgress if a pass is fetching and CatalogUnavailable if every adapter failed.
        """
        if self.state == PassState.FETCHING:
            logger.warning(f"⚠️ [{self.__class__.__name__}] Refresh requested while a pass is in flight. Rejecting.")
            raise AlreadyInProgress()

        self.state = PassState.FETCHING
        self._pass_id += 1
        pass_id = self._pass_id
        started = time.monotonic()
        logger.info(f"--- [{self.__class__.__name__}] Pass {pass_id}: fetching from {len(self.adapters)} sources ---")

        try:
            results = await self._gather()
        except BaseException:
            self.state = PassState.SETTLED if self._has_settled else PassState.IDLE
            raise

        index = CatalogIndex(self._deduplicator)
        failures: List[SourceUnavailable] = []
        source_stats: List[SourceStats] = []

        for adapter, result in zip(self.adapters, results):
            if isinstance(result, BaseException):
                failure = result if isinstance(result, SourceUnavailable) else SourceUnavailable(adapter.source_id, result)
                failures.append(failure)
                logger.error(f"❌ Failed to fetch from {adapter.source_id}: {failure}", exc_info=failure)
                continue

            items, received, malformed = result
            upsert = index.upsert_batch(items)
            source_stats.append(SourceStats(
                source_id=adapter.source_id,
                received=received,
                malformed=malformed,
                inserted=upsert['inserted'],
                updated=upsert['updated'],
                dropped=upsert['dropped'],
            ))
            logger.info(f"✅ Found {len(items)} items from {adapter.source_id} ({malformed} malformed, {upsert['dropped']} duplicates).")

        if not source_stats:
            self.state = PassState.SETTLED if self._has_settled else PassState.IDLE
            logger.error(f"❌ [{self.__class__.__name__}] Pass {pass_id}: every source failed. Keeping the previous snapshot.")
            raise CatalogUnavailable(failures)

        self._catalog = index.seal()
        self._has_settled = True
        self.state = PassState.SETTLED

        outcome = RefreshOutcome(
            status='partial' if failures else 'complete',
            unavailable_sources=[failure.source for failure in failures],
            sources=source_stats,
            item_count=len(self._catalog),
            duration_seconds=round(time.monotonic() - started, 3),
        )
        self.last_outcome = outcome
        if failures:
            logger.warning(f"⚠️ [{self.__class__.__name__}] Pass {pass_id} settled with partial results. Unavailable: {', '.join(outcome['unavailable_sources'])}")
        logger.info(f"🏁 [{self.__class__.__name__}] Pass {pass_id} settled: {outcome['item_count']} items in {outcome['duration_seconds']}s")
        return outcome
