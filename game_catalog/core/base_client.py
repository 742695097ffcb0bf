# ===== IMPORTS & DEPENDENCIES =====
import logging
import asyncio
import aiohttp
import os
import hashlib
import time
import json
import random
from typing import Optional, Any, Dict

from game_catalog.config import (
    COMMON_HEADERS, REQUEST_TIMEOUT, MAX_RETRIES, RETRY_INITIAL_DELAY, RETRYABLE_STATUSES
)
from game_catalog.core.errors import SourceUnavailable

# ===== CONFIGURATION & CONSTANTS =====
logger = logging.getLogger(__name__)

# ===== CORE BUSINESS LOGIC =====
class BaseWebClient:
    """A base class for JSON web clients providing caching and robust fetching."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        cache_dir: str,
        cache_ttl: int,
        name: Optional[str] = None,
        use_cache: bool = True,
        max_retries: int = MAX_RETRIES,
        initial_delay: float = RETRY_INITIAL_DELAY,
        request_timeout: float = REQUEST_TIMEOUT
    ):
        self._session = session
        self._cache_dir = cache_dir
        self._cache_ttl = cache_ttl
        self._use_cache = use_cache and cache_ttl > 0
        self._max_retries = max(1, max_retries)
        self._initial_delay = initial_delay
        self._request_timeout = request_timeout
        self.name = name or self.__class__.__name__
        if self._use_cache:
            os.makedirs(self._cache_dir, exist_ok=True)
        logger.debug(f"[{self.name}] Initialized with cache dir: {self._cache_dir}, TTL: {self._cache_ttl}s, cache enabled: {self._use_cache}")

    def _get_cache_path(self, key: str) -> str:
        """Generates a cache file path from a given key."""
        hashed_key = hashlib.sha256(key.encode('utf-8')).hexdigest()
        return os.path.join(self._cache_dir, f"{hashed_key}.json")

    def _is_cache_valid(self, cache_path: str) -> bool:
        """Checks if a cache file exists and has not expired."""
        if not os.path.exists(cache_path):
            return False

        file_mod_time = os.path.getmtime(cache_path)
        if (time.time() - file_mod_time) > self._cache_ttl:
            logger.debug(f"[{self.name}] Cache file expired: {cache_path}")
            return False

        logger.debug(f"[{self.name}] Cache file is valid: {cache_path}")
        return True

    def _read_cache(self, cache_path: str) -> Optional[Any]:
        """Loads a cached payload, discarding the file if it no longer parses."""
        with open(cache_path, 'r', encoding='utf-8') as f:
            content = f.read()
        try:
            return json.loads(content)
        except json.JSONDecodeError:
            logger.warning(f"⚠️ [{self.name}] Invalid JSON in cache file {cache_path}. Deleting and re-fetching.")
            os.remove(cache_path)
            return None

    def _write_cache(self, cache_path: str, content: Any) -> None:
        try:
            with open(cache_path, 'w', encoding='utf-8') as f:
                json.dump(content, f, ensure_ascii=False)
            logger.debug(f"💾 [{self.name}] Content saved to cache: {cache_path}")
        except OSError as e:
            logger.warning(f"⚠️ [{self.name}] Could not write cache file {cache_path}: {e}")

    async def _fetch(self, url: str, headers: Optional[Dict[str, str]] = None) -> Any:
        """
        Fetches a JSON document with caching, retries, and exponential backoff.
        Raises SourceUnavailable once the request cannot succeed.
        """
        cache_path = self._get_cache_path(url) if self._use_cache else None
        if cache_path and self._is_cache_valid(cache_path):
            cached = self._read_cache(cache_path)
            if cached is not None:
                logger.info(f"✅ [{self.name}] Loading content from cache: {cache_path}")
                return cached

        logger.info(f"➡️ [{self.name}] Fetching from network: {url}")
        request_headers = {**COMMON_HEADERS, **(headers or {})}
        timeout = aiohttp.ClientTimeout(total=self._request_timeout)

        for attempt in range(self._max_retries):
            try:
                async with self._session.get(url, headers=request_headers, timeout=timeout) as response:
                    response.raise_for_status()
                    # content_type=None handles non-standard API content-types (raw.githubusercontent serves text/plain)
                    content = await response.json(content_type=None)

                if cache_path:
                    self._write_cache(cache_path, content)
                return content

            except aiohttp.ClientResponseError as e:
                logger.warning(f"⚠️ [{self.name}] HTTP error on {url} (Attempt {attempt + 1}/{self._max_retries}): Status {e.status}")
                if attempt >= self._max_retries - 1 or e.status not in RETRYABLE_STATUSES:
                    logger.error(f"❌ [{self.name}] Unrecoverable error on {url}. Giving up.")
                    raise SourceUnavailable(self.name, e, detail=f"HTTP {e.status} from {url}") from e
            except (asyncio.TimeoutError, aiohttp.ClientConnectionError) as e:
                logger.warning(f"⚠️ [{self.name}] Network error on {url} (Attempt {attempt + 1}/{self._max_retries}): {type(e).__name__}")
                if attempt >= self._max_retries - 1:
                    logger.error(f"❌ [{self.name}] Failed to connect to {url} after {self._max_retries} attempts.")
                    raise SourceUnavailable(self.name, e, detail=f"{type(e).__name__} on {url}") from e
            except ValueError as e:
                # json.JSONDecodeError is a ValueError; a broken body will not fix itself on retry
                logger.error(f"❌ [{self.name}] Malformed JSON from {url}: {e}")
                raise SourceUnavailable(self.name, e, detail=f"malformed JSON from {url}") from e

            delay = self._initial_delay * (2 ** attempt) + random.uniform(0, 1)
            logger.info(f"Retrying request to {url} in {delay:.2f} seconds...")
            await asyncio.sleep(delay)

        raise SourceUnavailable(self.name, detail=f"no response from {url}")
