# ===== IMPORTS & DEPENDENCIES =====
import logging
import aiohttp
from typing import Any, List, Optional

from game_catalog.core.errors import SourceUnavailable
from game_catalog.models.item import MappedRecord, RawRecord
from game_catalog.sources.base import SourceAdapter
from game_catalog.config import (
    LOL_VERSIONS_URL, LOL_CHAMPIONS_URL_TEMPLATE, LOL_CHAMPION_IMAGE_TEMPLATE, LOL_FALLBACK_VERSION
)

# ===== CONFIGURATION & CONSTANTS =====
logger = logging.getLogger(__name__)

LOL_STAT_FIELDS = ('hp', 'mp', 'armor', 'spellblock', 'attackdamage', 'attackspeed', 'crit', 'movespeed', 'attackrange')
LOL_SPLASH_TEMPLATE = "https://ddragon.leagueoflegends.com/cdn/img/champion/splash/{champion_id}_0.jpg"

# ===== CORE BUSINESS LOGIC =====
class LeagueOfLegendsSource(SourceAdapter):
    """
    Champions from Riot's Data Dragon. The champion file is versioned, so the
    latest version is resolved first; champion data is an object keyed by champion id.
    """

    envelope = ('data',)
    numeric_attributes = {'Champion': frozenset(LOL_STAT_FIELDS)}

    def __init__(self, session: aiohttp.ClientSession, **options: Any):
        super().__init__(
            session,
            source_id="lol:champions",
            category="Champion",
            urls=[LOL_VERSIONS_URL],
            **options
        )
        self.version = LOL_FALLBACK_VERSION

    async def _resolve_version(self) -> str:
        try:
            versions = await self._fetch(LOL_VERSIONS_URL, headers=self.headers)
        except SourceUnavailable as e:
            logger.warning(f"⚠️ [{self.name}] Could not resolve the latest version ({e}). Using {self.version}.")
            return self.version
        if isinstance(versions, list) and versions and isinstance(versions[0], str):
            return versions[0]
        logger.warning(f"⚠️ [{self.name}] Unexpected versions payload. Using {self.version}.")
        return self.version

    async def _fetch_payloads(self) -> List[Any]:
        self.version = await self._resolve_version()
        url = LOL_CHAMPIONS_URL_TEMPLATE.format(version=self.version)
        logger.info(f"[{self.name}] Using Data Dragon version {self.version}")
        return [await self._fetch(url, headers=self.headers)]

    def map_record(self, category: str, raw: RawRecord) -> Optional[MappedRecord]:
        stats = raw.get('stats') if isinstance(raw.get('stats'), dict) else {}
        image = raw.get('image') if isinstance(raw.get('image'), dict) else {}
        image_url = None
        if image.get('full'):
            image_url = LOL_CHAMPION_IMAGE_TEMPLATE.format(version=self.version, image=image['full'])

        attributes = {field: stats.get(field) for field in LOL_STAT_FIELDS}
        attributes.update({
            'title': raw.get('title'),
            'tags': raw.get('tags'),
            'partype': raw.get('partype'),
            'splash': LOL_SPLASH_TEMPLATE.format(champion_id=raw['id']) if raw.get('id') else None,
        })
        return MappedRecord(
            id=raw.get('id'),
            name=raw.get('name'),
            image_url=image_url,
            description=raw.get('blurb'),
            attributes=attributes,
        )
