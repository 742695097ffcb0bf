# ===== IMPORTS & DEPENDENCIES =====
import logging
import aiohttp
from typing import Any, Optional

from game_catalog.models.item import MappedRecord, RawRecord
from game_catalog.sources.base import SourceAdapter
from game_catalog.config import MARVEL_RIVALS_API_URL, MARVEL_RIVALS_BASE_URL, MARVEL_RIVALS_API_KEY
from game_catalog.utils.item_utils import absolute_url, first_present

# ===== CONFIGURATION & CONSTANTS =====
logger = logging.getLogger(__name__)

# ===== CORE BUSINESS LOGIC =====
class MarvelRivalsSource(SourceAdapter):
    """Heroes from marvelrivalsapi.com. Requires an API key sent as the `x-api-key` header."""

    def __init__(self, session: aiohttp.ClientSession, api_key: Optional[str] = MARVEL_RIVALS_API_KEY, **options: Any):
        headers = {'Accept-Encoding': 'identity'}
        if api_key:
            headers['x-api-key'] = api_key
        else:
            logger.warning("⚠️ [MarvelRivalsSource] MARVEL_RIVALS_API_KEY is not set. Requests will likely be rejected.")
        super().__init__(
            session,
            source_id="rivals:heroes",
            category="Hero",
            urls=[MARVEL_RIVALS_API_URL],
            headers=headers,
            **options
        )

    def map_record(self, category: str, raw: RawRecord) -> Optional[MappedRecord]:
        abilities = [a.get('name') for a in raw.get('abilities') or [] if isinstance(a, dict)]
        costumes = [c.get('name') for c in raw.get('costumes') or [] if isinstance(c, dict)]
        return MappedRecord(
            id=raw.get('id'),
            name=raw.get('name'),
            image_url=absolute_url(first_present(raw, 'imageUrl', 'image'), MARVEL_RIVALS_BASE_URL),
            description=first_present(raw, 'bio', 'lore'),
            attributes={
                'real_name': raw.get('real_name'),
                'role': raw.get('role'),
                'attack_type': raw.get('attack_type'),
                'difficulty': raw.get('difficulty'),
                'team': raw.get('team'),
                'abilities': abilities,
                'costumes': costumes,
            },
        )
