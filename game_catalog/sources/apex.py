# ===== IMPORTS & DEPENDENCIES =====
import logging
import aiohttp
from typing import Any, Optional

from game_catalog.models.item import MappedRecord, RawRecord
from game_catalog.sources.base import SourceAdapter
from game_catalog.config import APEX_DATA_URL, APEX_PLACEHOLDER
from game_catalog.utils.item_utils import first_present

# ===== CONFIGURATION & CONSTANTS =====
logger = logging.getLogger(__name__)

# ===== CORE BUSINESS LOGIC =====
class ApexSource(SourceAdapter):
    """Apex Legends roster from a static JSON dump. Ids are Mongo export objects ({'$oid': ...})."""

    placeholder_image = APEX_PLACEHOLDER

    def __init__(self, session: aiohttp.ClientSession, **options: Any):
        super().__init__(
            session,
            source_id="apex:legends",
            category="Legend",
            urls=[APEX_DATA_URL],
            **options
        )

    def map_record(self, category: str, raw: RawRecord) -> Optional[MappedRecord]:
        raw_id = raw.get('_id')
        legend_id = raw_id.get('$oid') if isinstance(raw_id, dict) else raw_id
        thumbnail = raw.get('thumbnail') if isinstance(raw.get('thumbnail'), dict) else {}
        ability = raw.get('ability') if isinstance(raw.get('ability'), list) else []
        abilities = [a.get('title') for a in ability if isinstance(a, dict)]

        return MappedRecord(
            id=legend_id,
            name=raw.get('name'),
            image_url=first_present(thumbnail, 'large', 'default', 'medium', 'small'),
            description=raw.get('desc'),
            attributes={
                'nickname': raw.get('nickname'),
                'legend_class': raw.get('class'),
                'quote': raw.get('quote'),
                'age': raw.get('age'),
                'home': raw.get('home'),
                'abilities': abilities,
                'trailer': raw.get('yt_trailer'),
            },
        )
