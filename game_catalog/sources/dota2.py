# ===== IMPORTS & DEPENDENCIES =====
import logging
import aiohttp
from typing import Any, Optional

from game_catalog.models.item import MappedRecord, RawRecord
from game_catalog.sources.base import SourceAdapter
from game_catalog.config import DOTA_HEROSTATS_URL, DOTA_CDN_BASE_URL
from game_catalog.utils.item_utils import absolute_url

# ===== CONFIGURATION & CONSTANTS =====
logger = logging.getLogger(__name__)

DOTA_STAT_FIELDS = (
    'base_health', 'base_health_regen', 'base_mana', 'base_mana_regen', 'base_armor', 'base_mr',
    'base_attack_min', 'base_attack_max', 'base_str', 'base_agi', 'base_int',
    'str_gain', 'agi_gain', 'int_gain', 'attack_range', 'attack_rate', 'move_speed',
    'pro_pick', 'pro_win', 'pro_ban',
)
PRIMARY_ATTRIBUTES = {'agi': 'Agility', 'str': 'Strength', 'int': 'Intelligence', 'all': 'Universal'}

# ===== CORE BUSINESS LOGIC =====
class Dota2Source(SourceAdapter):
    """Hero statistics from OpenDota. Image paths are relative to the Dota 2 CDN."""

    numeric_attributes = {'Hero': frozenset(DOTA_STAT_FIELDS)}

    def __init__(self, session: aiohttp.ClientSession, **options: Any):
        super().__init__(
            session,
            source_id="dota2:heroes",
            category="Hero",
            urls=[DOTA_HEROSTATS_URL],
            **options
        )

    @staticmethod
    def _asset(path: Optional[str]) -> Optional[str]:
        # OpenDota paths end with a cache-busting '?'
        return absolute_url(path.rstrip('?'), DOTA_CDN_BASE_URL) if isinstance(path, str) and path else None

    def map_record(self, category: str, raw: RawRecord) -> Optional[MappedRecord]:
        attributes = {field: raw.get(field) for field in DOTA_STAT_FIELDS}
        internal_name = raw.get('name') if isinstance(raw.get('name'), str) else ''
        primary_attr = raw.get('primary_attr') if isinstance(raw.get('primary_attr'), str) else None
        attributes.update({
            'primary_attribute': PRIMARY_ATTRIBUTES.get(primary_attr, primary_attr),
            'attack_type': raw.get('attack_type'),
            'roles': raw.get('roles'),
            'icon': self._asset(raw.get('icon')),
        })
        if internal_name.startswith('npc_dota_hero_'):
            simple_name = internal_name.replace('npc_dota_hero_', '')
            attributes['splash'] = f"{DOTA_CDN_BASE_URL}/apps/dota2/images/heroes/{simple_name}_full.png"

        return MappedRecord(
            id=raw.get('id'),
            name=raw.get('localized_name'),
            image_url=self._asset(raw.get('img')),
            attributes=attributes,
        )
