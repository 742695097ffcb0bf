# ===== IMPORTS & DEPENDENCIES =====
import logging
import aiohttp
from typing import Any, Dict, Optional

from game_catalog.models.item import MappedRecord, RawRecord
from game_catalog.sources.base import SourceAdapter
from game_catalog.config import CS2_API_BASE, CS2_IMAGE_CDN
from game_catalog.utils.item_utils import absolute_url

# ===== CONFIGURATION & CONSTANTS =====
logger = logging.getLogger(__name__)

# endpoint -> category; skins and skins_not_grouped deliberately share 'Skin'
CS2_ENDPOINTS = {
    'agents': 'Agent',
    'skins': 'Skin',
    'skins_not_grouped': 'Skin',
    'stickers': 'Sticker',
    'keychains': 'Keychain',
    'collections': 'Collection',
    'crates': 'Crate',
    'keys': 'Key',
    'collectibles': 'Collectible',
}


def _name_of(value: Any) -> Optional[str]:
    """ByMykel nests most references as {'id', 'name'} objects; plain strings pass through."""
    if isinstance(value, dict):
        return value.get('name')
    if isinstance(value, str):
        return value
    return None


def _names(values: Any) -> list:
    if not isinstance(values, list):
        return []
    return [name for name in (_name_of(v) for v in values) if name]


# ===== CORE BUSINESS LOGIC =====
class CS2Source(SourceAdapter):
    """One ByMykel CSGO-API collection. Images are either absolute or Steam economy CDN hashes."""

    numeric_attributes = {
        'Skin': frozenset({'min_float', 'max_float'}),
        'Crate': frozenset({'contains_count'}),
    }

    def __init__(self, session: aiohttp.ClientSession, endpoint: str, **options: Any):
        if endpoint not in CS2_ENDPOINTS:
            raise ValueError(f"Unknown CS2 endpoint '{endpoint}'")
        self.endpoint = endpoint
        super().__init__(
            session,
            source_id=f"cs2:{endpoint}",
            category=CS2_ENDPOINTS[endpoint],
            urls=[f"{CS2_API_BASE}/{endpoint}.json"],
            **options
        )

    def _attributes(self, category: str, raw: RawRecord) -> Dict[str, Any]:
        rarity = raw.get('rarity') or {}
        attributes: Dict[str, Any] = {
            'rarity': _name_of(rarity),
            'rarity_color': rarity.get('color') if isinstance(rarity, dict) else None,
            'market_hash_name': raw.get('market_hash_name'),
        }
        if category == 'Agent':
            attributes['team'] = _name_of(raw.get('team'))
            attributes['collections'] = _names(raw.get('collections'))
        elif category == 'Skin':
            attributes.update({
                'weapon': _name_of(raw.get('weapon')),
                'weapon_category': _name_of(raw.get('category')),
                'pattern': _name_of(raw.get('pattern')),
                'min_float': raw.get('min_float'),
                'max_float': raw.get('max_float'),
                'stattrak': raw.get('stattrak'),
                'souvenir': raw.get('souvenir'),
                'wear': _name_of(raw.get('wear')),
                'collections': _names(raw.get('collections')),
                'crates': _names(raw.get('crates')),
            })
        elif category == 'Sticker':
            attributes['tournament_event'] = raw.get('tournament_event')
            attributes['sticker_type'] = raw.get('type')
            attributes['capsules'] = _names(raw.get('crates'))
        elif category == 'Crate':
            attributes['crate_type'] = raw.get('type')
            attributes['contains_count'] = len(raw['contains']) if isinstance(raw.get('contains'), list) else 0
            attributes['keys'] = _names(raw.get('keys'))
        elif category == 'Key':
            attributes['opens'] = _names(raw.get('crates'))
        elif category == 'Collectible':
            attributes['collectible_type'] = raw.get('type')
        return attributes

    def map_record(self, category: str, raw: RawRecord) -> Optional[MappedRecord]:
        return MappedRecord(
            id=raw.get('id'),
            name=raw.get('name'),
            image_url=absolute_url(raw.get('image'), CS2_IMAGE_CDN),
            description=raw.get('description'),
            attributes=self._attributes(category, raw),
        )
