# ===== IMPORTS & DEPENDENCIES =====
import logging
import aiohttp
from typing import Any, Dict, Iterable, Optional

from game_catalog.core.errors import MalformedRecord
from game_catalog.models.item import MappedRecord, RawRecord
from game_catalog.sources.base import SourceAdapter
from game_catalog.config import PUBG_API_BASE, PUBG_PLACEHOLDER
from game_catalog.utils.item_utils import first_present

# ===== CONFIGURATION & CONSTANTS =====
logger = logging.getLogger(__name__)

# endpoint -> (category, path). The /tier endpoint is ranking data, not a browsable item list.
PUBG_ENDPOINTS = {
    'weapons': ('Weapon', '/all'),
    'ammo': ('Ammo', '/ammo'),
    'attachments': ('Attachment', '/attachs'),
    'equipment': ('Equipment', '/body'),
    'consumables': ('Consumable', '/health'),
    'maps': ('Map', '/maps'),
    'vehicles': ('Vehicle', '/vehicles'),
}

# ===== CORE BUSINESS LOGIC =====
class PubgSource(SourceAdapter):
    """One pubgapi v2 collection. Field names vary between endpoints (name/Name/Key, image/Icon...)."""

    placeholder_image = PUBG_PLACEHOLDER
    numeric_attributes = {
        'Weapon': frozenset({'damage', 'bullet_speed', 'impact', 'magazine_size', 'extended_magazine_size',
                             'pickup_delay', 'ready_delay', 'normal_reload', 'quick_reload'}),
        'Consumable': frozenset({'capacity'}),
        'Equipment': frozenset({'level', 'capacity', 'durability'}),
        'Vehicle': frozenset({'seats', 'durability', 'max_speed'}),
    }

    def __init__(self, session: aiohttp.ClientSession, endpoint: str, **options: Any):
        if endpoint not in PUBG_ENDPOINTS:
            raise ValueError(f"Unknown PUBG endpoint '{endpoint}'")
        category, path = PUBG_ENDPOINTS[endpoint]
        self.endpoint = endpoint
        super().__init__(
            session,
            source_id=f"pubg:{endpoint}",
            category=category,
            urls=[f"{PUBG_API_BASE}{path}"],
            **options
        )

    def extract_records(self, payload: Any) -> Iterable[RawRecord]:
        records = super().extract_records(payload)
        if self.endpoint != 'ammo':
            return records
        # Ammo entries wrap the ammo object together with the guns that use it
        return [self._unwrap_ammo(entry) for entry in records]

    def _unwrap_ammo(self, entry: Any) -> Any:
        if isinstance(entry, dict) and isinstance(entry.get('ammo'), dict):
            return {**entry['ammo'], 'guns': entry.get('guns')}
        return entry

    def _weapon_attributes(self, raw: RawRecord) -> Dict[str, Any]:
        details = raw.get('details') or {}
        if not isinstance(details, dict):
            details = {}
        return {
            'weapon_category': raw.get('category'),
            'bullet_type': first_present(raw, 'bullet_type', 'caliber'),
            'magazine_size': raw.get('without_mag'),
            'extended_magazine_size': raw.get('with_mag'),
            'fire_modes': raw.get('fire_modes'),
            'damage': details.get('damage'),
            'bullet_speed': details.get('bullet_speed'),
            'impact': details.get('impact'),
            'pickup_delay': details.get('pickup_delay'),
            'ready_delay': details.get('ready_delay'),
            'normal_reload': details.get('normal_reload'),
            'quick_reload': details.get('quick_reload'),
        }

    def _ammo_attributes(self, raw: RawRecord) -> Dict[str, Any]:
        useon = raw.get('useon')
        if isinstance(useon, str):
            compatible = [w.strip() for w in useon.split(',') if w.strip()]
        else:
            guns = raw.get('guns') or []
            compatible = [g.get('name') if isinstance(g, dict) else g for g in guns]
        # Cross-references stay as a flat attribute; the guns are not linked by item id
        return {'caliber': raw.get('name'), 'compatible_weapons': compatible}

    def _consumable_attributes(self, raw: RawRecord) -> Dict[str, Any]:
        heals = raw.get('heals')
        return {
            'heals': heals,
            'capacity': raw.get('capacity'),
            'cast_time': first_present(raw, 'cast_time', 'usageTime'),
            'effect': f"Restores {heals} Health" if heals else raw.get('effect'),
        }

    def _attributes(self, category: str, raw: RawRecord) -> Dict[str, Any]:
        if category == 'Weapon':
            return self._weapon_attributes(raw)
        if category == 'Ammo':
            return self._ammo_attributes(raw)
        if category == 'Consumable':
            return self._consumable_attributes(raw)
        if category == 'Equipment':
            return {key: raw.get(key) for key in ('type', 'level', 'capacity', 'durability', 'protection')}
        if category == 'Map':
            return {key: raw.get(key) for key in ('size', 'terrain', 'weather')}
        if category == 'Vehicle':
            return {'seats': raw.get('seats'), 'durability': raw.get('durability'),
                    'max_speed': first_present(raw, 'max_speed', 'speed'), 'vehicle_type': raw.get('type')}
        return {}

    def map_record(self, category: str, raw: RawRecord) -> Optional[MappedRecord]:
        if category == 'Ammo' and 'ammo' in raw and not isinstance(raw['ammo'], dict):
            raise MalformedRecord(self.source_id, "ammo entry without an ammo object")
        return MappedRecord(
            id=first_present(raw, 'id', 'name', 'Key', 'Name'),
            name=first_present(raw, 'name', 'Key', 'Name'),
            image_url=first_present(raw, 'image', 'imageUrl', 'Icon'),
            description=first_present(raw, 'description', 'Desc', 'short_des'),
            attributes=self._attributes(category, raw),
        )
