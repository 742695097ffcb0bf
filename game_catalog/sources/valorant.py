# ===== IMPORTS & DEPENDENCIES =====
import logging
import aiohttp
from typing import Any, Dict, Optional

from game_catalog.models.item import MappedRecord, RawRecord
from game_catalog.sources.base import SourceAdapter
from game_catalog.config import VALORANT_API_BASE
from game_catalog.utils.item_utils import first_present

# ===== CONFIGURATION & CONSTANTS =====
logger = logging.getLogger(__name__)

# resource -> (category, path, image fields in order of preference)
VALORANT_RESOURCES = {
    'agents': ('Agent', '/agents?isPlayableCharacter=true', ('fullPortrait', 'displayIcon')),
    'maps': ('Map', '/maps', ('splash', 'displayIcon')),
    'weapons': ('Weapon', '/weapons', ('displayIcon',)),
    'skins': ('Skin', '/weapons/skins', ('displayIcon', 'wallpaper')),
    'sprays': ('Spray', '/sprays', ('fullTransparentIcon', 'displayIcon')),
    'buddies': ('Gun Buddy', '/buddies', ('displayIcon',)),
    'playercards': ('Player Card', '/playercards', ('largeArt', 'wideArt', 'displayIcon')),
    'gamemodes': ('Game Mode', '/gamemodes', ('displayIcon', 'listViewIconTall')),
}


def _as_list(value: Any) -> list:
    return value if isinstance(value, list) else []


# ===== CORE BUSINESS LOGIC =====
class ValorantSource(SourceAdapter):
    """One valorant-api.com collection (agents, maps, skins...). All responses use a {'status', 'data'} envelope."""

    envelope = ('data',)
    numeric_attributes = {
        'Weapon': frozenset({'cost', 'fire_rate', 'magazine_size', 'reload_time', 'equip_time'}),
    }

    def __init__(self, session: aiohttp.ClientSession, resource: str, **options: Any):
        if resource not in VALORANT_RESOURCES:
            raise ValueError(f"Unknown Valorant resource '{resource}'")
        category, path, self._image_fields = VALORANT_RESOURCES[resource]
        self.resource = resource
        super().__init__(
            session,
            source_id=f"valorant:{resource}",
            category=category,
            urls=[f"{VALORANT_API_BASE}{path}"],
            **options
        )

    def _attributes(self, raw: RawRecord) -> Dict[str, Any]:
        if self.resource == 'agents':
            role = raw.get('role') if isinstance(raw.get('role'), dict) else {}
            return {
                'role': role.get('displayName'),
                'developer_name': raw.get('developerName'),
                'abilities': [a.get('displayName') for a in _as_list(raw.get('abilities')) if isinstance(a, dict)],
            }
        if self.resource == 'maps':
            return {
                'coordinates': raw.get('coordinates'),
                'sites': raw.get('tacticalDescription'),
                'minimap': raw.get('displayIcon'),
            }
        if self.resource == 'weapons':
            stats = raw.get('weaponStats') if isinstance(raw.get('weaponStats'), dict) else {}
            shop = raw.get('shopData') if isinstance(raw.get('shopData'), dict) else {}
            return {
                'weapon_category': shop.get('categoryText') or str(raw.get('category', '')).split('::')[-1],
                'cost': shop.get('cost'),
                'fire_rate': stats.get('fireRate'),
                'magazine_size': stats.get('magazineSize'),
                'reload_time': stats.get('reloadTimeSeconds'),
                'equip_time': stats.get('equipTimeSeconds'),
            }
        if self.resource == 'skins':
            return {
                'chroma_count': len(_as_list(raw.get('chromas'))),
                'level_count': len(_as_list(raw.get('levels'))),
            }
        if self.resource == 'playercards':
            return {'small_art': raw.get('smallArt'), 'wide_art': raw.get('wideArt')}
        if self.resource == 'gamemodes':
            return {'duration': raw.get('duration')}
        return {}

    def _image(self, raw: RawRecord) -> Optional[str]:
        image = first_present(raw, *self._image_fields)
        if image is None and self.resource == 'skins':
            # Many skins only carry art on their first level
            levels = _as_list(raw.get('levels'))
            if levels and isinstance(levels[0], dict):
                image = levels[0].get('displayIcon')
        return image

    def map_record(self, category: str, raw: RawRecord) -> Optional[MappedRecord]:
        if self.resource == 'agents' and raw.get('isPlayableCharacter') is False:
            return None
        return MappedRecord(
            id=raw.get('uuid'),
            name=raw.get('displayName'),
            image_url=self._image(raw),
            description=raw.get('description'),
            attributes=self._attributes(raw),
        )
