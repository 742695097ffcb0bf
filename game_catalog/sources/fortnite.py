# ===== IMPORTS & DEPENDENCIES =====
import logging
import aiohttp
from typing import Any, Dict, Iterable, Optional

from game_catalog.core.errors import MalformedRecord
from game_catalog.models.item import MappedRecord, RawRecord
from game_catalog.sources.base import SourceAdapter
from game_catalog.config import FORTNITE_API_BASE, FORTNITE_PLACEHOLDER
from game_catalog.utils.item_utils import first_present

# ===== CONFIGURATION & CONSTANTS =====
logger = logging.getLogger(__name__)

# resource -> (category, path, envelope)
FORTNITE_RESOURCES = {
    'cosmetics': ('Cosmetic', '/v2/cosmetics', ('data', 'br')),
    'banners': ('Banner', '/v1/banners', ('data',)),
    'shop': ('Shop Entry', '/v2/shop', ('data', 'entries')),
    'map': ('Point of Interest', '/v1/map', ('data', 'pois')),
}

FEATURED_TILE_SIZES = ('Size_1_x_2', 'Size_2_x_2')


def _display(value: Any) -> Optional[str]:
    """fortnite-api wraps enums as {'value', 'displayValue'}."""
    if isinstance(value, dict):
        return value.get('displayValue') or value.get('value')
    return value if isinstance(value, str) else None


def _images(record: RawRecord) -> Dict[str, Any]:
    images = record.get('images')
    return images if isinstance(images, dict) else {}


# ===== CORE BUSINESS LOGIC =====
class FortniteSource(SourceAdapter):
    """One fortnite-api.com resource: battle royale cosmetics, banners, the item shop or map POIs."""

    placeholder_image = FORTNITE_PLACEHOLDER
    numeric_attributes = {
        'Shop Entry': frozenset({'regular_price', 'final_price'}),
    }

    def __init__(self, session: aiohttp.ClientSession, resource: str, **options: Any):
        if resource not in FORTNITE_RESOURCES:
            raise ValueError(f"Unknown Fortnite resource '{resource}'")
        category, path, self.envelope = FORTNITE_RESOURCES[resource]
        self.resource = resource
        super().__init__(
            session,
            source_id=f"fortnite:{resource}",
            category=category,
            urls=[f"{FORTNITE_API_BASE}{path}"],
            **options
        )

    def extract_records(self, payload: Any) -> Iterable[RawRecord]:
        records = super().extract_records(payload)
        if self.resource != 'map':
            return records
        # POIs have no art of their own; every one of them shows the POI overview map
        map_image = _images(payload.get('data') or {}).get('pois')
        return [{**poi, 'mapImage': map_image} if isinstance(poi, dict) else poi for poi in records]

    def _map_cosmetic(self, raw: RawRecord) -> MappedRecord:
        images = _images(raw)
        introduction = raw.get('introduction') if isinstance(raw.get('introduction'), dict) else {}
        set_info = raw.get('set') if isinstance(raw.get('set'), dict) else {}
        return MappedRecord(
            id=raw.get('id'),
            name=raw.get('name'),
            image_url=first_present(images, 'icon', 'smallIcon', 'featured'),
            description=raw.get('description'),
            attributes={
                'cosmetic_type': _display(raw.get('type')),
                'rarity': _display(raw.get('rarity')),
                'series': _display(raw.get('series')),
                'set': set_info.get('text') or set_info.get('value'),
                'introduced': introduction.get('text'),
                'featured_image': images.get('featured'),
            },
        )

    def _map_banner(self, raw: RawRecord) -> MappedRecord:
        images = _images(raw)
        return MappedRecord(
            id=raw.get('id'),
            name=first_present(raw, 'name', 'devName'),
            image_url=first_present(images, 'icon', 'smallIcon'),
            description=raw.get('description'),
            attributes={'banner_category': raw.get('category'), 'full_usage_rights': raw.get('fullUsageRights')},
        )

    def _map_shop_entry(self, raw: RawRecord) -> MappedRecord:
        br_items = raw.get('brItems') or []
        if not isinstance(br_items, list):
            raise MalformedRecord(self.source_id, "shop entry brItems is not a list")
        first_item = br_items[0] if br_items and isinstance(br_items[0], dict) else {}
        layout = raw.get('layout') if isinstance(raw.get('layout'), dict) else {}
        layout_name = layout.get('name') or ''
        tile_size = raw.get('tileSize')

        is_daily = 'Daily' in layout_name or tile_size == 'Size_1_x_1'
        is_featured = 'Featured' in layout_name or tile_size in FEATURED_TILE_SIZES
        images = _images(first_item)

        return MappedRecord(
            id=raw.get('offerId'),
            name=first_item.get('name') or raw.get('devName'),
            image_url=first_present(images, 'featured', 'icon', 'smallIcon'),
            description=first_item.get('description'),
            attributes={
                'regular_price': raw.get('regularPrice'),
                'final_price': raw.get('finalPrice'),
                'section': 'Daily' if is_daily and not is_featured else 'Featured',
                'layout': layout_name,
                'tile_size': tile_size,
                'items': [i.get('name') for i in br_items if isinstance(i, dict)],
            },
        )

    def _map_poi(self, raw: RawRecord) -> MappedRecord:
        location = raw.get('location') if isinstance(raw.get('location'), dict) else {}
        return MappedRecord(
            id=raw.get('id'),
            name=raw.get('name'),
            image_url=raw.get('mapImage'),
            attributes={'x': location.get('x'), 'y': location.get('y'), 'z': location.get('z')},
        )

    def map_record(self, category: str, raw: RawRecord) -> Optional[MappedRecord]:
        if self.resource == 'cosmetics':
            return self._map_cosmetic(raw)
        if self.resource == 'banners':
            return self._map_banner(raw)
        if self.resource == 'shop':
            return self._map_shop_entry(raw)
        return self._map_poi(raw)
