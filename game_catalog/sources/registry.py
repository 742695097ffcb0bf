# ===== IMPORTS & DEPENDENCIES =====
import aiohttp
from typing import Any, Callable, Dict, List

from game_catalog.sources.base import SourceAdapter
from game_catalog.sources.apex import ApexSource
from game_catalog.sources.cs2 import CS2Source, CS2_ENDPOINTS
from game_catalog.sources.dota2 import Dota2Source
from game_catalog.sources.fortnite import FortniteSource, FORTNITE_RESOURCES
from game_catalog.sources.lol import LeagueOfLegendsSource
from game_catalog.sources.pubg import PubgSource, PUBG_ENDPOINTS
from game_catalog.sources.rivals import MarvelRivalsSource
from game_catalog.sources.valorant import ValorantSource, VALORANT_RESOURCES

# ===== GAME REGISTRATIONS =====
# Each game page is a list of adapters; order matters only for first-seen deduplication.
AdapterFactory = Callable[..., List[SourceAdapter]]

GAME_SOURCES: Dict[str, AdapterFactory] = {
    'valorant': lambda session, **o: [ValorantSource(session, resource, **o) for resource in VALORANT_RESOURCES],
    'cs2': lambda session, **o: [CS2Source(session, endpoint, **o) for endpoint in CS2_ENDPOINTS],
    'pubg': lambda session, **o: [PubgSource(session, endpoint, **o) for endpoint in PUBG_ENDPOINTS],
    'dota2': lambda session, **o: [Dota2Source(session, **o)],
    'apex': lambda session, **o: [ApexSource(session, **o)],
    'lol': lambda session, **o: [LeagueOfLegendsSource(session, **o)],
    'fortnite': lambda session, **o: [FortniteSource(session, resource, **o) for resource in FORTNITE_RESOURCES],
    'rivals': lambda session, **o: [MarvelRivalsSource(session, **o)],
}


def build_adapters(game: str, session: aiohttp.ClientSession, **options: Any) -> List[SourceAdapter]:
    """Instantiates every adapter registered for `game`, passing client options through."""
    try:
        factory = GAME_SOURCES[game.lower()]
    except KeyError:
        raise ValueError(f"Unknown game '{game}'. Known games: {', '.join(sorted(GAME_SOURCES))}") from None
    return factory(session, **options)
