# ===== IMPORTS & DEPENDENCIES =====
import argparse
import asyncio
import logging
import os
import json
import aiohttp
from datetime import datetime, timezone
from typing import Dict, List, Optional

# --- Configuration ---
from game_catalog.config import LOG_LEVEL, WEB_DATA_DIR, CACHE_ENABLED

# --- Core Components ---
from game_catalog.core.errors import CatalogUnavailable
from game_catalog.core.orchestrator import FetchOrchestrator

# --- Data Models ---
from game_catalog.models.item import RefreshOutcome

# --- Data Sources ---
from game_catalog.sources.registry import GAME_SOURCES, build_adapters

# ===== CONFIGURATION & CONSTANTS =====
logger = logging.getLogger(__name__)

# ===== CORE BUSINESS LOGIC / PIPELINE =====
class CatalogPipeline:
    """Refreshes the catalog of each selected game and saves every settled snapshot for the web front-end."""

    def __init__(self, session: aiohttp.ClientSession, games: List[str], output_dir: str = WEB_DATA_DIR, use_cache: bool = CACHE_ENABLED):
        self.session = session
        self.output_dir = output_dir
        self.orchestrators: Dict[str, FetchOrchestrator] = {
            game: FetchOrchestrator(build_adapters(game, session, use_cache=use_cache))
            for game in games
        }

    def _save_for_web(self, game: str, orchestrator: FetchOrchestrator, outcome: RefreshOutcome) -> Optional[str]:
        """Writes one game's settled snapshot to <output_dir>/<game>.json."""
        os.makedirs(self.output_dir, exist_ok=True)
        output_path = os.path.join(self.output_dir, f"{game}.json")
        catalog = orchestrator.catalog
        document = {
            'game': game,
            'generated_at': datetime.now(timezone.utc).isoformat(),
            'status': outcome['status'],
            'unavailable_sources': outcome['unavailable_sources'],
            'categories': catalog.categories(),
            'items': catalog.by_category(),
        }
        try:
            with open(output_path, 'w', encoding='utf-8') as f:
                json.dump(document, f, ensure_ascii=False, indent=4)
            logger.info(f"✅ Successfully saved {len(document['items'])} {game} items to {output_path}")
            return output_path
        except OSError as e:
            logger.error(f"❌ Failed to save web data to {output_path}: {e}", exc_info=True)
            return None

    async def _refresh_game(self, game: str, orchestrator: FetchOrchestrator) -> bool:
        try:
            outcome = await orchestrator.refresh()
        except CatalogUnavailable as e:
            logger.error(f"❌ {game}: {e}")
            return False
        if outcome['status'] == 'partial':
            logger.warning(f"⚠️ {game}: partial catalog, unavailable sources: {', '.join(outcome['unavailable_sources'])}")
        return self._save_for_web(game, orchestrator, outcome) is not None

    async def run(self) -> Dict[str, bool]:
        """Refreshes every selected game concurrently; returns which games produced a catalog file."""
        logger.info("🚀🚀🚀 Starting Game Catalog Pipeline 🚀🚀🚀")
        games = list(self.orchestrators)
        results = await asyncio.gather(*(self._refresh_game(game, self.orchestrators[game]) for game in games))
        summary = dict(zip(games, results))
        logger.info(f"🏁🏁🏁 Pipeline finished: {sum(summary.values())}/{len(summary)} catalogs saved 🏁🏁🏁")
        return summary

# ===== INITIALIZATION & STARTUP =====
def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Aggregate game data APIs into searchable catalogs.")
    parser.add_argument('games', nargs='*',
                        help=f"Games to refresh (default: all). Known: {', '.join(sorted(GAME_SOURCES))}")
    parser.add_argument('--output-dir', default=WEB_DATA_DIR, help="Directory for the per-game JSON files")
    parser.add_argument('--no-cache', action='store_true', help="Bypass the on-disk response cache")
    args = parser.parse_args(argv)

    unknown = [game for game in args.games if game.lower() not in GAME_SOURCES]
    if unknown:
        parser.error(f"unknown game(s): {', '.join(unknown)}")
    args.games = [game.lower() for game in args.games] or sorted(GAME_SOURCES)
    return args


async def main(argv: Optional[List[str]] = None) -> int:
    """Initializes and runs the CatalogPipeline."""
    args = parse_args(argv)
    async with aiohttp.ClientSession() as session:
        pipeline = CatalogPipeline(session, args.games, output_dir=args.output_dir, use_cache=CACHE_ENABLED and not args.no_cache)
        summary = await pipeline.run()
    return 0 if any(summary.values()) else 1


def cli() -> None:
    logging.basicConfig(
        level=LOG_LEVEL,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    raise SystemExit(asyncio.run(main()))


if __name__ == "__main__":
    cli()
