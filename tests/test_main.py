import json

import pytest

from game_catalog.config import APEX_DATA_URL, DOTA_HEROSTATS_URL
from game_catalog.main import CatalogPipeline, parse_args
from game_catalog.sources.registry import GAME_SOURCES

APEX_PAYLOAD = [
    {"_id": {"$oid": "1"}, "name": "Wraith", "class": "Skirmisher"},
    {"_id": {"$oid": "2"}, "name": "Bloodhound", "class": "Recon"},
]


class TestCatalogPipeline:
    @pytest.mark.asyncio
    async def test_saves_one_file_per_game(self, fake_session, tmp_path):
        session = fake_session({APEX_DATA_URL: APEX_PAYLOAD})
        pipeline = CatalogPipeline(session, ["apex"], output_dir=str(tmp_path), use_cache=False)

        summary = await pipeline.run()

        assert summary == {"apex": True}
        document = json.loads((tmp_path / "apex.json").read_text(encoding="utf-8"))
        assert document["game"] == "apex"
        assert document["status"] == "complete"
        assert document["unavailable_sources"] == []
        assert document["categories"] == ["All", "Legend"]
        assert [item["name"] for item in document["items"]] == ["Bloodhound", "Wraith"]

    @pytest.mark.asyncio
    async def test_unavailable_game_does_not_stop_the_others(self, fake_session, tmp_path):
        session = fake_session({APEX_DATA_URL: APEX_PAYLOAD})
        pipeline = CatalogPipeline(session, ["apex", "dota2"], output_dir=str(tmp_path), use_cache=False)

        summary = await pipeline.run()

        assert summary == {"apex": True, "dota2": False}
        assert (tmp_path / "apex.json").exists()
        assert not (tmp_path / "dota2.json").exists()
        assert DOTA_HEROSTATS_URL in session.urls()


class TestParseArgs:
    def test_defaults_to_every_game(self):
        args = parse_args([])
        assert args.games == sorted(GAME_SOURCES)
        assert args.no_cache is False

    def test_selected_games_and_options(self, tmp_path):
        args = parse_args(["CS2", "lol", "--output-dir", str(tmp_path), "--no-cache"])
        assert args.games == ["cs2", "lol"]
        assert args.output_dir == str(tmp_path)
        assert args.no_cache is True

    def test_unknown_game_is_rejected(self):
        with pytest.raises(SystemExit):
            parse_args(["minecraft"])
