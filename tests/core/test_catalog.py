from __future__ import annotations

import asyncio
import json
from pathlib import Path

from deskview.core.catalog import DeskCatalog
from deskview.core.sources import json_file_source, static_source
from deskview.exceptions import CatalogLoadError


def test_load_populates_catalog_in_order(desk_dicts):
    catalog = DeskCatalog(static_source(desk_dicts))

    assert asyncio.run(catalog.load()) is True

    assert [desk.id for desk in catalog.desks] == [1, 2, 3]
    assert catalog.loading is False
    assert catalog.error is None


def test_lookups_by_id_and_slug(desk_dicts):
    catalog = DeskCatalog(static_source(desk_dicts))
    asyncio.run(catalog.load())

    assert catalog.find_by_id(3).name == "Alan Turing"
    assert catalog.find_by_id("3").name == "Alan Turing"
    assert catalog.find_by_slug("grace-hopper").id == 2
    assert catalog.find_by_id(99) is None
    assert catalog.find_by_slug("nobody") is None
    assert catalog.find_by_slug("") is None


def test_failed_refresh_keeps_previous_desks(desk_dicts):
    state = {"fail": False}

    async def source():
        if state["fail"]:
            raise CatalogLoadError("backend unavailable")
        return desk_dicts

    catalog = DeskCatalog(source)
    asyncio.run(catalog.load())
    state["fail"] = True

    assert asyncio.run(catalog.load()) is False

    assert len(catalog) == 3
    assert "backend unavailable" in catalog.error
    assert catalog.loading is False

    state["fail"] = False
    assert asyncio.run(catalog.load()) is True
    assert catalog.error is None


def test_concurrent_loads_run_once(desk_dicts):
    calls = []

    async def slow_source():
        calls.append(1)
        await asyncio.sleep(0.01)
        return desk_dicts

    catalog = DeskCatalog(slow_source)

    async def run_both():
        return await asyncio.gather(catalog.load(), catalog.load())

    results = asyncio.run(run_both())

    assert sorted(results) == [False, True]
    assert len(calls) == 1


def test_duplicate_slugs_return_first_match(make_desk, caplog):
    records = [make_desk(1, "Sam Lee"), make_desk(2, "Sam  Lee")]
    catalog = DeskCatalog(static_source(records))

    with caplog.at_level("WARNING", logger="deskview.core.catalog"):
        asyncio.run(catalog.load())

    assert catalog.find_by_slug("sam-lee").id == 1
    assert "sam-lee" in caplog.text


def test_json_file_source(tmp_path: Path, desk_dicts):
    path = tmp_path / "desks.json"
    path.write_text(json.dumps(desk_dicts), encoding="utf-8")
    catalog = DeskCatalog(json_file_source(path))

    assert asyncio.run(catalog.load()) is True
    assert catalog.find_by_slug("ada-lovelace").profile == "/profiles/1.jpg"


def test_json_file_source_reports_missing_file(tmp_path: Path):
    catalog = DeskCatalog(json_file_source(tmp_path / "missing.json"))

    assert asyncio.run(catalog.load()) is False
    assert catalog.error.startswith("Could not load desks")
    assert len(catalog) == 0
