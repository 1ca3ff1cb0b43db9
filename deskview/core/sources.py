from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import List, Mapping, Sequence, Union

from deskview.core.catalog import DeskSource
from deskview.core.submissions import SubmissionStore
from deskview.exceptions import CatalogLoadError
from deskview.state.models import DeskRecord


def _read_desks_file(path: Path) -> List[dict]:
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
    except (OSError, json.JSONDecodeError) as exc:
        raise CatalogLoadError(f"{path}: {exc}") from exc
    if not isinstance(data, list):
        raise CatalogLoadError(f"{path}: expected a JSON list of desks")
    return data


def json_file_source(path: str | Path) -> DeskSource:
    """
    Data source reading a desks JSON file (a list of wire-shaped desk records).
    """
    target = Path(path)

    async def fetch() -> List[dict]:
        return await asyncio.to_thread(_read_desks_file, target)

    return fetch


def static_source(records: Sequence[Union[DeskRecord, Mapping[str, object]]]) -> DeskSource:
    snapshot = list(records)

    async def fetch() -> List[Union[DeskRecord, Mapping[str, object]]]:
        return list(snapshot)

    return fetch


def store_source(store: SubmissionStore) -> DeskSource:
    """Approved submissions, newest approval first."""

    async def fetch() -> List[DeskRecord]:
        return await asyncio.to_thread(store.approved_records)

    return fetch


__all__ = ["json_file_source", "static_source", "store_source"]
