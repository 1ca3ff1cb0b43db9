from __future__ import annotations

import logging
from typing import Awaitable, Callable, Mapping, Optional, Sequence, Tuple, Union

from deskview.core.records import coerce_records, find_slug_collisions, match_id
from deskview.state.models import DeskId, DeskRecord

logger = logging.getLogger("deskview.core.catalog")

DeskSource = Callable[[], Awaitable[Sequence[Union[DeskRecord, Mapping[str, object]]]]]


class DeskCatalog:
    """
    Ordered collection of desk records with loading and error status.

    Only one load runs at a time; a failed refresh keeps whatever was loaded before.
    """

    def __init__(self, source: DeskSource, records: Sequence[DeskRecord] = ()) -> None:
        self._source = source
        self._desks: Tuple[DeskRecord, ...] = tuple(records)
        self.loading: bool = False
        self.error: Optional[str] = None

    @property
    def desks(self) -> Tuple[DeskRecord, ...]:
        return self._desks

    def __len__(self) -> int:
        return len(self._desks)

    def __iter__(self):
        return iter(self._desks)

    async def load(self) -> bool:
        """
        Replace the catalog with a fresh fetch. Returns True when the catalog was replaced.
        """
        if self.loading:
            logger.debug("Desk load already in flight, ignoring request")
            return False
        self.loading = True
        try:
            raw = await self._source()
            records = coerce_records(raw)
        except Exception as exc:
            self.error = f"Could not load desks: {exc}"
            logger.warning("Desk load failed, keeping %s cached desks: %s", len(self._desks), exc)
            return False
        finally:
            self.loading = False

        collisions = find_slug_collisions(records)
        for slug, ids in collisions.items():
            logger.warning("Slug %r shared by desks %s; lookups return the first", slug, ids)
        self._desks = tuple(records)
        self.error = None
        logger.info("Loaded %s desks", len(self._desks))
        return True

    def find_by_id(self, desk_id: Optional[DeskId]) -> Optional[DeskRecord]:
        if desk_id is None:
            return None
        for desk in self._desks:
            if desk.id == desk_id:
                return desk
        for desk in self._desks:
            if match_id(desk.id, desk_id):
                return desk
        return None

    def find_by_slug(self, slug: Optional[str]) -> Optional[DeskRecord]:
        if not slug:
            return None
        for desk in self._desks:
            if desk.slug == slug:
                return desk
        return None


__all__ = ["DeskCatalog", "DeskSource"]
