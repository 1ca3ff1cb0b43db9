from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional

from deskview.exceptions import ImageLoadError

logger = logging.getLogger("deskview.core.images")

ImageLoader = Callable[[str], Awaitable[Any]]


@dataclass(slots=True)
class CachedImage:
    """
    A decoded image held by the cache. ``src`` is the locator to render from.
    """

    url: str
    image: Any
    src: str

    def to_dict(self) -> dict:
        return {"url": self.url, "src": self.src}


class ImageCache:
    """
    Warm image cache keyed by URL.

    Images are fetched through the injected async loader. Concurrent
    preloads of the same URL share one load, and a failed load caches
    nothing so a later call can retry.
    """

    def __init__(self, loader: ImageLoader) -> None:
        self._loader = loader
        self._entries: Dict[str, CachedImage] = {}
        self._inflight: Dict[str, asyncio.Future] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def is_cached(self, url: str) -> bool:
        return url in self._entries

    def get(self, url: str) -> Optional[CachedImage]:
        return self._entries.get(url)

    def cached_url(self, url: str) -> str:
        """Locator to render ``url`` from: the cached source when warm, else ``url`` itself."""
        entry = self._entries.get(url)
        if entry is None:
            return url
        return entry.src

    async def preload(self, url: str) -> CachedImage:
        entry = self._entries.get(url)
        if entry is not None:
            return entry
        pending = self._inflight.get(url)
        if pending is None:
            pending = asyncio.ensure_future(self._load(url))
            self._inflight[url] = pending
        return await pending

    async def preload_many(self, urls: Iterable[str]) -> List[str]:
        """
        Warm every URL concurrently. Returns the URLs that failed; failures are logged, not raised.
        """
        unique = list(dict.fromkeys(url for url in urls if url))
        results = await asyncio.gather(*(self.preload(url) for url in unique), return_exceptions=True)
        failed = [url for url, result in zip(unique, results) if isinstance(result, BaseException)]
        if failed:
            logger.warning("Could not preload %s of %s images", len(failed), len(unique))
        return failed

    def evict(self, url: str) -> bool:
        return self._entries.pop(url, None) is not None

    def clear(self) -> None:
        self._entries.clear()

    async def _load(self, url: str) -> CachedImage:
        try:
            image = await self._loader(url)
        except Exception as exc:
            logger.warning("Could not load image %s: %s", url, exc)
            raise ImageLoadError(f"Could not load image {url}: {exc}") from exc
        finally:
            self._inflight.pop(url, None)
        entry = CachedImage(url=url, image=image, src=str(getattr(image, "src", None) or url))
        self._entries[url] = entry
        logger.debug("Cached image %s", url)
        return entry


__all__ = ["CachedImage", "ImageCache", "ImageLoader"]
