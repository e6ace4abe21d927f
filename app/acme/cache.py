"""
Listing cache.

List views keep their read projection in Flask-Caching under a key that embeds a
per-path version token. Mutations call ``revalidate_path()`` which replaces the
token, so every cached variant of that listing (any search/page) is recomputed
on the next view.

The backend must be shared by every worker process that serves the app
(FileSystemCache or RedisCache); SimpleCache lives inside one process and is
only fit for development and tests.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from typing import Any, TypeVar

from flask_caching import Cache

cache = Cache()
logger = logging.getLogger(__name__)

T = TypeVar("T")

PROCESS_LOCAL_BACKENDS = ("simple", "simplecache")


def is_process_local(cache_type: str | None) -> bool:
    return (cache_type or "").rsplit(".", 1)[-1].strip().lower() in PROCESS_LOCAL_BACKENDS


def _version_key(path: str) -> str:
    return f"listing-version:{path}"


def path_version(path: str) -> str:
    """
    Current version token for ``path``.

    A missing token (first use, or evicted by the backend) is replaced by a fresh
    one, so entries stored under an older token are never served again.
    """
    key = _version_key(path)
    version = cache.get(key)
    if version is None:
        # add() keeps whichever token another worker stored first.
        cache.add(key, uuid.uuid4().hex, timeout=0)
        version = cache.get(key)
    return str(version)


def revalidate_path(path: str) -> str:
    """Invalidate every cached listing under ``path``. Returns the new token."""
    version = uuid.uuid4().hex
    # timeout=0: the version marker must outlive the entries it guards.
    cache.set(_version_key(path), version, timeout=0)
    logger.debug("Revalidated listing %s (version=%s)", path, version)
    return version


def cached_listing(
    path: str,
    variant: str,
    loader: Callable[[], T],
    depends_on: tuple[str, ...] = (),
) -> T:
    """
    Return the cached projection for ``path``/``variant`` or load and store it.

    ``depends_on`` names other listing paths whose data is joined into this one;
    revalidating any of them also misses here.
    """
    versions = ",".join(path_version(p) for p in (path, *depends_on))
    key = f"listing:{path}:{versions}:{variant}"
    hit: Any = cache.get(key)
    if hit is not None:
        return hit
    value = loader()
    cache.set(key, value)
    return value
