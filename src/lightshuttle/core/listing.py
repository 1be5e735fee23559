from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from lightshuttle.core.errors import RuntimeCommandFailed
from lightshuttle.core.models import AppInstance
from lightshuttle.core.runtime.base import RuntimeClient
from lightshuttle.utils.logger import get_logger

logger = get_logger("lightshuttle.listing")

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10


@dataclass
class Page:
    total: int
    page: int
    limit: int
    items: List[AppInstance] = field(default_factory=list)


def _saturating_mul(a: int, b: int) -> int:
    return min(a * b, sys.maxsize)


def filter_by_name(items: Sequence[AppInstance], search: Optional[str]) -> List[AppInstance]:
    if not search:
        return list(items)
    query = search.lower()
    return [item for item in items if query in item.name.lower()]


def paginate(items: Sequence[AppInstance], page: int = DEFAULT_PAGE, limit: int = DEFAULT_LIMIT) -> Page:
    """Slice one page out of ``items``; pages past the end are empty."""
    total = len(items)
    start = _saturating_mul(max(page - 1, 0), limit)
    if start >= total:
        return Page(total=total, page=page, limit=limit, items=[])
    end = min(start + limit, total)
    return Page(total=total, page=page, limit=limit, items=list(items[start:end]))


def list_apps(
    runtime: RuntimeClient,
    *,
    page: int = DEFAULT_PAGE,
    limit: int = DEFAULT_LIMIT,
    search: Optional[str] = None,
) -> Page:
    """Fetch, filter and paginate the live container list.

    An unreachable runtime yields an empty list instead of an error; every
    other failure propagates.
    """
    try:
        apps = runtime.list()
    except RuntimeCommandFailed as e:
        logger.warning(f"Runtime unavailable, returning empty listing: {e!r}")
        apps = []
    return paginate(filter_by_name(apps, search), page=page, limit=limit)


__all__ = ["Page", "DEFAULT_PAGE", "DEFAULT_LIMIT", "filter_by_name", "paginate", "list_apps"]
