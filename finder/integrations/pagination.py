"""
Offset pager over search-style endpoints.

The caller supplies a page function; this module owns the loop. Paging is
strictly sequential because each offset depends on the previous page's size.
"""

import logging
from collections.abc import Callable
from typing import Any

import httpx

logger = logging.getLogger(__name__)

PageFetcher = Callable[[int, int], list[Any] | None]


def fetch_all(
    fetch_page: PageFetcher,
    page_size: int = 200,
    max_total: int = 2000,
    label: str = "search",
) -> list[Any]:
    """
    Collect records page by page until the data or the cap runs out.

    Stops when a page is shorter than page_size, when max_total records have
    been collected, or when a page cannot be fetched. A failed page ends the
    loop and whatever was already collected is returned.

    Args:
        fetch_page: Called as fetch_page(offset, limit). Returns a list of
            records, or None when the endpoint gave no usable payload.
        page_size: Records requested per page.
        max_total: Upper bound on records returned.
        label: Name used in log lines.

    Returns:
        Up to max_total records in page order.
    """
    if page_size < 1:
        raise ValueError("page_size must be >= 1")

    collected: list[Any] = []
    offset = 0

    while len(collected) < max_total:
        try:
            page = fetch_page(offset, page_size)
        except (httpx.HTTPError, OSError, ValueError) as e:
            logger.warning(
                f"{label}: page at offset {offset} failed ({e}); keeping {len(collected)} records"
            )
            break

        if not isinstance(page, list):
            if offset:
                logger.warning(
                    f"{label}: no usable payload at offset {offset}; keeping {len(collected)} records"
                )
            else:
                logger.warning(f"{label}: no usable payload on first page")
            break

        collected.extend(page)

        if len(page) < page_size:
            break
        offset += page_size

    if len(collected) > max_total:
        collected = collected[:max_total]

    logger.debug(f"{label}: fetched {len(collected)} records")
    return collected
