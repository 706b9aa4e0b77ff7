import logging
from typing import Any, Callable, Iterator, Optional

logger = logging.getLogger(__name__)

MAX_PAGES = 50


def iter_pages(
    fetch: Callable[[Optional[str]], dict],
    *,
    max_pages: int = MAX_PAGES,
) -> Iterator[Any]:
    """
    Walk a `{count, next, previous, results}` listing from the marketplace API.

    `fetch(None)` loads the first page, `fetch(url)` loads the page behind a
    `next` link. Yields the items of every page in order.
    """
    url = None
    pages = 0

    while True:
        page = fetch(url) or {}
        pages += 1

        yield from page.get("results", [])

        url = page.get("next")
        if not url:
            break

        if pages >= max_pages:
            logger.warning(
                f"Stopped after {pages} pages; {page.get('count')} items reported"
            )
            break

    if pages > 1:
        logger.info(f"Listing spanned {pages} pages")
