"""Continuation-token pagination shared by the directory and Drive listings."""
from typing import Any, Callable, Iterator, Optional


def iter_pages(
    fetch_page: Callable[[Optional[str]], dict[str, Any]]
) -> Iterator[dict[str, Any]]:
    """Yield response pages until the API stops returning a next-page token.

    Args:
        fetch_page: Called with the previous page's ``nextPageToken``
            (``None`` for the first page) and returns the decoded response.

    Yields:
        Each response dictionary, in request order.
    """
    page_token = None
    while True:
        response = fetch_page(page_token)
        yield response
        page_token = response.get('nextPageToken')
        if not page_token:
            break
