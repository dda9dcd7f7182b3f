"""Iteration over the remote host's paged collections."""

from collections.abc import Iterator
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from gandalf.transport import HTTPTransport

DEFAULT_PAGE_LIMIT = 100


def iter_pages(
    transport: "HTTPTransport",
    path: str,
    params: dict[str, Any] | None = None,
    limit: int = DEFAULT_PAGE_LIMIT,
) -> Iterator[dict[str, Any]]:
    """
    Yield every value of a paged collection.

    Pages look like ``{"values": [...], "isLastPage": bool,
    "nextPageStart": int}``.
    """
    start = 0
    while True:
        page = transport.request(
            "GET", path, params={**(params or {}), "start": start, "limit": limit}
        )
        yield from page.get("values", [])
        if page.get("isLastPage", True) or page.get("nextPageStart") is None:
            return
        start = page["nextPageStart"]
