"""Page endpoints of the Confluence v2 REST API.

:class:`AsyncPageAPI` is a thin wrapper; all HTTP concerns (auth,
retries, rate limiting) live in the transport.
"""

from __future__ import annotations

from typing import Any

from .transport import AsyncConfluenceTransport

PAGES_PATH = "/wiki/api/v2/pages"


class AsyncPageAPI:
    """Async wrapper for ``/wiki/api/v2/pages``.

    Parameters
    ----------
    transport:
        A configured :class:`AsyncConfluenceTransport`.
    """

    def __init__(self, transport: AsyncConfluenceTransport) -> None:
        self._transport = transport

    async def retrieve(self, page_id: str, body_format: str = "storage") -> dict[str, Any]:
        """Retrieve a page with its body in *body_format*.

        Returns
        -------
        dict
            The page object, with ``body.<body_format>.value`` populated.
        """
        return await self._transport.request(
            "GET",
            f"{PAGES_PATH}/{page_id}",
            params={"body-format": body_format},
        )

    async def list_children(
        self,
        page_id: str,
        cursor: str | None = None,
        limit: int = 100,
    ) -> dict[str, Any]:
        """Retrieve one page of a page's direct children.

        Parameters
        ----------
        page_id:
            Parent page id.
        cursor:
            Continuation cursor from the previous response, if any.
        limit:
            Maximum number of children per response.

        Returns
        -------
        dict
            ``{"results": [...], "_links": {"next": ...}}``; ``_links.next``
            is absent on the last page.
        """
        params: dict[str, Any] = {"limit": limit}
        if cursor is not None:
            params["cursor"] = cursor
        return await self._transport.request(
            "GET",
            f"{PAGES_PATH}/{page_id}/children",
            params=params,
        )
