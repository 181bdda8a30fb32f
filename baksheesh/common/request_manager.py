"""Request manager for fetching listing pages.

SyncRequestManager owns the httpx.Client and turns HTTP exchanges into
Response objects, translating transport problems and error statuses into
TransientException subclasses. Drivers stay focused on page order and
failure policy.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from baksheesh.common.exceptions import (
    HTMLResponseAssumptionException,
    RequestFailedException,
    RequestTimeoutException,
)
from baksheesh.data_types import PageRequest, Response

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


class SyncRequestManager:
    """Manages HTTP requests for the synchronous driver.

    Example::

        with SyncRequestManager(timeout=10.0) as manager:
            html = manager.fetch("http://www.ipaidabribe.com/reports/paid")
    """

    def __init__(
        self,
        timeout: float | None = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the request manager.

        Args:
            timeout: Request timeout in seconds. None means no timeout.
            transport: Optional httpx transport, e.g. httpx.MockTransport.
        """
        self.timeout = timeout
        self._client = httpx.Client(
            timeout=timeout, transport=transport, follow_redirects=True
        )

    def close(self) -> None:
        """Close the HTTP client and release resources."""
        self._client.close()

    def __enter__(self) -> SyncRequestManager:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def resolve_request(self, request: PageRequest) -> Response:
        """Fetch a PageRequest and return the Response.

        Raises:
            HTMLResponseAssumptionException: On any non-2xx status code.
            RequestTimeoutException: If the request times out.
            RequestFailedException: On any other transport error.
        """
        url = request.url
        logger.info("Fetching %s", url)
        try:
            http_response = self._client.get(url)
        except httpx.TimeoutException as e:
            raise RequestTimeoutException(
                url=url, timeout_seconds=self.timeout
            ) from e
        except httpx.TransportError as e:
            raise RequestFailedException(url=url, reason=str(e)) from e

        if not http_response.is_success:
            raise HTMLResponseAssumptionException(
                status_code=http_response.status_code,
                expected_codes=[200],
                url=url,
            )

        return Response(
            status_code=http_response.status_code,
            headers=dict(http_response.headers),
            content=http_response.content,
            text=http_response.text,
            url=url,
            request=request,
        )

    def fetch(self, url: str) -> str:
        """Fetch a URL and return its body as text."""
        return self.resolve_request(PageRequest(offset=0, url=url)).text
