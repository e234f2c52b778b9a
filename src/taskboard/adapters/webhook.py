"""HTTP webhook implementation of ChangePublisher."""

from __future__ import annotations

import httpx

from taskboard.models import ChangeDescriptor
from taskboard.repositories import ChangePublisher


class WebhookChangePublisher(ChangePublisher):
    """POSTs each change descriptor as JSON to a webhook URL."""

    def __init__(
        self,
        url: str,
        *,
        timeout: float = 10.0,
        token: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the webhook publisher.

        Args:
            url: Endpoint receiving change descriptors
            timeout: Request timeout in seconds
            token: Optional bearer token sent in the Authorization header
            transport: Optional httpx transport (used by tests)
        """
        self.url = url
        self.timeout = timeout
        self.token = token
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    def _get_headers(self) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def open(self) -> None:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                headers=self._get_headers(),
                transport=self._transport,
                follow_redirects=True,
            )

    async def publish(self, change: ChangeDescriptor) -> None:
        """Send the change; raises httpx.HTTPError on transport or HTTP failure."""
        if self._client is None:
            await self.open()
        assert self._client is not None
        response = await self._client.post(
            self.url, json=change.model_dump(mode="json", by_alias=True)
        )
        response.raise_for_status()

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
