"""Reporter posting each batch as JSON to an HTTP endpoint."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

import httpx

if TYPE_CHECKING:
    from flowperf.models import TestResult


class WebhookReporter:
    name = "webhook"

    def __init__(
        self,
        url: str,
        *,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._url = url
        self._timeout = timeout
        self._client = client

    async def _post(self, client: httpx.AsyncClient, results: Sequence[TestResult]) -> None:
        response = await client.post(
            self._url,
            json={"results": [r.model_dump(mode="json", by_alias=True) for r in results]},
            timeout=self._timeout,
        )
        response.raise_for_status()

    async def report(self, results: Sequence[TestResult]) -> None:
        if self._client is not None:
            await self._post(self._client, results)
            return
        async with httpx.AsyncClient() as client:
            await self._post(client, results)
