from typing import Optional

import httpx

from dme_orders.commons.errors import TransportError, TransportTimeoutError


class HttpSender:
    def __init__(self, url: str, timeout: float = 10.0, client: Optional[httpx.AsyncClient] = None):
        self.url = url
        self.timeout = timeout
        self._client = client

    async def send(self, json_text: str) -> httpx.Response:
        headers = {"Content-Type": "application/json"}
        try:
            if self._client is not None:
                resp = await self._client.post(self.url, content=json_text, headers=headers)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    resp = await client.post(self.url, content=json_text, headers=headers)
        except httpx.TimeoutException as ex:
            raise TransportTimeoutError(f"Timeout enviando a {self.url}: {ex}") from ex
        except httpx.TransportError as ex:
            raise TransportError(f"Error de red enviando a {self.url}: {ex}") from ex

        if resp.status_code >= 400:
            raise TransportError(
                f"Status: {resp.status_code}. Reason: {resp.reason_phrase}. Details: {resp.text}"
            )
        return resp
