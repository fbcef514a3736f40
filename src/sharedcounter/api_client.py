from typing import Optional

import httpx
from kivy.logger import Logger as logger

from .core.models import Counter
from .errors import CounterDecodeError, CounterTransportError

DEFAULT_HOST = "http://localhost:3000"

# httpx raises InvalidURL and UnicodeError for hosts it cannot build a request for
REQUEST_ERRORS = (httpx.HTTPError, httpx.InvalidURL, UnicodeError)


class CounterClient:
    """
    Blocking HTTP client for the counter server.

    Safe to share between the bridge's poll and set threads: httpx.Client
    is thread-safe.
    """

    def __init__(
        self,
        host: str = DEFAULT_HOST,
        timeout: Optional[float] = None,
        client: Optional[httpx.Client] = None,
    ):
        self.host = host.rstrip("/")
        self._owns_client = client is None
        self._client = client if client is not None else httpx.Client(timeout=timeout)

    @property
    def counter_url(self) -> str:
        return f"{self.host}/counter"

    # ---------- Public API ----------

    def get_counter(self) -> Counter:
        try:
            response = self._client.get(self.counter_url)
        except REQUEST_ERRORS as e:
            raise CounterTransportError(f"GET {self.counter_url} failed: {e}") from e

        if not response.is_success:
            raise CounterTransportError(
                f"GET {self.counter_url} returned {response.status_code}",
                status_code=response.status_code,
            )
        try:
            payload = response.json()
        except ValueError as e:
            raise CounterDecodeError(f"Response body is not JSON: {e}") from e
        return Counter.from_dict(payload)

    def set_counter(self, counter: Counter) -> bool:
        try:
            response = self._client.put(self.counter_url, json=counter.to_dict())
        except REQUEST_ERRORS as e:
            raise CounterTransportError(f"PUT {self.counter_url} failed: {e}") from e

        if not response.is_success:
            logger.debug(
                "CounterClient: PUT %s returned %s", self.counter_url, response.status_code
            )
        return response.is_success

    def close(self):
        if self._owns_client:
            self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()
