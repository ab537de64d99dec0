"""Base class for source connectors.

A connector owns everything HTTP-related for one provider: URL, headers,
authentication, default parameters, its response cache and parsing. The rest
of the code only ever sees parsed response models.

`search` never raises for upstream trouble. Non-2xx statuses, transport
errors, timeouts and undecodable bodies are logged and returned as an empty
response whose `error` is set.
"""

from __future__ import annotations

import asyncio
import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Callable, ClassVar, Dict, Generic, Iterable, List, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from ..cache import ResponseCache
from ..config import Settings, get_settings
from ..models import SourceResponse

logger = logging.getLogger(__name__)

P = TypeVar("P", bound=BaseModel)
R = TypeVar("R", bound=SourceResponse)
M = TypeVar("M", bound=BaseModel)


class JobSource(ABC, Generic[P, R]):
    """Abstract base class for a job source connector."""

    name: ClassVar[str]
    base_url: ClassVar[str]
    params_model: ClassVar[Type[BaseModel]]
    response_model: ClassVar[Type[SourceResponse]]
    default_params: ClassVar[Dict[str, Any]] = {}

    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.settings = settings or get_settings()
        self._transport = transport
        self.cache: ResponseCache[R] = ResponseCache(self.cache_ttl_s, clock=clock)

    # ---- Per-source hooks ------------------------------------------------------

    @property
    @abstractmethod
    def cache_ttl_s(self) -> float:
        """How long a successful response stays valid, in seconds."""

    @property
    def enabled(self) -> bool:
        """False when the source lacks the credentials it needs."""
        return True

    def defaults(self) -> Dict[str, Any]:
        return dict(self.default_params)

    def headers(self) -> Dict[str, str]:
        return {
            "Accept": "application/json",
            "User-Agent": self.settings.user_agent,
        }

    def auth_params(self) -> Dict[str, str]:
        """Credentials sent as query parameters; kept out of the cache key."""
        return {}

    def url_for(self, params: P) -> str:
        return self.base_url

    @abstractmethod
    def parse(self, payload: Dict[str, Any]) -> R:
        """Turn a decoded JSON body into the source's response model."""

    # ---- Request building ------------------------------------------------------

    def merge_defaults(self, params: Optional[P]) -> P:
        """Return a new parameter object: defaults overridden by explicit values."""
        explicit: Dict[str, Any] = {}
        if params is not None:
            for field_name in type(params).model_fields:
                value = getattr(params, field_name)
                if value is not None:
                    explicit[field_name] = value
        return self.params_model(**{**self.defaults(), **explicit})

    @staticmethod
    def query_for(params: BaseModel) -> Dict[str, str]:
        """Serialize parameters to query-string values, skipping unset fields."""
        query: Dict[str, str] = {}
        for key, value in params.model_dump(by_alias=True, exclude_none=True).items():
            if isinstance(value, bool):
                query[key] = "true" if value else "false"
            else:
                query[key] = str(value)
        return query

    def empty(self, error: Optional[str] = None) -> R:
        return self.response_model(error=error)

    def _parse_items(self, model: Type[M], raw_items: Iterable[Any]) -> List[M]:
        """Validate upstream records one by one, skipping the malformed ones."""
        out: List[M] = []
        for raw in raw_items or []:
            try:
                out.append(model.model_validate(raw))
            except ValidationError as exc:
                logger.warning(f"Skipping malformed {self.name} record: {exc.error_count()} validation error(s)")
        return out

    # ---- Network ---------------------------------------------------------------

    async def _get_json(self, url: str, query: Dict[str, str]) -> Any:
        """One GET with the source's headers; HTTP 429 is retried with backoff."""
        params = {**query, **self.auth_params()}
        retries = 0
        async with httpx.AsyncClient(
            timeout=self.settings.http_timeout_s,
            headers=self.headers(),
            transport=self._transport,
            follow_redirects=True,
        ) as client:
            while True:
                resp = await client.get(url, params=params)
                if resp.status_code == 429 and retries < self.settings.max_retries:
                    sleep_s = self.settings.retry_backoff_s * (2**retries)
                    logger.warning(f"{self.name} rate limited; retrying in {sleep_s:.1f}s")
                    await asyncio.sleep(sleep_s)
                    retries += 1
                    continue
                resp.raise_for_status()
                return resp.json()

    async def search(self, params: Optional[P] = None) -> R:
        """Search the source, serving from the cache while the entry is fresh."""
        if not self.enabled:
            logger.warning(f"{self.name} credentials not configured; returning empty results")
            return self.empty(error=f"{self.name} is not configured")

        merged = self.merge_defaults(params)
        url = self.url_for(merged)
        query = self.query_for(merged)
        cache_key = ResponseCache.make_key({"url": url, "params": query})

        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.debug(f"{self.name} cache hit for {cache_key}")
            return cached

        try:
            payload = await self._get_json(url, query)
            if not isinstance(payload, dict):
                raise ValueError(f"unexpected {type(payload).__name__} payload")
            result = self.parse(payload)
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            logger.error(f"{self.name} API error: {status} {exc.response.reason_phrase}")
            return self.empty(error=f"{self.name} API error: {status}")
        except (httpx.HTTPError, ValueError) as exc:
            logger.error(f"Error fetching {self.name} data: {exc!r}")
            return self.empty(error=f"{self.name} request failed: {exc.__class__.__name__}")

        self.cache.set(cache_key, result)
        return result

    def clear_cache(self) -> None:
        self.cache.clear()
