# replicate_client/services/transport.py
from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Protocol

import httpx
from aiolimiter import AsyncLimiter
from tenacity import AsyncRetrying, RetryCallState, retry_if_exception, stop_after_attempt, wait_exponential

from replicate_client.config import RETRYABLE_STATUS, settings
from replicate_client.errors import ApiError, TransportError
from replicate_client.models import RetryOptions

logger = logging.getLogger(__name__)


class Transport(Protocol):
    """То, что нужно клиенту от HTTP: get/post с токеном, в ответ JSON."""

    async def get(self, url: str, token: Optional[str], retry: Optional[RetryOptions] = None) -> Any:
        ...

    async def post(
        self, url: str, token: Optional[str], body: Dict[str, Any], retry: Optional[RetryOptions] = None
    ) -> Any:
        ...


def _mk_headers(token: Optional[str]) -> Dict[str, str]:
    headers = {
        "Content-Type": "application/json",
        "Accept": "application/json",
    }
    # через прокси токена может не быть: авторизацию добавляет прокси
    if token:
        headers["Authorization"] = f"Token {token}"
    return headers


def _retry_filter(exc: BaseException) -> bool:
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response is not None and exc.response.status_code in RETRYABLE_STATUS
    return isinstance(exc, httpx.TransportError)


def _retry_filter_post(exc: BaseException) -> bool:
    # POST создаёт предсказание; повторяем только если запрос точно не дошёл
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response is not None and exc.response.status_code == 429
    return isinstance(exc, (httpx.ConnectError, httpx.ConnectTimeout))


def _log_retry(state: RetryCallState) -> None:
    exc = state.outcome.exception() if state.outcome else None
    logger.warning(
        "HTTP attempt %s failed (%r), retrying in %.1fs",
        state.attempt_number,
        exc,
        state.next_action.sleep if state.next_action else 0.0,
    )


def _body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


class HTTPTransport:
    """
    Транспорт по умолчанию: один httpx.AsyncClient на всех (его можно
    дёргать конкурентно), ретраи через tenacity, опционально лимит запросов.
    """

    def __init__(
        self,
        *,
        timeout: Optional[float] = None,
        retry: Optional[RetryOptions] = None,
        rate_limit: Optional[int] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout or settings.REQUEST_TIMEOUT)
        self.retry = retry or RetryOptions(attempts=settings.RETRY_ATTEMPTS)
        limit = settings.RATE_LIMIT if rate_limit is None else rate_limit
        self._limiter: Optional[AsyncLimiter] = AsyncLimiter(limit, 60) if limit else None

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "HTTPTransport":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    # ---------- Публичные методы ----------

    async def get(self, url: str, token: Optional[str], retry: Optional[RetryOptions] = None) -> Any:
        return await self._send("GET", url, token, None, retry, idempotent=True)

    async def post(
        self, url: str, token: Optional[str], body: Dict[str, Any], retry: Optional[RetryOptions] = None
    ) -> Any:
        return await self._send("POST", url, token, body, retry, idempotent=False)

    # ---------- Вспомогательные ----------

    async def _request(self, method: str, url: str, token: Optional[str], body: Optional[Dict[str, Any]]) -> httpx.Response:
        headers = _mk_headers(token)
        if self._limiter is not None:
            async with self._limiter:
                r = await self._client.request(method, url, headers=headers, json=body)
        else:
            r = await self._client.request(method, url, headers=headers, json=body)
        r.raise_for_status()
        return r

    async def _send(
        self,
        method: str,
        url: str,
        token: Optional[str],
        body: Optional[Dict[str, Any]],
        retry: Optional[RetryOptions],
        *,
        idempotent: bool,
    ) -> Any:
        opts = retry or self.retry
        retrying = AsyncRetrying(
            wait=wait_exponential(min=opts.min_wait, max=opts.max_wait),
            stop=stop_after_attempt(max(1, opts.attempts)),
            retry=retry_if_exception(_retry_filter if idempotent else _retry_filter_post),
            before_sleep=_log_retry,
            reraise=True,
        )
        logger.debug("%s %s", method, url)
        try:
            async for attempt in retrying:
                with attempt:
                    r = await self._request(method, url, token, body)
        except httpx.HTTPStatusError as ex:
            status = ex.response.status_code
            # 408/429/5xx: сервис недоступен, а не отказал по существу
            if status in RETRYABLE_STATUS:
                raise TransportError(f"{method} {url} failed after retries", status=status, body=_body(ex.response)) from ex
            raise ApiError(f"{method} {url} failed", status=status, body=_body(ex.response)) from ex
        except httpx.TransportError as ex:
            raise TransportError(f"{method} {url} -> transport error: {ex!r}") from ex

        if not r.content:
            return None
        try:
            return r.json()
        except ValueError:
            raise ApiError(f"{method} {url} returned non-JSON body", status=r.status_code, body=r.text) from None
