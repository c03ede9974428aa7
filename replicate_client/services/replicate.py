from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional

from replicate_client.config import BASE_URL, DEFAULT_POLLING_INTERVAL, TOKEN_ENV_VAR, env_token
from replicate_client.errors import ApiError, ConfigurationError
from replicate_client.models import ModelVersion, Payload, Prediction, RetryOptions, check_payload, parse_versions
from replicate_client.services.model import Model
from replicate_client.services.transport import HTTPTransport, Transport

logger = logging.getLogger(__name__)

ModelLookup = Callable[[str, Optional[str]], Awaitable[Model]]


class _Models:
    # client.models.get("owner/name"), можно подменить model_lookup'ом
    def __init__(self, client: "ReplicateClient", lookup: Optional[ModelLookup] = None):
        self._client = client
        self._lookup = lookup

    async def get(self, path: str, version: Optional[str] = None) -> Model:
        if self._lookup is not None:
            return await self._lookup(path, version)
        return await Model.fetch(path, version, client=self._client)


class ReplicateClient:
    def __init__(
        self,
        token: Optional[str] = None,
        *,
        base_url: Optional[str] = None,
        proxy_url: Optional[str] = None,
        transport: Optional[Transport] = None,
        polling_interval: Optional[int] = None,
        model_lookup: Optional[ModelLookup] = None,
    ):
        self.token = (token or "").strip() or env_token()
        if not self.token and not proxy_url:
            raise ConfigurationError(f"Missing Replicate token: pass token= or set {TOKEN_ENV_VAR}")

        base = (base_url or BASE_URL).rstrip("/")
        self.proxy_url = proxy_url.rstrip("/") if proxy_url else None
        self.base_url = f"{self.proxy_url}/{base}" if self.proxy_url else base
        self.polling_interval = DEFAULT_POLLING_INTERVAL if polling_interval is None else polling_interval

        self._owns_transport = transport is None
        self.transport: Transport = transport if transport is not None else HTTPTransport()
        self.models = _Models(self, model_lookup)

    async def aclose(self) -> None:
        if self._owns_transport:
            await self.transport.aclose()

    async def __aenter__(self) -> "ReplicateClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def _call(
        self,
        path: str,
        *,
        method: str,
        event: str,
        body: Optional[Dict[str, Any]] = None,
        retry: Optional[RetryOptions] = None,
    ) -> Any:
        url = f"{self.base_url}{path}"
        logger.debug("%s: %s %s", event, method.upper(), url)
        if method == "post":
            return await self.transport.post(url, self.token, body or {}, retry)
        return await self.transport.get(url, self.token, retry)

    async def get_model_versions(self, path: str, retry: Optional[RetryOptions] = None) -> List[ModelVersion]:
        data = await self._call(f"/models/{path}/versions", method="get", event="getModelDetails", retry=retry)
        return parse_versions(data)

    async def start_prediction(
        self, version_id: str, input: Payload, retry: Optional[RetryOptions] = None
    ) -> Prediction:
        check_payload(input)
        data = await self._call(
            "/predictions",
            method="post",
            event="startPrediction",
            body={"version": version_id, "input": input},
            retry=retry,
        )
        prediction = Prediction.from_json(data)
        # без id опрашивать нечего; финальный ответ на старте id не требует
        if not prediction.id and not prediction.is_terminal:
            raise ApiError("startPrediction: in-flight prediction has no id", body=data)
        return prediction

    async def get_prediction(self, prediction_id: str, retry: Optional[RetryOptions] = None) -> Prediction:
        data = await self._call(f"/predictions/{prediction_id}", method="get", event="getPrediction", retry=retry)
        return Prediction.from_json(data, id=prediction_id)

    async def run(self, ref: str, input: Payload = "") -> Any:
        """Сахар: "owner/name[:version]" -> итоговый output."""
        path, _, version = ref.partition(":")
        model = await self.models.get(path, version or None)
        return await model.predict(input)
