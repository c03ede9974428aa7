# replicate_client/services/model.py
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, AsyncIterator, Optional

from replicate_client.errors import NotFoundError, ReplicateError
from replicate_client.models import ModelVersion, Payload, Prediction, VersionResolution
from replicate_client.services.predictor import PredictionController

if TYPE_CHECKING:
    from replicate_client.services.replicate import ReplicateClient

logger = logging.getLogger(__name__)


async def resolve_version(client: "ReplicateClient", path: str, requested: Optional[str] = None) -> VersionResolution:
    """
    Выбирает версию модели из списка (самая свежая идёт первой).

    Если запрошенной версии нет, берём свежую и кладём предупреждение в
    результат: удалённая/старая версия не должна ломать работу с моделью.
    """
    versions = await client.get_model_versions(path)
    if not versions:
        raise NotFoundError(f"model {path} has no versions")

    latest = versions[0]
    if not requested:
        return VersionResolution(latest)

    for v in versions:
        if v.id == requested:
            return VersionResolution(v, requested=requested)

    warning = f"Model (version:{requested}) not found, defaulting to {latest.id}"
    logger.warning("%s: %s", path, warning)
    return VersionResolution(latest, requested=requested, warning=warning)


class Model:
    def __init__(self, path: str, version: Optional[str] = None, *, client: "ReplicateClient"):
        self.path = path
        self.version = version
        self.client = client
        self.resolution: Optional[VersionResolution] = None

    @classmethod
    async def fetch(cls, path: str, version: Optional[str] = None, *, client: "ReplicateClient") -> "Model":
        model = cls(path, version, client=client)
        await model.resolve()
        return model

    async def resolve(self) -> VersionResolution:
        # один раз; повторно сами не ходим
        if self.resolution is None:
            self.resolution = await resolve_version(self.client, self.path, self.version)
        return self.resolution

    @property
    def details(self) -> Optional[ModelVersion]:
        return self.resolution.version if self.resolution else None

    @property
    def version_id(self) -> str:
        if self.resolution is None:
            raise ReplicateError(f"model {self.path} is not resolved yet, call resolve() first")
        return self.resolution.version.id

    def predictor(self, input: Payload) -> AsyncIterator[Any]:
        return PredictionController(self.client).run(self, input)

    async def predict(self, input: Payload = "") -> Any:
        return await PredictionController(self.client).predict(self, input)

    async def wait(self, input: Payload = "") -> Prediction:
        return await PredictionController(self.client).wait(self, input)

    def __repr__(self) -> str:
        return f"Model(path={self.path!r}, version={self.resolution.version.id if self.resolution else self.version!r})"
