# replicate_client/models.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from replicate_client.errors import ApiError

# вход/выход модели: непрозрачное JSON-значение, внутри не разбираем
Payload = Union[str, int, float, bool, None, Mapping[str, Any], Sequence[Any]]


class PredictionStatus(str, Enum):
    STARTING = "starting"
    PROCESSING = "processing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELED = "canceled"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES


TERMINAL_STATUSES = frozenset(
    {PredictionStatus.SUCCEEDED, PredictionStatus.FAILED, PredictionStatus.CANCELED}
)


@dataclass(frozen=True)
class RetryOptions:
    """
    Политика повторов для одного HTTP-вызова.

    attempts: сколько всего попыток (1 = без повторов);
    min_wait/max_wait: границы экспоненциальной паузы между попытками, сек.
    """
    attempts: int = 3
    min_wait: float = 1.0
    max_wait: float = 8.0


@dataclass
class Prediction:
    id: Optional[str]
    status: PredictionStatus
    output: Any = None
    error: Any = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    @classmethod
    def from_json(cls, data: Any, id: Optional[str] = None) -> "Prediction":
        # id из ответа; если его нет, берём тот, который опрашиваем (id=...)
        if not isinstance(data, dict):
            raise ApiError(f"prediction: expected JSON object, got {type(data).__name__}", body=data)
        pid = data.get("id")
        if not isinstance(pid, str) or not pid:
            pid = id
        try:
            status = PredictionStatus(data.get("status"))
        except ValueError:
            raise ApiError(f"prediction {pid}: unknown status {data.get('status')!r}", body=data) from None
        return cls(id=pid, status=status, output=data.get("output"), error=data.get("error"), raw=data)


@dataclass
class ModelVersion:
    id: str
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @property
    def created_at(self) -> Optional[str]:
        return self.raw.get("created_at")

    @classmethod
    def from_json(cls, data: Any) -> "ModelVersion":
        if not isinstance(data, dict) or not isinstance(data.get("id"), str):
            raise ApiError("model version: entry has no id", body=data)
        return cls(id=data["id"], raw=data)


@dataclass
class VersionResolution:
    """Итог выбора версии: сама версия + предупреждение, если пришлось откатиться на свежую."""
    version: ModelVersion
    requested: Optional[str] = None
    warning: Optional[str] = None

    @property
    def fell_back(self) -> bool:
        return self.warning is not None


def parse_versions(data: Any) -> List[ModelVersion]:
    results = data.get("results") if isinstance(data, dict) else None
    if not isinstance(results, list):
        raise ApiError("model versions: response has no 'results' list", body=data)
    return [ModelVersion.from_json(item) for item in results]


def check_payload(value: Any) -> None:
    # только форма (скаляр / объект / массив); содержимое проверяет сервис
    if value is None or isinstance(value, (str, int, float, bool, Mapping)):
        return
    if isinstance(value, Sequence) and not isinstance(value, (bytes, bytearray)):
        return
    raise TypeError(f"input must be a scalar, mapping or sequence, got {type(value).__name__}")
