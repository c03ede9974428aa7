# replicate_client/errors.py
from __future__ import annotations

from typing import Any, Optional


class ReplicateError(RuntimeError):
    """Базовая ошибка клиента Replicate."""


class ConfigurationError(ReplicateError):
    """Нет токена и нет прокси: клиент не может работать вообще."""


class TransportError(ReplicateError):
    """Сеть/транспорт упали и ретраи исчерпаны."""

    def __init__(self, message: str, status: Optional[int] = None, body: Any = None) -> None:
        super().__init__(message)
        self.status = status
        self.body = body


class ApiError(ReplicateError):
    """Сервис ответил не-2xx (или мусором вместо JSON)."""

    def __init__(self, message: str, status: Optional[int] = None, body: Any = None) -> None:
        super().__init__(message)
        self.status = status
        self.body = body

    def __str__(self) -> str:
        base = super().__str__()
        if self.status is None:
            return base
        return f"{base} [{self.status}]: {self.body}"


class NotFoundError(ApiError):
    """У модели нет ни одной версии."""
