# replicate_client/services/predictor.py
from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any, AsyncIterator, Awaitable, Callable, Optional, Union

from replicate_client.errors import ReplicateError
from replicate_client.models import Payload, Prediction

if TYPE_CHECKING:
    from replicate_client.services.model import Model
    from replicate_client.services.replicate import ReplicateClient

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[Any]]


def _version_id(model: Union["Model", str]) -> str:
    return model if isinstance(model, str) else model.version_id


def _log_terminal(prediction: Prediction) -> None:
    if prediction.error:
        logger.info("prediction %s: %s (%s)", prediction.id, prediction.status.value, prediction.error)
    else:
        logger.info("prediction %s: %s", prediction.id, prediction.status.value)


class PredictionController:
    """
    Жизненный цикл одного предсказания: старт, затем опрос раз в
    polling_interval, пока статус не станет финальным.

    Каждое наблюдение отдаётся наружу по мере получения; финальное
    отдаётся всегда, после него опрос прекращается. Пауза между опросами:
    asyncio.sleep, так что параллельные запуски друг другу не мешают.
    Если потребитель бросил итерацию, опрос просто останавливается,
    отмену на сервисе не шлём.
    """

    def __init__(self, client: "ReplicateClient", *, sleep: Optional[Sleep] = None):
        self.client = client
        self._sleep: Sleep = sleep or asyncio.sleep

    async def observe(self, model: Union["Model", str], input: Payload) -> AsyncIterator[Prediction]:
        prediction = await self.client.start_prediction(_version_id(model), input)
        logger.debug("prediction %s started: %s", prediction.id, prediction.status.value)

        # сервис может сразу вернуть финальный статус, это одна итерация, не ошибка
        if prediction.is_terminal:
            _log_terminal(prediction)
            yield prediction
            return

        interval = self.client.polling_interval / 1000.0
        prediction_id = prediction.id
        while True:
            prediction = await self.client.get_prediction(prediction_id)
            if prediction.is_terminal:
                _log_terminal(prediction)
                yield prediction
                return
            logger.debug("prediction %s: %s", prediction_id, prediction.status.value)
            yield prediction
            await self._sleep(interval)

    async def run(self, model: Union["Model", str], input: Payload) -> AsyncIterator[Any]:
        async for prediction in self.observe(model, input):
            yield prediction.output

    async def wait(self, model: Union["Model", str], input: Payload) -> Prediction:
        last: Optional[Prediction] = None
        async for last in self.observe(model, input):
            pass
        if last is None:
            raise ReplicateError("prediction stream ended without an observation")
        return last

    async def predict(self, model: Union["Model", str], input: Payload) -> Any:
        output: Any = None
        async for output in self.run(model, input):
            pass
        return output
