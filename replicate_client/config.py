# replicate_client/config.py
import os
from dotenv import find_dotenv, load_dotenv

# .env ищем от текущей директории вверх; уже выставленные переменные окружения не трогаем
load_dotenv(find_dotenv(usecwd=True))

BASE_URL: str = "https://api.replicate.com/v1"
DEFAULT_POLLING_INTERVAL: int = 5000  # мс
TOKEN_ENV_VAR: str = "REPLICATE_API_TOKEN"

# коды, на которых имеет смысл повторить запрос
RETRYABLE_STATUS = (408, 429, 500, 502, 503, 504)


def env_token() -> str | None:
    # читаем в момент создания клиента, а не при импорте
    return (os.getenv(TOKEN_ENV_VAR, "") or "").strip() or None


class Settings:
    REQUEST_TIMEOUT: float = float(os.getenv("REPLICATE_TIMEOUT", "30"))
    RETRY_ATTEMPTS: int = int(os.getenv("REPLICATE_RETRY_ATTEMPTS", "3"))
    RATE_LIMIT: int = int(os.getenv("REPLICATE_RATE_LIMIT", "0"))  # запросов в минуту, 0 = без лимита
    LOG_LEVEL: str = os.getenv("REPLICATE_LOG_LEVEL", "WARNING").upper()

settings = Settings()
