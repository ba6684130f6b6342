from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="RAPITAPIR_", env_file=".env", extra="ignore")

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False  # True for production (structured JSON), False for dev (colored)

    # Coercion
    COERCION_MODE: Literal["lenient", "strict"] = "lenient"

    @property
    def strict_coercion(self) -> bool:
        return self.COERCION_MODE == "strict"


@lru_cache
def get_settings() -> Settings:
    return Settings()
