from functools import lru_cache
from typing import Literal
import os
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

EnvName = Literal["development", "production"]

def _env_file_for(app_env: EnvName) -> str:
    return ".env.development" if app_env == "development" else ".env.production"

class Settings(BaseSettings):

    # Core
    APP_ENV: EnvName = "development"
    APP_NAME: str = "ProductService"
    DEBUG: bool = False
    GIT_SHA: str = "unknown"

    # Mongo
    MONGO_URI: str = "mongodb://localhost:27017"
    MONGO_DB: str = "product_service"
    MONGO_TLS: bool = False                    # Atlas / SRV deployments need True

    # Redis (optional, popularity cache only)
    REDIS_URL: str = ""

    # CORS, CSV of origins
    ALLOWED_ORIGINS: str = ""

    # Cache config
    POPULARITY_CACHE_TTL: int = Field(5 * 60, gt=0)   # seconds

    # Recommendation tuning
    POPULARITY_WINDOW_DAYS: int = Field(30, gt=0)
    SIMILARITY_MAX_PRICE_DIFF: float = Field(200.0, gt=0)   # price gap at which proximity hits 0
    TRENDING_RECENT_DAYS: int = Field(7, gt=0)

    # API
    API_PREFIX: str = "/api"

    # pydantic-settings config will be set dynamically in the factory below
    model_config = SettingsConfigDict(env_file=None, case_sensitive=True)

@lru_cache
def get_settings() -> Settings:
    """
    Factory that chooses the right .env file based on APP_ENV.
    Cache makes it cheap to inject via FastAPI dependencies.
    """
    app_env: EnvName = os.getenv("APP_ENV", "development")  # earliest switch
    env_file = _env_file_for(app_env)
    return Settings(
                _env_file=env_file,  # load .env.development or .env.production
                _env_file_encoding="utf-8"
    )
