"""
Runtime configuration

Values come from the environment, with a local .env file as fallback. The
token signing secret has no default and must be provided.
"""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_ignore_empty=True, extra="ignore")

    mongo_url: str = "mongodb://localhost:27017"
    database_name: str = "shop"

    jwt_secret: str
    jwt_algorithm: str = "HS256"
    # tokens never expire unless a lifetime is configured
    jwt_expire_minutes: Optional[int] = None

    bcrypt_rounds: int = 10
    port: int = 4000
    log_level: str = "INFO"

    cloudinary_cloud_name: Optional[str] = None
    cloudinary_api_key: Optional[str] = None
    cloudinary_api_secret: Optional[str] = None
    cloudinary_folder: str = "shopp-products"


@lru_cache()
def get_settings() -> Settings:
    return Settings()
