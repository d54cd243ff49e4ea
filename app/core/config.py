from typing import List, Literal
from pydantic import EmailStr
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """
    Configuration settings for the application, loaded from .env file and environment variables.
    """

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    MONGO_URI: str
    MONGO_DB: str

    PROJECT_NAME: str = "Fadlocar API"
    API_STR: str = "/api"
    PROJECT_VERSION: str = "1.0.0"
    PROJECT_DESCRIPTION: str = "Car rental marketplace backend"

    ACCESS_TOKEN_SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    SUPER_ADMIN_NAME: str
    SUPER_ADMIN_EMAIL: EmailStr
    SUPER_ADMIN_PASSWORD: str

    AZURE_STORAGE_CONNECTION_STRING: str
    CAR_CONTAINER_NAME: str = "cars"
    BLOG_CONTAINER_NAME: str = "blog"

    # Listing rules
    MAX_IMAGE_SIZE_MB: int = 5
    MAX_IMAGES_PER_CAR: int = 10
    CAR_DESCRIPTION_MAX_LENGTH: int = 1000
    ENFORCE_PRICE_MULTIPLE_OF_100: bool = False
    ENFORCE_UNIQUE_CAR_NAME: bool = True
    CAR_DELETE_POLICY: Literal["block", "cascade"] = "block"
    RELATED_LIMIT: int = 3

    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "https://fadlocar.vercel.app",
    ]


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()


settings = get_settings()
