from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache

class Settings(BaseSettings):

    STRIPE_SECRET_KEY: str

    PORT: int = 3000
    HOST: str = "0.0.0.0"
    ENVIRONMENT: str = "development"

    PRODUCTION_URL_COM: str = "https://donate.fairobserver.com"
    PRODUCTION_URL_XYZ: str = "https://donate.fairobserver.xyz"

    STATIC_DIR: str = "public"
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True
    )

    @field_validator("STRIPE_SECRET_KEY")
    @classmethod
    def secret_key_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("STRIPE_SECRET_KEY environment variable is required")
        return value

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

@lru_cache()
def get_settings() -> Settings:
    return Settings()
