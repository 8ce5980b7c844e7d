from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


def choose_env_file() -> str:
    return ".env.local" if Path(".env.local").exists() else ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=choose_env_file(),
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",  # tolerate unrelated env vars
    )

    # Post store
    POST_STORE_BACKEND: str = "sql"  # memory | couchdb | sql
    POST_STORE_MAX_BYTES: int = 5 * 1024 * 1024

    # CouchDB
    COUCHDB_HOST: str = "localhost"
    COUCHDB_PORT: int = 5984
    COUCHDB_USERNAME: str = "admin"
    COUCHDB_PASSWORD: str = ""
    COUCHDB_DATABASE: str = "mdpreview"

    # SQL
    SQL_DATABASE_URL: str = "sqlite:///./mdpreview.db"

    # Preview
    LOAD_DELAY_SECONDS: float = 0.1
    PREVIEW_BASE_PATH: str = "/preview"
    SHARE_BASE_URL: str = "https://omoshirokaiwai.com/blog/"
    SITE_NAME: str = "Omoshiro Kaiwai"

    # Logging
    LOG_LEVEL: str = "INFO"

    @property
    def couchdb_url(self) -> str:
        return f"http://{self.COUCHDB_USERNAME}:{self.COUCHDB_PASSWORD}@{self.COUCHDB_HOST}:{self.COUCHDB_PORT}"


# Global settings instance (evaluated at import, but reads env on construction)
settings = Settings()
