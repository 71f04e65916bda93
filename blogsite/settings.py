from pathlib import Path
from typing import Optional

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

    # microCMS
    MICROCMS_SERVICE_DOMAIN: str = ""
    MICROCMS_API_KEY: str = ""
    MICROCMS_API_VERSION: str = "v1"
    MICROCMS_BLOG_ENDPOINT: str = "blogs"
    MICROCMS_PAGE_SIZE: int = 100

    # Local markdown collection
    LOCAL_CONTENT_DIR: str = "src/content/blog"
    MERGE_LOCAL_CONTENT: bool = False

    # Site
    SITE_URL: str = "https://happy-m-work.com/"
    SITE_TITLE: str = "Happy M Work"
    SITE_DESCRIPTION: str = "Happy M Work blog"

    # Logging
    LOG_LEVEL: str = "INFO"

    @property
    def microcms_base_url(self) -> Optional[str]:
        if not self.MICROCMS_SERVICE_DOMAIN:
            return None
        return f"https://{self.MICROCMS_SERVICE_DOMAIN}.microcms.io/api/{self.MICROCMS_API_VERSION}"

    @property
    def microcms_enabled(self) -> bool:
        return bool(self.microcms_base_url and self.MICROCMS_API_KEY)

    @property
    def site_url(self) -> str:
        return self.SITE_URL if self.SITE_URL.endswith("/") else f"{self.SITE_URL}/"


# Global settings instance (evaluated at import, but reads env on construction)
settings = Settings()
