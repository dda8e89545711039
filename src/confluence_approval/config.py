from dataclasses import dataclass
from typing import Literal

from pydantic_settings import BaseSettings

from confluence_approval.errors import ConfigurationError


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    # Confluence
    confluence_service_account_base_url: str | None = None
    confluence_username: str | None = None
    confluence_api_token: str | None = None
    confluence_default_space_key: str | None = None

    # Workflow
    group_naming: Literal["parentheses", "ancestors"] = "parentheses"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "info"
    http_timeout: float = 30.0


@dataclass(frozen=True)
class ConfluenceConfig:
    """Credentials and location of the Confluence site."""

    base_url: str
    username: str
    api_token: str

    @property
    def wiki_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/wiki"

    @classmethod
    def from_settings(cls, settings: Settings) -> "ConfluenceConfig":
        required = {
            "CONFLUENCE_SERVICE_ACCOUNT_BASE_URL": settings.confluence_service_account_base_url,
            "CONFLUENCE_USERNAME": settings.confluence_username,
            "CONFLUENCE_API_TOKEN": settings.confluence_api_token,
        }
        missing = [name for name, value in required.items() if not value]
        if missing:
            raise ConfigurationError(missing)
        return cls(
            base_url=settings.confluence_service_account_base_url,
            username=settings.confluence_username,
            api_token=settings.confluence_api_token,
        )
