import logging

from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_prefix="BILLED_", extra="ignore")

    store_backend: str = "http"  # http | local | none

    api_url: str = "http://localhost:5678"
    api_token: str = ""
    api_timeout: float = 30.0  # seconds

    db_url: str = "sqlite:///billed.db"

    storage_local_path: str = "./receipts"
    storage_prefix: str = "receipts"

    user_email: str = ""
    locale: str = "fr"

    log_level: str = "INFO"
    log_json: bool = False

    def get_api_token(self) -> str:
        if not self.api_token and self.store_backend == "http":
            logger.warning(
                "BILLED_API_TOKEN is not set. Requests to %s are sent without credentials.",
                self.api_url,
            )
        return self.api_token


settings = Settings()
