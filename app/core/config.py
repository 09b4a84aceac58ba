# app/core/config.py
from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # Remote manufacturing-data API (GraphQL endpoint lives at <base>/graphql)
    REMOTE_API_BASE_URL: str = "http://localhost:8080"
    REMOTE_API_TOKEN: str = ""
    REMOTE_API_TIMEOUT: float = 30.0

    # Upper bound for a single action handler, in seconds. None disables it.
    DISPATCH_TIMEOUT_SECONDS: Optional[float] = 60.0

    # Context table persistence. Restored on startup, saved on shutdown.
    CONTEXT_SNAPSHOT_PATH: Optional[str] = None

    # Principals allowed to dispatch requests from the moment the service starts
    REGISTERED_PRINCIPALS: List[str] = []

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

settings = Settings()
