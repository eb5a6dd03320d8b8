from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Plugin process settings loaded from environment variables.

    All variables use the GLIDE_GO_ prefix, e.g. GLIDE_GO_PORT=7410.
    enable_workspace / enable_tools seed the detector's feature gates
    until the host sends its own configuration.
    """

    model_config = SettingsConfigDict(
        env_prefix="GLIDE_GO_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Server
    host: str = "127.0.0.1"
    port: int = 7410

    # Build a detection-only plugin: no command catalogue, no execute capability.
    detection_only: bool = False

    # Feature gates
    enable_workspace: bool = True
    enable_tools: bool = True

    # Optional .glide.yml whose plugins.go block is applied at startup.
    config_file: Optional[str] = None

    # Sentry: leave blank to disable error capture.
    sentry_dsn: str = ""

    # App
    debug: bool = False


def get_settings() -> Settings:
    return Settings()
