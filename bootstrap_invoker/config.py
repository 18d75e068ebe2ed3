from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Invoker settings loaded from environment."""

    # Service
    service_name: str = "bootstrap-invoker"
    log_level: str = "INFO"
    log_event_payload: bool = False  # Log a truncated copy of each event

    # Bootstrap executable
    bootstrap_path: str = "./bootstrap"
    bootstrap_cwd: str | None = None  # None inherits the invoker's cwd

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
