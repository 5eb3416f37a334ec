from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from .classifier import DEFAULT_PERSISTABLE_EVENT_TYPES


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=None, case_sensitive=False)

    env: str = "development"
    app_name: str = "GitHub Webhook Receiver"
    app_version: str = "0.1.0"
    service_name: str = "webhook-receiver"
    port: int = 8080

    # Unset disables signature verification (local development only)
    github_webhook_secret: str | None = None

    # Unset disables storage; events are still logged and acknowledged
    database_url: str | None = None
    persistence_timeout_seconds: float = 5.0
    persistable_event_types: list[str] = sorted(DEFAULT_PERSISTABLE_EVENT_TYPES)

    # Used by scripts/purge_old_events.py
    retention_days: int = 30

    @property
    def signature_required(self) -> bool:
        return bool((self.github_webhook_secret or "").strip())

    @property
    def storage_enabled(self) -> bool:
        return bool((self.database_url or "").strip())


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


def validate_settings(settings: Settings) -> None:
    """Basic runtime validation for reliability and secret hygiene."""
    if settings.persistence_timeout_seconds <= 0:
        raise ValueError("PERSISTENCE_TIMEOUT_SECONDS must be greater than zero")
    if not 0 < settings.port < 65536:
        raise ValueError("PORT must be between 1 and 65535")
    if settings.retention_days <= 0:
        raise ValueError("RETENTION_DAYS must be greater than zero")
    if any(not t.strip() for t in settings.persistable_event_types):
        raise ValueError("PERSISTABLE_EVENT_TYPES must not contain empty entries")
    # Unsigned webhooks are tolerated, but never silently in production
    if settings.env in ("production", "prod", "staging") and not settings.signature_required:
        print(
            "[SECURITY WARNING] GITHUB_WEBHOOK_SECRET is not set; "
            "webhook signatures will not be verified."
        )
