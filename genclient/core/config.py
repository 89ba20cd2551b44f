from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # App
    app_env: str = "development"

    # Generation proxy servers (used when the session has no selected proxy)
    veo_fallback_url: str = "https://veox.monoklix.com"
    imagen_fallback_url: str = "https://gemx.monoklix.com"

    # Supabase (remote slot allocator)
    supabase_url: str = ""
    supabase_anon_key: str = ""
    slot_rpc_name: str = "request_generation_slot"
    slot_rpc_timeout_seconds: float = 30.0

    # Admission control
    slot_cooldown_seconds: int = 10
    slot_poll_interval_seconds: float = 2.0
    generation_tags: str = "GENERATE,RECIPE"  # comma-separated operation tag markers

    @property
    def generation_tag_list(self) -> list[str]:
        return [t.strip() for t in self.generation_tags.split(",") if t.strip()]

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @property
    def slot_rpc_url(self) -> str:
        return f"{self.supabase_url.rstrip('/')}/rest/v1/rpc/{self.slot_rpc_name}"

    # Logging
    log_level: str = "INFO"
    log_json: bool = False  # set True in production for structured JSON logs

    # Sentry
    sentry_dsn: str = ""  # leave empty to disable


settings = Settings()


def validate_settings_for_production() -> None:
    """Validate critical settings. Called on startup in non-test environments."""
    errors: list[str] = []

    if not settings.supabase_url:
        errors.append("SUPABASE_URL must be set to reach the generation slot allocator")

    if not settings.supabase_anon_key:
        errors.append("SUPABASE_ANON_KEY must be set")

    if settings.slot_poll_interval_seconds <= 0:
        errors.append("SLOT_POLL_INTERVAL_SECONDS must be positive")

    if settings.is_production and not settings.generation_tag_list:
        errors.append("GENERATION_TAGS must not be empty in production")

    if errors:
        raise SystemExit("Configuration errors:\n  - " + "\n  - ".join(errors))
