"""
Application configuration.
All settings are loaded from environment variables.
Use env.example as a reference for required variables.
"""
from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    IMPORTANT: database_url has no default - it MUST be set in .env file.
    """

    # ===========================================
    # APPLICATION
    # ===========================================
    app_env: str = "local"
    # CORS: через запятую. "*" = любые origin (loader дергается из игрового клиента).
    cors_origins: str = "*"

    # ===========================================
    # DATABASE (PostgreSQL)
    # ===========================================
    database_url: str  # Required, no default
    database_connect_timeout: int = 5

    # ===========================================
    # SCRIPT LOADER
    # ===========================================
    # Секрет для X-Script-Token. Пусто = токен считается с пустым секретом (слабее, но работает).
    script_token_secret: str = ""
    loader_cache_control: str = "no-store, no-cache, must-revalidate"
    # Публичный адрес API, который зашивается в сгенерированный loader (.lua)
    loader_base_url: str = "http://localhost:8000"

    # ===========================================
    # CAPTCHA (Cloudflare Turnstile)
    # ===========================================
    turnstile_site_key: str = ""  # Optional, empty = captcha disabled

    # ===========================================
    # ADMIN API
    # ===========================================
    admin_api_key: str | None = None  # Optional, but required for /admin routes

    # ===========================================
    # LOGGING
    # ===========================================
    request_id_header: str = "X-Request-Id"
    log_level: str = "INFO"
    log_file: str | None = None
    log_max_bytes: int = 10_000_000
    log_backup_count: int = 5

    @field_validator("loader_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Loader URL is joined with /script-loader/{id}."""
        return v.strip().rstrip("/")

    @property
    def cors_origins_list(self) -> list[str]:
        """Get CORS origins as a list."""
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"  # Игнорировать неизвестные поля из .env


settings = Settings()
