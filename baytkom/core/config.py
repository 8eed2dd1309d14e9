from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    database_url: str = "sqlite+aiosqlite:///./baytkom.db"
    sql_echo: bool = False

    session_secret: str = "baytkom-dev-secret"  # 🔐 override in production
    session_max_age: int = 60 * 60 * 24 * 30

    upload_dir: str = "uploads"
    max_upload_bytes: int = 10 * 1024 * 1024

    # Web Push (VAPID). Push is skipped when keys are missing.
    vapid_public_key: str = ""
    vapid_private_key: str = ""
    vapid_subject: str = "mailto:admin@baytkom.local"

    cleanup_interval_minutes: int = 60  # 0 disables the sweep
    notification_retention_days: int = 30
    history_retention_days: int = 90

    local_timezone: str = "Asia/Kuwait"

    admin_username: str = "admin"
    admin_password: str = "admin1234"

    log_level: str = "INFO"


settings = Settings()
