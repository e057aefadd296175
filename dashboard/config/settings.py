from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    store_backend: str = "rest"
    store_url: str = ""
    store_key: str = ""

    db_host: str = "localhost"
    db_port: int = 5432
    db_database: str = "postgres"
    db_username: str = "postgres"
    db_password: str = "secret"

    records_table: str = "processed_images"
    metadata_table: str = "user_metadata"
    storage_bucket: str = "user-uploads"

    signed_url_ttl_seconds: int = 3600
    preview_list_limit: int = 100
    http_timeout_seconds: int = 30

    display_timezone: str = ""
    preferences_path: str = ".dashboard-preferences.json"
