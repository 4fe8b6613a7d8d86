from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    host: str = "0.0.0.0"
    port: int = 3000
    allowed_origins: list[str] = ["http://localhost:3000"]

    db_host: str = "host.docker.internal"
    db_port: int = 5432
    db_database: str = "docpipe"
    db_username: str = "docpipe"
    db_password: str = "secret"
    db_pool_max_size: int = 10

    storage_backend: str = "local"
    storage_bucket: str = "documents"
    storage_local_root: str = "./storage"
    storage_s3_endpoint_url: str | None = None
    storage_s3_region: str = "us-east-1"
    storage_s3_access_key: str = ""
    storage_s3_secret_key: str = ""
    storage_timeout_seconds: int = 30
    storage_signed_url_expiry_seconds: int = 3600

    scratch_dir: str = "./temp"

    pdf_engine: str = "pdfplumber"

    ocr_languages: list[str] = ["eng"]
    ocr_min_confidence: float = 30.0
    ocr_filter_low_confidence: bool = True
    ocr_timeout_seconds: int = 120

    min_extracted_chars: int = 50

    max_file_size_pdf_bytes: int = 10 * 1024 * 1024
    max_file_size_document_bytes: int = 50 * 1024 * 1024
    max_file_size_image_bytes: int = 8 * 1024 * 1024

    rate_limit_upload_max: int = 10
    rate_limit_upload_window_ms: int = 60_000
    rate_limit_chat_max: int = 30
    rate_limit_chat_window_ms: int = 60_000
    rate_limit_auth_max: int = 5
    rate_limit_auth_window_ms: int = 15 * 60 * 1000
    rate_limit_global_max: int = 1000
    rate_limit_global_window_ms: int = 15 * 60 * 1000
    rate_limit_max_keys: int = 10_000
    rate_limit_sweep_interval: int = 1000

    auth_base_url: str = ""
    auth_api_key: str = ""
    auth_timeout_seconds: int = 10

    generation_provider: str = "example"
    generation_openai_api_key: str = ""
    generation_openai_model_name: str = "gpt-4o-mini"
    generation_openai_compatible_base_url: str = ""
    generation_timeout_seconds: int = 30
    generation_temperature: float = 0.2

    @property
    def is_development(self) -> bool:
        return self.app_env.lower() in ("dev", "development")
