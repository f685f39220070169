from pathlib import Path
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    data_path: Path = Path.home() / "ZensolvePortal"
    api_prefix: str = "/api/v1"
    host: str = "127.0.0.1"
    port: int = 8000
    # Externally visible origin for download links; defaults to host:port.
    public_base_url: str | None = None
    # Employee login ids are issued on the company domain only.
    employee_id_domain: str = "@zensolve.in"
    min_password_length: int = 6
    max_upload_bytes: int = 10 * 1024 * 1024  # 10 MiB
    activity_log_limit: int = 10
    # Admin endpoints are open when unset (local development).
    admin_token: str | None = None
    log_level: str = "INFO"

    @property
    def db_path(self) -> Path:
        return self.data_path / "portal.sqlite"

    @property
    def base_url(self) -> str:
        return (self.public_base_url or f"http://{self.host}:{self.port}").rstrip("/")

    @property
    def storage_path(self) -> Path:
        return self.data_path / "storage"

    model_config = {"env_prefix": "PORTAL_"}


settings = Settings()
