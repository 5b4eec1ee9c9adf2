import os
from dataclasses import dataclass


@dataclass(frozen=True)
class Settings:
    secret_key: str
    env: str
    database_url: str
    port: int
    log_level: str

    admin_username: str
    admin_password: str
    bootstrap_on_start: bool

    storage_backend: str
    storage_root: str
    s3_endpoint: str
    s3_region: str
    s3_bucket: str
    s3_access_key_id: str
    s3_secret_access_key: str


def _getenv(name: str, default: str = "") -> str:
    return (os.environ.get(name) or default).strip()


def _getbool(name: str, default: bool) -> bool:
    raw = _getenv(name)
    if not raw:
        return default
    return raw.lower() in ("1", "true", "yes", "on")


def load_settings() -> Settings:
    return Settings(
        secret_key=_getenv("SECRET_KEY", "change-me"),
        env=_getenv("ENV", "development"),
        database_url=_getenv("DATABASE_URL", "sqlite:///teachrate.db"),
        port=int(_getenv("PORT", "3000")),
        log_level=_getenv("LOG_LEVEL", "INFO").upper(),
        admin_username=_getenv("ADMIN_USERNAME", "admin"),
        admin_password=os.environ.get("ADMIN_PASSWORD") or "admin",
        bootstrap_on_start=_getbool("BOOTSTRAP_ON_START", True),
        storage_backend=_getenv("STORAGE_BACKEND", "local"),
        storage_root=_getenv("STORAGE_ROOT", os.path.join(os.getcwd(), "storage")),
        s3_endpoint=_getenv("S3_ENDPOINT", ""),
        s3_region=_getenv("S3_REGION", "nyc3"),
        s3_bucket=_getenv("S3_BUCKET", ""),
        s3_access_key_id=_getenv("S3_ACCESS_KEY_ID", ""),
        s3_secret_access_key=_getenv("S3_SECRET_ACCESS_KEY", ""),
    )


def load_config() -> dict:
    s = load_settings()
    is_production = s.env in ("prod", "production")
    return {
        "SECRET_KEY": s.secret_key,
        "ENV": s.env,
        "DATABASE_URL": s.database_url,
        "PORT": s.port,
        "LOG_LEVEL": s.log_level,
        "ADMIN_USERNAME": s.admin_username,
        "ADMIN_PASSWORD": s.admin_password,
        "BOOTSTRAP_ON_START": s.bootstrap_on_start,
        "STORAGE_BACKEND": s.storage_backend,
        "STORAGE_ROOT": s.storage_root,
        "S3_ENDPOINT": s.s3_endpoint,
        "S3_REGION": s.s3_region,
        "S3_BUCKET": s.s3_bucket,
        "S3_ACCESS_KEY_ID": s.s3_access_key_id,
        "S3_SECRET_ACCESS_KEY": s.s3_secret_access_key,
        # security defaults
        "SESSION_COOKIE_HTTPONLY": True,
        "SESSION_COOKIE_SAMESITE": "Lax",
        "SESSION_COOKIE_SECURE": is_production,  # Require HTTPS in production
        # teacher image uploads (10MB)
        "MAX_CONTENT_LENGTH": 10 * 1024 * 1024,
    }
