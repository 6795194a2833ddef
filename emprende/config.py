# emprende/config.py
"""Runtime configuration read from the environment (and a local .env)."""
import os
from dataclasses import dataclass
from functools import lru_cache
from dotenv import load_dotenv

load_dotenv()


@dataclass
class StorageConfig:
    bucket: str
    endpoint_url: str | None
    region: str | None
    public_url: str
    access_key_id: str | None
    secret_access_key: str | None


@dataclass
class Settings:
    database_url: str
    db_pool_size: int
    db_max_overflow: int
    admin_password: str | None
    secret_key: str
    environment: str
    storage: StorageConfig

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


def _database_url() -> str:
    url = os.getenv("DATABASE_URL") or os.getenv("POSTGRES_URL")
    if not url:
        raise RuntimeError("DATABASE_URL not set")
    # SQLAlchemy 2.x doesn't accept 'postgres://'
    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql+psycopg2://", 1)
    return url


@lru_cache
def get_settings() -> Settings:
    bucket = os.getenv("STORAGE_BUCKET", "fotos")
    endpoint = os.getenv("STORAGE_ENDPOINT_URL") or None
    public_url = os.getenv("STORAGE_PUBLIC_URL")
    if not public_url:
        if endpoint:
            public_url = f"{endpoint.rstrip('/')}/{bucket}"
        else:
            public_url = f"https://{bucket}.s3.amazonaws.com"
    return Settings(
        database_url=_database_url(),
        db_pool_size=int(os.getenv("DB_POOL_SIZE", 5)),
        db_max_overflow=int(os.getenv("DB_MAX_OVERFLOW", 10)),
        admin_password=os.getenv("ADMIN_PASSWORD"),
        secret_key=os.getenv("SECRET_KEY", "dev-secret-change-me"),
        environment=os.getenv("ENVIRONMENT", "development"),
        storage=StorageConfig(
            bucket=bucket,
            endpoint_url=endpoint,
            region=os.getenv("STORAGE_REGION") or None,
            public_url=public_url.rstrip("/"),
            access_key_id=os.getenv("AWS_ACCESS_KEY_ID") or None,
            secret_access_key=os.getenv("AWS_SECRET_ACCESS_KEY") or None,
        ),
    )
