from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env")

    APP_NAME: str = "StoreHub Admin API"
    DEBUG: bool = False
    SECRET_KEY: str = "change-me"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    SESSION_IDLE_TIMEOUT_MINUTES: int = 30
    DATABASE_URL: str = "sqlite+pysqlite:///./storehub.db"
    API_PREFIX: str = "/api/v1"
    RATE_LIMIT_MAX_REQUESTS: int = 100
    RATE_LIMIT_WINDOW_SECONDS: int = 900
    SECTOR_PATH_KEYWORDS: list[str] = ["pos", "warehouse"]
    CUSTOM_DOMAINS: dict[str, str] = {}
    DEFAULT_TENANT_NAME: str = "Demo Retail"
    DEFAULT_TENANT_SUBDOMAIN: str = "demo"
    DEFAULT_SUBSCRIPTION_DAYS: int = 365
    SUPERADMIN_USERNAME: str = "superadmin"
    SUPERADMIN_EMAIL: str = "superadmin@example.com"
    SUPERADMIN_PASSWORD: str = "change-me"
    METRICS_ENABLED: bool = True

settings = Settings()
