from pydantic_settings import BaseSettings
from sqlalchemy.engine import URL
from typing import Optional

class Settings(BaseSettings):
    PROJECT_NAME: str = "ClinicCare"
    VERSION: str = "1.0.0"
    API_PREFIX: str = "/api"

    DB_DRIVER: str = "postgresql+asyncpg"
    DB_HOST: str = "localhost"
    DB_USER: str = "postgres"
    DB_PASSWORD: str = ""
    DB_NAME: str = "clinic_management"
    DB_PORT: int = 5432
    DATABASE_URL: Optional[str] = None

    # Pool
    DB_POOL_CAPACITY: int = 10
    DB_POOL_QUEUE_LIMIT: int = 0  # 0 = unbounded
    DB_POOL_ACQUIRE_TIMEOUT: Optional[float] = 30.0
    DB_KEEP_ALIVE: bool = True
    DB_CREATE_TABLES: bool = False

    TRANSACTION_TIMEOUT: float = 30.0
    DEFAULT_PASSWORD: str = "123456"
    BCRYPT_ROUNDS: int = 10

    STATIC_DIR: str = "public"
    LOG_LEVEL: str = "INFO"
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    class Config:
        case_sensitive = True
        env_file = ".env"
        extra = "ignore"

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        if not self.DATABASE_URL:
            self.DATABASE_URL = URL.create(
                self.DB_DRIVER,
                username=self.DB_USER,
                password=self.DB_PASSWORD or None,
                host=self.DB_HOST,
                port=self.DB_PORT,
                database=self.DB_NAME,
            ).render_as_string(hide_password=False)

settings = Settings()
