from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional
from pydantic import field_validator

class Settings(BaseSettings):
    # Database settings
    POSTGRES_USER: str = 'fintrack_user'
    POSTGRES_PASSWORD: str = 'fintrack_pass'
    POSTGRES_DB: str = 'fintrack_db'
    POSTGRES_HOST: str = 'postgres'
    POSTGRES_PORT: int = 5432
    DATABASE_URL: Optional[str] = None  # Override completo (ej: sqlite:// en tests)

    # Redis settings
    REDIS_HOST: str = 'redis'
    REDIS_PORT: int = 6379
    REDIS_DB: int = 0
    REDIS_PASSWORD: Optional[str] = None

    # JWT settings
    APP_SECRET_STRING: str = 'your-super-secret-key-here-change-in-production-2024'
    ALGORITHM: str = 'HS256'
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30

    # Business rules
    DEFAULT_CURRENCY: str = 'USD'
    POS_TAX_RATE: float = 0.07
    PAYROLL_SALARY_PERIODS: int = 26  # Quincenal
    PAYROLL_HOURLY_HOURS: int = 80  # Horas por periodo quincenal
    INVOICE_DEFAULT_DUE_DAYS: int = 30

    # AI settings (OpenAI o API compatible)
    OPENAI_API_KEY: str = ''
    OPENAI_BASE_URL: Optional[str] = None
    AI_CHAT_MODEL: str = 'gpt-4o-mini'
    AI_VISION_MODEL: str = 'gpt-4o-mini'
    AI_MAX_TOKENS: int = 1024
    AI_TEMPERATURE: float = 0.2
    AI_MAX_TOOL_ROUNDS: int = 5

    # Environment
    ENVIRONMENT: str = "development"
    DEBUG: bool = True

    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql+psycopg2://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
            f"@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )

    @property
    def redis_url(self) -> str:
        if self.REDIS_PASSWORD:
            return f"redis://:{self.REDIS_PASSWORD}@{self.REDIS_HOST}:{self.REDIS_PORT}/{self.REDIS_DB}"
        return f"redis://{self.REDIS_HOST}:{self.REDIS_PORT}/{self.REDIS_DB}"

    @property
    def ai_enabled(self) -> bool:
        return bool(self.OPENAI_API_KEY.strip())

    model_config = SettingsConfigDict(
        extra="allow",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True
    )

    @field_validator("DEBUG", mode="before")
    @classmethod
    def parse_debug(cls, v):
        if isinstance(v, str):
            return v.lower().strip('"').strip("'") in ("true", "1", "yes", "on")
        return bool(v)

settings = Settings()
