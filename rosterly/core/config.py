from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App
    ENV: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "sqlite:///./rosterly.db"

    # Scheduling
    DEFAULT_MIN_EMPLOYEES_PER_SHIFT: int = 2

    # Compliance thresholds
    MAX_WORK_DAYS_PER_WEEK: int = 6
    MAX_CONSECUTIVE_DAYS: int = 6
    MIN_INTER_SHIFT_REST_HOURS: float = 11.0
    MAX_WEEKLY_HOURS: float = 44.0

    # WhatsApp Cloud API
    WHATSAPP_API_URL: str = "https://graph.facebook.com/v21.0"
    WHATSAPP_PHONE_NUMBER_ID: str = ""
    WHATSAPP_ACCESS_TOKEN: str = ""
    WHATSAPP_DEFAULT_COUNTRY_CODE: str = "55"
    WHATSAPP_TIMEOUT_SECONDS: float = 10.0

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )


settings = Settings()
