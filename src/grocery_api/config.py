import os
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

load_dotenv()


class Settings(BaseSettings):
    STORAGE_BACKEND: str = os.getenv("STORAGE_BACKEND", "memory")  # memory | sql
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./grocery.db")
    DATABASE_ECHO: bool = False
    SEED_DEMO_CATALOG: bool = True

    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "8000"))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    BUSINESS_NAME: str = os.getenv("BUSINESS_NAME", "Fresh Market")
    BUSINESS_ADDRESS: str = os.getenv("BUSINESS_ADDRESS", "Nairobi, Kenya")
    BUSINESS_PHONE: str = os.getenv("BUSINESS_PHONE", "+254 700 000000")
    BUSINESS_EMAIL: str | None = os.getenv("BUSINESS_EMAIL")
    CURRENCY_SYMBOL: str = os.getenv("CURRENCY_SYMBOL", "KSh")

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    def refresh(self) -> "Settings":
        """Reload environment variables"""
        load_dotenv(override=True)
        return Settings()


settings = Settings()
