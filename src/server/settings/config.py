from typing import List

from pydantic import BaseModel
from dotenv import load_dotenv
import os

load_dotenv()


def _split_csv(raw: str) -> List[str]:
    return [part.strip() for part in (raw or "").split(",") if part.strip()]


class Settings(BaseModel):
    app_name: str = os.getenv("APP_NAME", "Lagerkoll - lager och offerter")
    environment: str = os.getenv("ENVIRONMENT", "dev")
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./lagerkoll.db")
    debug: bool = os.getenv("DEBUG", "1") == "1"
    api_key: str = os.getenv("LAGERKOLL_API_KEY", "lagerkoll-dev-key")
    default_language: str = os.getenv("DEFAULT_LANGUAGE", "en")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    cors_origins: List[str] = _split_csv(
        os.getenv("CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173")
    )

settings = Settings()
