import os
from typing import Optional
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

load_dotenv()

class Settings(BaseSettings):
    APP_NAME: str = "Habit Ledger"

    # Frontend
    FRONTEND_URL: str = os.getenv("FRONTEND_URL", "http://localhost:5173")

    # Storage
    # 'file' writes one JSON blob per key under DATA_DIR, 'memory' keeps them in-process.
    STORAGE_BACKEND: str = os.getenv("STORAGE_BACKEND", "file")
    DATA_DIR: str = os.getenv("DATA_DIR", "data")
    LOAD_SAMPLE_DATA: bool = os.getenv("LOAD_SAMPLE_DATA", "true").lower() == "true"

    # Time
    # IANA zone name used to decide what "today" is. Local time when empty.
    TIMEZONE: Optional[str] = os.getenv("TIMEZONE") or None

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_DIR: str = os.getenv("LOG_DIR", "logs")

    # Maintenance job
    SCHEDULER_ENABLED: bool = os.getenv("SCHEDULER_ENABLED", "true").lower() == "true"
    MAINTENANCE_INTERVAL_HOURS: int = int(os.getenv("MAINTENANCE_INTERVAL_HOURS", "1"))

    # Game Configuration
    POINTS_PER_COMPLETION: int = 1
    # Lower vote bound of each identity strength band, weakest first.
    IDENTITY_STRENGTH_THRESHOLDS: dict = {
        "Emerging": 0,
        "Developing": 5,
        "Established": 20,
        "Strong": 50,
        "Core Identity": 100,
    }

    # Pydantic Settings Config
    model_config = {"env_file": ".env", "extra": "ignore"}

settings = Settings()
