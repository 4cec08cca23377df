# backend/cascade_portal/core/config.py
from pydantic_settings import BaseSettings
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from typing import List, Literal


class Settings(BaseSettings):
    # --- Database ---
    DATABASE_URL: str = "sqlite:///./cascade.db"
    STORE_BACKEND: Literal["sql", "memory"] = "sql"  # memory: no DB, lives on app.state

    # --- CORS ---
    CORS_ALLOW_ORIGINS: List[str] = ["*"]

    # --- Logging ---
    LOG_LEVEL: str = "INFO"

    # --- Forecast horizon ---
    FORECAST_START_YEAR: int = 2024
    FORECAST_START_QUARTER: int = 1
    FORECAST_YEARS: int = 5
    WHATIF_HORIZON_QUARTERS: int = 16

    # --- Persisted revenue split (basis points) ---
    NEW_BUSINESS_SPLIT_BP: int = 7000
    UPSELL_SPLIT_BP: int = 3000

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()

# SQLite için özel connect args
connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}

# SQLAlchemy Engine & Session
engine = create_engine(settings.DATABASE_URL, connect_args=connect_args, future=True)
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False, future=True)

