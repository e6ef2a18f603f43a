import os
from dotenv import load_dotenv
from pydantic import BaseModel
from typing import Literal


class Settings(BaseModel):
    api_host: str = "localhost"
    api_port: int = 8000
    order_store: Literal["memory", "sql"] = "memory"
    database_url: str = "sqlite:///./orders.db"
    log_level: str = "INFO"
    log_file: str = "api.log"


def get_settings() -> Settings:
    """Reads service settings from the environment (after loading .env)."""
    load_dotenv()
    return Settings(
        api_host=os.getenv("API_HOST", "localhost"),
        api_port=int(os.getenv("API_PORT", 8000)),
        order_store=os.getenv("ORDER_STORE", "memory").lower(),
        database_url=os.getenv("DATABASE_URL", "sqlite:///./orders.db"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        log_file=os.getenv("LOG_FILE", "api.log"),
    )
