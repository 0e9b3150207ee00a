from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    API_TITLE: str = "Creative Services Quote Engine"
    API_DESCRIPTION: str = "Monthly price estimates for graphic design and video editing retainers"
    API_VERSION: str = "1.0.0"

    # JSON file overriding the built-in pricing table
    PRICING_TABLE_PATH: Optional[str] = None

    LOG_LEVEL: str = "INFO"
    DEBUG: bool = False

    class Config:
        env_file = ".env"
        case_sensitive = True

settings = Settings()
