from typing import List, Optional
from pydantic import AnyUrl
from pydantic_settings import BaseSettings, SettingsConfigDict
import os

class Settings(BaseSettings):
    """
    Application settings class.
    Reads variables from .env file automatically.

    Store credentials are optional at load time so a missing value never
    stops the process; requests that need the store fail instead.
    """

    BASE_DIR: str = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

    # API Config
    PROJECT_NAME: str = "Visitor Safety Training"
    API_V1_STR: str = "/api/v1"
    CORS_ORIGINS: List[str] = ["*"]

    # Record Store Config
    STORE_URL: Optional[AnyUrl] = None
    STORE_ACCESS_KEY: Optional[str] = None
    STORE_USERNAME: str = "training"
    DATABASE_NAME: str = "safety_training"

    # Training Rules
    ELIGIBILITY_WINDOW_MONTHS: int = 6

    # Environment
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Pydantic V2 Configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore"
    )

    def missing_store_credentials(self) -> List[str]:
        """Names of the required store variables that are not set."""
        missing = []
        if not self.STORE_URL:
            missing.append("STORE_URL")
        if not self.STORE_ACCESS_KEY:
            missing.append("STORE_ACCESS_KEY")
        return missing

# It creates the 'config' object that main.py uses.
config = Settings()
