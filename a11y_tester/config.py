"""
Configuration settings for Accessibility Tester.
Loads environment variables and provides typed configuration.
"""
import os
from pathlib import Path
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

# Load .env file
load_dotenv()

AXE_CDN_URL = "https://cdnjs.cloudflare.com/ajax/libs/axe-core/4.9.1/axe.min.js"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API Keys
    gemini_api_key: str = os.getenv("GEMINI_API_KEY", "")
    gemini_model: str = "gemini-2.0-flash"

    # AI suggestions
    ai_suggestions_enabled: bool = True
    ai_max_concurrency: int = 5

    # Database
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./a11y_tester.db")

    # Browser / axe-core
    page_load_timeout_ms: int = 30000
    chromium_path: str = os.getenv("PLAYWRIGHT_CHROMIUM_PATH", "")
    axe_cdn_url: str = AXE_CDN_URL
    axe_script_path: str = ""

    # Application
    app_name: str = "Accessibility Tester"
    host: str = "0.0.0.0"
    port: int = 3000
    debug: bool = False
    log_level: str = "INFO"

    # Paths
    base_dir: Path = Path(__file__).parent.parent
    reports_dir: Path = base_dir / "reports"

    class Config:
        env_file = ".env"
        extra = "ignore"


# Global settings instance
settings = Settings()
