import os
import logging
from pydantic import BaseModel, Field
from typing import List, Optional
from dotenv import load_dotenv

load_dotenv()

class Config(BaseModel):
    app_name: str = "Skill Gap Review Service"
    environment: str = os.getenv("APP_ENV", "development")
    api_prefix: str = "/api"
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "3001"))

    # Database
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./skillgap.db")

    # Intake rules
    # Substring every submitted email must contain. Empty disables the check.
    corporate_email_domain: str = os.getenv("CORPORATE_EMAIL_DOMAIN", "@ielektron.com")

    # Optional JSON file replacing the built-in skill taxonomy
    taxonomy_file: Optional[str] = os.getenv("SKILL_TAXONOMY_FILE") or None

    version: str = "1.0.0"
    request_id_header: str = "X-Request-ID"

    # CORS: comma-separated origins loaded from env.
    cors_origins: List[str] = Field(
        default_factory=lambda: [
            o.strip()
            for o in os.getenv(
                "CORS_ORIGINS",
                "http://localhost:5173,http://localhost:3000,"
                "http://127.0.0.1:5173,http://127.0.0.1:3000",
            ).split(",")
            if o.strip()
        ]
    )

    # Rate limiting
    rate_limit_enabled: bool = os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"
    rate_limit_per_minute: int = int(os.getenv("RATE_LIMIT_PER_MINUTE", "120"))

    # Outbound client
    client_base_url: str = os.getenv("SKILLGAP_API_URL", "http://localhost:3001")
    client_timeout_seconds: float = float(os.getenv("CLIENT_TIMEOUT_SECONDS", "10"))

settings = Config()

# --- Startup Validation for Production ---
_logger = logging.getLogger(__name__)
if settings.environment == "production" and settings.database_url.startswith("sqlite"):
    _logger.warning("⚠ Running production with a SQLite database; set DATABASE_URL to PostgreSQL.")
if not settings.corporate_email_domain:
    _logger.warning("⚠ CORPORATE_EMAIL_DOMAIN is empty; submission emails are not domain-checked.")
