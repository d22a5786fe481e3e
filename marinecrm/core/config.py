import os
from typing import List
from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()

BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


def _split_csv(value: str) -> List[str]:
    return [v.strip() for v in value.split(",") if v.strip()]


class Settings(BaseModel):
    app_name: str = os.getenv("APP_NAME", "Marine CRM")
    environment: str = os.getenv("ENVIRONMENT", "development")
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./marinecrm.db")

    # Auth
    secret_key: str = os.getenv("SECRET_KEY", "change-me-in-production")
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "720"))

    # Quote documents (pre-authored .docx templates live here)
    quote_template_dir: str = os.getenv("QUOTE_TEMPLATE_DIR", os.path.join(BASE_DIR, "templates"))

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_json: bool = os.getenv("LOG_JSON", "").lower() in ("1", "true", "yes")

    cors_origins: List[str] = _split_csv(
        os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:5173")
    )


settings = Settings()
