import os
from typing import Optional
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

load_dotenv()

class Settings(BaseSettings):
    app_name: str = "Damai Jiwa"
    debug: bool = os.getenv("DEBUG", "False").lower() == "true"
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    port: int = int(os.getenv("PORT", 3000))
    api_prefix: str = os.getenv("API_PREFIX", "/api")
    app_url: str = os.getenv("APP_URL", "http://localhost:3000")
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./damaijiwa.db")

    # Cookie session
    secret_key: str = os.getenv("SECRET_KEY", os.getenv("SESSION_SECRET", "damai-jiwa-secret"))
    session_cookie: str = os.getenv("SESSION_COOKIE", "damaijiwa_session")
    session_max_age: int = int(os.getenv("SESSION_MAX_AGE", 30 * 24 * 60 * 60))
    session_https_only: bool = os.getenv("SESSION_HTTPS_ONLY", "False").lower() == "true"
    session_same_site: str = os.getenv("SESSION_SAME_SITE", "lax")

    # Google OAuth
    google_client_id: Optional[str] = os.getenv("GOOGLE_CLIENT_ID")
    google_client_secret: Optional[str] = os.getenv("GOOGLE_CLIENT_SECRET")

    # Response generator
    openai_api_key: Optional[str] = os.getenv("OPENAI_API_KEY")
    openai_model: str = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
    openai_base_url: Optional[str] = os.getenv("OPENAI_BASE_URL")

    login_prompt_after: int = int(os.getenv("LOGIN_PROMPT_AFTER", 4))

    class Config:
        env_file = ".env"
        extra = "allow"

    @property
    def google_redirect_uri(self) -> str:
        return f"{self.app_url.rstrip('/')}/auth/google/callback"

settings = Settings()
