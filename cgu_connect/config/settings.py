from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List


class Settings(BaseSettings):
    # Supabase
    supabase_url: str
    supabase_key: str
    supabase_service_role_key: Optional[str] = None  # Only needed by scripts/create_avatar_bucket.py

    # Accounts
    allowed_email_domain: str = "@cgu-odisha.ac.in"
    min_password_length: int = 6
    password_reset_redirect_url: Optional[str] = None

    # Avatars (Supabase storage)
    avatar_bucket: str = "profiles"
    avatar_folder: str = "avatars"
    max_avatar_bytes: int = 2 * 1024 * 1024

    # Search
    search_limit: int = 20

    # App
    app_name: str = "cgu-connect"
    debug: bool = False
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    cors_origins: str = "http://localhost:3000,http://localhost:5173,http://127.0.0.1:3000,http://127.0.0.1:5173"
    rate_limit: str = "100/minute"  # slowapi format, e.g. "100/minute"

    @field_validator("supabase_url", "supabase_key")
    @classmethod
    def require_supabase_connection(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Missing Supabase environment variables (SUPABASE_URL, SUPABASE_KEY)")
        return v.strip()

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def get_cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",  # No prefix needed
        extra="ignore"
    )


settings = Settings()
