from pydantic_settings import BaseSettings
from pydantic import ConfigDict, field_validator


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite:///./homescout.db"

    # Clerk session tokens
    CLERK_JWT_KEY: str
    CLERK_JWT_ALGORITHM: str = "RS256"

    # Clerk webhooks (svix)
    CLERK_WEBHOOK_SECRET: str = ""

    # Unsplash photo search
    UNSPLASH_ACCESS_KEY: str = ""
    UNSPLASH_API_URL: str = "https://api.unsplash.com/search/photos"
    UNSPLASH_TIMEOUT_SECONDS: float = 10.0
    IMAGE_CACHE_MAX_SIZE: int = 1024
    IMAGE_CACHE_TTL_SECONDS: int = 60 * 60 * 24

    # slowapi
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_DEFAULT: str = "300/minute"

    LOG_LEVEL: str = "INFO"

    @field_validator("CLERK_JWT_KEY", mode="before")
    @classmethod
    def unescape_pem(cls, v):
        """Allow the PEM key to be supplied on one line with literal \\n escapes."""
        if isinstance(v, str):
            return v.replace("\\n", "\n")
        return v

    model_config = ConfigDict(env_file=".env")


settings = Settings()
