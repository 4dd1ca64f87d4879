from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "Service Booking API"
    environment: str = "development"  # development | production

    database_url: str = "sqlite:///./service_booking.db"

    # JWT
    secret_key: str = "change-me"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 30

    # CORS
    allowed_origins: List[str] = ["https://thrive-pro-kappa.vercel.app"]
    dev_origins: List[str] = ["http://localhost:5173", "http://localhost:3000"]

    class Config:
        env_file = ".env"
        extra = "ignore"

    @property
    def cors_origins(self) -> List[str]:
        """Origins allowed by CORS; localhost front-ends only outside production."""
        origins = list(self.allowed_origins)
        if self.environment != "production":
            origins.extend(o for o in self.dev_origins if o not in origins)
        return origins
