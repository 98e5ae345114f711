import os
from typing import List
from pydantic import validator
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

load_dotenv()

class Settings(BaseSettings):
    PROJECT_NAME: str = os.getenv("PROJECT_NAME", "SignalAI News Payment Server")
    API_PREFIX: str = os.getenv("API_PREFIX", "/api")

    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "5000"))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    RAZORPAY_KEY_ID: str = os.getenv("RAZORPAY_KEY_ID", "")
    RAZORPAY_SECRET: str = os.getenv("RAZORPAY_SECRET", "")

    # Outbound gateway calls
    GATEWAY_TIMEOUT_SECONDS: float = float(os.getenv("GATEWAY_TIMEOUT_SECONDS", "10"))
    GATEWAY_MAX_ATTEMPTS: int = int(os.getenv("GATEWAY_MAX_ATTEMPTS", "3"))
    GATEWAY_BACKOFF_SECONDS: float = float(os.getenv("GATEWAY_BACKOFF_SECONDS", "0.5"))
    GATEWAY_DEADLINE_SECONDS: float = float(os.getenv("GATEWAY_DEADLINE_SECONDS", "20"))

    ENABLE_AUTH: bool = False
    JWT_SECRET: str = os.getenv("JWT_SECRET", "")

    # CORS, comma separated. Empty means allow any origin.
    BACKEND_CORS_ORIGINS: str = os.getenv("BACKEND_CORS_ORIGINS", "")

    @validator("GATEWAY_MAX_ATTEMPTS")
    def at_least_one_attempt(cls, v: int) -> int:
        if v < 1:
            raise ValueError("GATEWAY_MAX_ATTEMPTS must be at least 1")
        return v

    @property
    def cors_origins(self) -> List[str]:
        return [i.strip() for i in self.BACKEND_CORS_ORIGINS.split(",") if i.strip()]

    @property
    def razorpay_configured(self) -> bool:
        return bool(self.RAZORPAY_KEY_ID and self.RAZORPAY_SECRET)

    class Config:
        case_sensitive = True

settings = Settings()


def get_settings() -> Settings:
    return settings
