from pydantic_settings import BaseSettings
import re

"""
API CONFIGURATION
"""


#Class to load and read backend .env
class Settings(BaseSettings):

    PROJECT_NAME: str = "Studio Booking API"
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    DATABASE_URL: str = "sqlite:///./studio.db"

    JWT_SECRET_KEY: str = "dev_secret_key"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    ADMIN_EMAIL: str = "admin@example.com"
    ADMIN_PASSWORD: str = "password"

    BREVO_API_KEY: str | None = None
    EMAIL_SENDER: str = "bookings@example.com"
    EMAIL_SENDER_NAME: str = "Studio Bookings"

    UPLOAD_DIR: str = "uploads"
    UPLOADTHING_SECRET: str | None = None

    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    RATE_LIMIT_ENABLED: bool = True

    # Re-run the conflict check when an admin approves a booking
    APPROVAL_CONFLICT_GUARD: bool = False

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()


#Public route rate limits as (max requests, window seconds)
RATE_LIMITS = {
    "login": (5, 60),
    "booking": (5, 600),
    "check_availability": (60, 60),
}


DATE_REGEX = re.compile(r"^\d{4}-\d{2}-\d{2}$")

TIME_REGEX = re.compile(r"^([01][0-9]|2[0-3]):[0-5][0-9]$")

#Accepted package image uploads and the extension they are stored with
IMAGE_CONTENT_TYPES = {
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/webp": "webp",
}
