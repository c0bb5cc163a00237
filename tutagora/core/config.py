import os

from dotenv import load_dotenv


load_dotenv()


def _get_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _get_list(value: str | None, default: list[str]) -> list[str]:
    if not value:
        return default
    return [item.strip() for item in value.split(",") if item.strip()]

APP_ENV = os.getenv("APP_ENV", "development")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
SQL_ECHO = _get_bool(os.getenv("SQL_ECHO"), default=False)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./tutagora.db")

CORS_ORIGINS = _get_list(os.getenv("CORS_ORIGINS"), ["http://localhost:5173"])

JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "change-me")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_EXPIRES_MINUTES = int(os.getenv("JWT_EXPIRES_MINUTES", "60"))

MIN_PASSWORD_LENGTH = int(os.getenv("MIN_PASSWORD_LENGTH", "6"))

BOOKING_WINDOW_DAYS = int(os.getenv("BOOKING_WINDOW_DAYS", "7"))
# "hour" keeps whole-hour slots from the window's start hour; "strict" honours minute offsets.
SLOT_ALIGNMENT = os.getenv("SLOT_ALIGNMENT", "hour").strip().lower()

DEFAULT_HOURLY_RATE = float(os.getenv("DEFAULT_HOURLY_RATE", "1000"))
DEFAULT_CURRENCY = os.getenv("DEFAULT_CURRENCY", "KES")


def validate_runtime_config() -> None:
    if APP_ENV.lower() == "production" and JWT_SECRET_KEY == "change-me":
        raise RuntimeError("JWT_SECRET_KEY must be set in production.")
    if SLOT_ALIGNMENT not in {"hour", "strict"}:
        raise RuntimeError("SLOT_ALIGNMENT must be 'hour' or 'strict'.")
