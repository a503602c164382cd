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

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./clinic_scheduling.db")
# e.g. SERIALIZABLE on Postgres to close the check-then-write race across workers
DATABASE_ISOLATION_LEVEL = os.getenv("DATABASE_ISOLATION_LEVEL") or None

CORS_ALLOWED_ORIGINS = _get_list(os.getenv("CORS_ALLOWED_ORIGINS"), ["http://localhost:5173"])

PATIENT_SPACING_HOURS = int(os.getenv("PATIENT_SPACING_HOURS", "2"))
DOCTOR_DAILY_QUOTA = int(os.getenv("DOCTOR_DAILY_QUOTA", "8"))

SERIALIZE_WRITES = _get_bool(os.getenv("SERIALIZE_WRITES"), default=True)

def validate_runtime_config() -> None:
    if PATIENT_SPACING_HOURS <= 0:
        raise RuntimeError("PATIENT_SPACING_HOURS must be a positive number of hours.")
    if DOCTOR_DAILY_QUOTA <= 0:
        raise RuntimeError("DOCTOR_DAILY_QUOTA must be a positive number of appointments.")
    if APP_ENV.lower() == "production" and DATABASE_URL.startswith("sqlite"):
        raise RuntimeError("DATABASE_URL must point to a server database in production.")
