import os

from dotenv import load_dotenv


load_dotenv()

DEFAULT_DATABASE_URL = "sqlite:///./websites.db"
DEFAULT_JWT_SECRET = "change-me"

APP_ENV = os.getenv("APP_ENV", "development")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_EXPIRES_MINUTES = int(os.getenv("JWT_EXPIRES_MINUTES", "60"))

CORS_ALLOW_METHODS = "GET,OPTIONS,PATCH,DELETE,POST,PUT"
CORS_ALLOW_HEADERS = (
    "X-CSRF-Token, X-Requested-With, Accept, Accept-Version, Content-Length, "
    "Content-MD5, Content-Type, Date, X-Api-Version, Authorization, x-auth-token"
)


def get_database_url() -> str:
    return os.getenv("DATABASE_URL") or DEFAULT_DATABASE_URL


def get_jwt_secret() -> str:
    return os.getenv("JWT_SECRET") or DEFAULT_JWT_SECRET


def validate_runtime_config() -> None:
    if APP_ENV.lower() == "production" and get_jwt_secret() == DEFAULT_JWT_SECRET:
        raise RuntimeError("JWT_SECRET must be set in production.")
