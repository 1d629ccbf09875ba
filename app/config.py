import os
from dotenv import load_dotenv

# Load .env file if it exists
load_dotenv()


def _mysql_url() -> str:
    username = os.getenv("MYSQL_USERNAME", "root")
    password = os.getenv("MYSQL_PASSWORD", "")
    address = os.getenv("MYSQL_ADDRESS", "127.0.0.1:3306")
    database = os.getenv("MYSQL_DATABASE", "kinship")

    host, _, port = address.partition(":")
    return (
        f"mysql+pymysql://{username}:{password}"
        f"@{host or '127.0.0.1'}:{port or '3306'}/{database}?charset=utf8mb4"
    )


class Settings:
    # -------------------------------------------------------
    # Project
    # -------------------------------------------------------
    PROJECT_NAME: str = "Kinship Registry API"
    ENV: str = os.getenv("ENV", "dev")
    PORT: int = int(os.getenv("PORT", 80))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # -------------------------------------------------------
    # Database
    # WeChat Cloud Run injects MYSQL_USERNAME / MYSQL_PASSWORD /
    # MYSQL_ADDRESS; DATABASE_URL wins when set.
    # -------------------------------------------------------
    DATABASE_URL: str = os.getenv("DATABASE_URL") or _mysql_url()

    if DATABASE_URL.startswith("postgres://"):
        DATABASE_URL = DATABASE_URL.replace("postgres://", "postgresql://", 1)

    # -------------------------------------------------------
    # Identity headers (set by the platform gateway)
    # -------------------------------------------------------
    OPENID_HEADER: str = os.getenv("OPENID_HEADER", "x-wx-openid")
    SOURCE_HEADER: str = os.getenv("SOURCE_HEADER", "x-wx-source")

    # -------------------------------------------------------
    # Registry
    # -------------------------------------------------------
    PATH_LABEL_JOINER: str = os.getenv("PATH_LABEL_JOINER", "的")


# Single instance that is imported everywhere
settings = Settings()
