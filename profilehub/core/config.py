"""Application configuration from environment."""
from pathlib import Path

from pydantic_settings import BaseSettings

# Base path of the repository (parent of profilehub/)
BASE_DIR = Path(__file__).resolve().parent.parent.parent
PACKAGE_DIR = Path(__file__).resolve().parent.parent

INSECURE_DEFAULT_SECRET = "dev-secret-change-me"


class Settings(BaseSettings):
    """App settings loaded from env / .env."""

    app_name: str = "profilehub"
    debug: bool = False
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 3000

    # Storage. Empty URLs fall back to SQLite files inside data_dir.
    data_dir: Path = BASE_DIR / "data"
    database_url: str = ""
    session_database_url: str = ""

    # Views
    templates_dir: Path = PACKAGE_DIR / "templates"
    public_dir: Path = PACKAGE_DIR / "public"

    # Session cookie (server-side session, signed id in the cookie)
    session_secret: str = INSECURE_DEFAULT_SECRET
    session_cookie_name: str = "profilehub_sid"
    session_max_age: int = 60 * 60 * 24 * 7  # 7 days

    bcrypt_rounds: int = 10

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @property
    def main_database_url(self) -> str:
        return self.database_url or f"sqlite:///{self.data_dir / 'app.sqlite3'}"

    @property
    def sessions_database_url(self) -> str:
        return self.session_database_url or f"sqlite:///{self.data_dir / 'sessions.sqlite3'}"

    @property
    def uses_default_secret(self) -> bool:
        return self.session_secret == INSECURE_DEFAULT_SECRET


def get_settings() -> Settings:
    return Settings()
