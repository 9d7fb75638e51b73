"""Client configuration and constants."""
import os


def _parse_float_env(name: str, default: float) -> float:
    """Parse a float from an environment variable."""
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


class Settings:
    PROJECT_NAME: str = "hadith-memo"
    API_BASE_URL: str = os.environ.get("HADITH_API_URL", "http://localhost:8080/api")
    REQUEST_TIMEOUT: float = _parse_float_env("HADITH_API_TIMEOUT", 10.0)
    LOG_DIR: str = os.environ.get("HADITH_LOG_DIR", "log")
    LOG_FILE: str = "hadith_client.log"
    LOG_LEVEL: str = os.environ.get("HADITH_LOG_LEVEL", "INFO").upper()
    DEFAULT_QUESTION_TYPES: tuple = ("multiple_choice", "fill_blanks")

    @property
    def log_path(self) -> str:
        return os.path.join(self.LOG_DIR, self.LOG_FILE)


settings = Settings()
