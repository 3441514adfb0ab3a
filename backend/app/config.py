"""Application settings and validation."""

import os
from pathlib import Path

DEFAULT_DB_URL = f"sqlite:///{Path(__file__).resolve().parent.parent / 'app.db'}"


class Settings:
    ENV: str
    DATABASE_URL: str
    LOG_LEVEL: str
    SEED_ON_STARTUP: bool
    DB_ECHO: bool
    ALLOW_SQLITE: bool

    def __init__(self):
        self.ENV = os.getenv("ENV", "dev").lower()
        self.DATABASE_URL = os.getenv("DATABASE_URL", DEFAULT_DB_URL)
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
        self.SEED_ON_STARTUP = os.getenv("SEED_ON_STARTUP", "false").lower() == "true"
        self.DB_ECHO = os.getenv("DB_ECHO", "false").lower() == "true"
        self.ALLOW_SQLITE = os.getenv("ALLOW_SQLITE", "false").lower() == "true"
        self._validate()

    def _validate(self):
        if self.ENV != "dev" and not self.ALLOW_SQLITE and self.DATABASE_URL == DEFAULT_DB_URL:
            raise RuntimeError("DATABASE_URL must be set to a real database in non-dev environments")


settings = Settings()
