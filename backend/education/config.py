"""Application settings and validation."""

import os
from pathlib import Path

BASE = Path(__file__).resolve().parent.parent


class Settings:
    ENV: str
    DATABASE_URL: str
    LOG_LEVEL: str
    ALLOW_DEV_CORS: bool
    ITEMS_PER_PAGE: int
    MAX_ITEMS_PER_PAGE: int

    def __init__(self):
        self.ENV = os.getenv("ENV", "dev").lower()
        self.DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{BASE / 'education.db'}")
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
        self.ALLOW_DEV_CORS = os.getenv("ALLOW_DEV_CORS", "true").lower() == "true"
        self.ITEMS_PER_PAGE = int(os.getenv("ITEMS_PER_PAGE", "30"))
        self.MAX_ITEMS_PER_PAGE = int(os.getenv("MAX_ITEMS_PER_PAGE", "100"))
        self._validate()

    def _validate(self):
        if self.ITEMS_PER_PAGE < 1:
            raise RuntimeError("ITEMS_PER_PAGE must be a positive integer")
        if self.MAX_ITEMS_PER_PAGE < self.ITEMS_PER_PAGE:
            raise RuntimeError("MAX_ITEMS_PER_PAGE must be >= ITEMS_PER_PAGE")
        if self.ENV != "dev" and self.ALLOW_DEV_CORS:
            raise RuntimeError("ALLOW_DEV_CORS must be disabled in non-dev environments")


settings = Settings()
