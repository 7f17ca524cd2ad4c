# expense_tracker/config.py

import os
from datetime import timedelta

DEFAULT_DB_PATH = os.path.join(os.path.dirname(__file__), "..", "data", "expense.db")


class Config:
    """Settings read from the environment at app creation time"""

    def __init__(self, overrides=None):
        self.APP_ENV = os.environ.get("APP_ENV", "development")
        self.JWT_SECRET_KEY = os.environ.get("JWT_SECRET_KEY", "dev-key-for-local-use-only-change-me-before-deploying")
        self.DB_PATH = os.environ.get("DB_PATH", DEFAULT_DB_PATH)
        self.CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "http://localhost:3000")
        self.PASSWORD_HASH_METHOD = os.environ.get("PASSWORD_HASH_METHOD", "pbkdf2:sha256:600000")
        self.LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
        self.PORT = int(os.environ.get("PORT", 5000))

        for key, value in (overrides or {}).items():
            setattr(self, key, value)

    @property
    def is_production(self):
        return self.APP_ENV == "production"

    @property
    def token_lifetime(self):
        return timedelta(days=7) if self.is_production else timedelta(days=30)

    @property
    def cors_origins(self):
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    def to_flask(self):
        """Mapping suitable for app.config.from_mapping"""
        return {
            "APP_ENV": self.APP_ENV,
            "IS_PRODUCTION": self.is_production,
            "JWT_SECRET_KEY": self.JWT_SECRET_KEY,
            "JWT_ACCESS_TOKEN_EXPIRES": self.token_lifetime,
            "JWT_TOKEN_LOCATION": ["headers"],
            "JWT_HEADER_TYPE": "Bearer",
            "DB_PATH": self.DB_PATH,
            "PASSWORD_HASH_METHOD": self.PASSWORD_HASH_METHOD,
            "LOG_LEVEL": self.LOG_LEVEL,
            "PORT": self.PORT,
        }
