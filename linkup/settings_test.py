"""Settings used by the test suite: SQLite unless TEST_DB_ENGINE=postgresql, throwaway media.

With TEST_DB_ENGINE=postgresql the database comes from the same DB_* variables
as ``linkup.settings``, so the row-locking tests run instead of being skipped.
"""
import os
import tempfile

from .settings import *  # noqa: F401,F403

TEST_DB_ENGINE = os.getenv("TEST_DB_ENGINE", "sqlite").strip().lower()

if TEST_DB_ENGINE not in {"postgres", "postgresql", "django.db.backends.postgresql"}:
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": ":memory:",
        }
    }

MEDIA_ROOT = tempfile.mkdtemp(prefix="linkup-media-")

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "handlers": {"null": {"class": "logging.NullHandler"}},
    "root": {"handlers": ["null"], "level": "WARNING"},
}
