import os

import dj_database_url

# Set SECRET_KEY before importing base settings (which requires it)
# Not a real secret - tests don't need cryptographic security
os.environ.setdefault("SECRET_KEY", "test-key-not-secret")  # pragma: allowlist secret

from .base import *  # noqa

DEBUG = False
PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

# Use DATABASE_URL if provided (CI uses Postgres), otherwise SQLite
DATABASES["default"] = dj_database_url.config(  # type: ignore[assignment]  # noqa: F405
    default="sqlite://:memory:",
    conn_max_age=600,
)

# Run queued jobs inline and keep Django-Q quiet
Q_CLUSTER["sync"] = True  # type: ignore[name-defined]  # noqa: F405
Q_CLUSTER["log_level"] = "WARNING"  # type: ignore[name-defined]  # noqa: F405

# Flags live in memory so each test starts from the declared defaults
CONSTANCE_BACKEND = "constance.backends.memory.MemoryBackend"

# Suppress app logs during tests
# Tests verify behavior through assertions, not log inspection
LOGGING["loggers"]["upkeep"]["level"] = "CRITICAL"  # type: ignore[index]  # noqa: F405
