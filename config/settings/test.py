from .base import *  # noqa
from .base import BASE_DIR, REST_FRAMEWORK as BASE_REST_FRAMEWORK

# Test settings: force SQLite so the suite runs without external services
DEBUG = False

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": BASE_DIR / "test_db.sqlite3",
    }
}

# In-memory outbox (pytest-django's `mailoutbox` reads from it)
EMAIL_BACKEND = "django.core.mail.backends.locmem.EmailBackend"

# Fast hashing for factory-created users
PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

# Plain static storage; the manifest storage needs collectstatic
STORAGES = {
    "staticfiles": {"BACKEND": "django.contrib.staticfiles.storage.StaticFilesStorage"},
}

# Relax throttling so rate limits never interfere with assertions
REST_FRAMEWORK = {**BASE_REST_FRAMEWORK}
REST_FRAMEWORK["DEFAULT_THROTTLE_RATES"] = {
    scope: "10000/min" for scope in BASE_REST_FRAMEWORK.get("DEFAULT_THROTTLE_RATES", {})
}
