"""
Django settings for the linkup project.
"""
from pathlib import Path
import os
from django.core.exceptions import ImproperlyConfigured

BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = os.getenv("DJANGO_SECRET_KEY", "django-insecure-5c!r7w2v#k9p@q0l$linkup-dev-only$e8^m3n_t6y1u4i")
DEBUG = os.getenv("DJANGO_DEBUG", "1") == "1"

_default_allowed_hosts = ["127.0.0.1", "localhost", "testserver"]
ALLOWED_HOSTS = (
    os.getenv("DJANGO_ALLOWED_HOSTS", "").split(",")
    if os.getenv("DJANGO_ALLOWED_HOSTS")
    else _default_allowed_hosts
)

INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "accounts",
    "jobs",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "linkup.urls"

# Only the admin renders templates; the API answers JSON.
TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    }
]

WSGI_APPLICATION = "linkup.wsgi.application"

# -----------------------------
# Database (PostgreSQL)
# -----------------------------
# Shortlisting relies on SELECT ... FOR UPDATE row locks on the job post.
DB_ENGINE = os.getenv("DB_ENGINE", "django.db.backends.postgresql").strip()
if DB_ENGINE in {"sqlite", "sqlite3", "django.db.backends.sqlite3"}:
    raise ImproperlyConfigured("SQLite is disabled for this project. Please configure PostgreSQL in .env.")
if DB_ENGINE != "django.db.backends.postgresql":
    raise ImproperlyConfigured("Only PostgreSQL is supported. Set DB_ENGINE=django.db.backends.postgresql")

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.postgresql",
        "NAME": os.getenv("DB_NAME", "linkup_db"),
        "USER": os.getenv("DB_USER", "linkup_user"),
        "PASSWORD": os.getenv("DB_PASSWORD", "YourStrongPassHere"),
        "HOST": os.getenv("DB_HOST", "127.0.0.1"),
        "PORT": os.getenv("DB_PORT", "5432"),
    }
}

# -----------------------------
# Custom User Model
# -----------------------------
AUTH_USER_MODEL = "accounts.User"

SESSION_COOKIE_AGE = int(os.getenv("SESSION_COOKIE_AGE", "3600"))
SESSION_SAVE_EVERY_REQUEST = True

AUTH_PASSWORD_VALIDATORS = [
    {"NAME": "django.contrib.auth.password_validation.UserAttributeSimilarityValidator"},
    {"NAME": "django.contrib.auth.password_validation.MinimumLengthValidator"},
    {"NAME": "django.contrib.auth.password_validation.CommonPasswordValidator"},
    {"NAME": "django.contrib.auth.password_validation.NumericPasswordValidator"},
]

LANGUAGE_CODE = "en-us"
TIME_ZONE = os.getenv("DJANGO_TIME_ZONE", "UTC")
USE_I18N = True
USE_TZ = True

STATIC_URL = "static/"
MEDIA_URL = "/media/"
MEDIA_ROOT = BASE_DIR / "media"

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# -----------------------------
# Job applications
# -----------------------------
JOBS_RESUME_MAX_BYTES = int(os.getenv("JOBS_RESUME_MAX_BYTES", str(5 * 1024 * 1024)))
JOBS_RESUME_CONTENT_TYPES = [
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
]
JOBS_APPLICANT_PAGE_SIZE = int(os.getenv("JOBS_APPLICANT_PAGE_SIZE", "20"))

# -----------------------------
# Logging
# -----------------------------
LOG_DIR = BASE_DIR / "logs"
LOG_DIR.mkdir(exist_ok=True)
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "standard": {"format": "[{levelname}] {asctime} {name}: {message}", "style": "{"},
    },
    "handlers": {
        "console": {"class": "logging.StreamHandler", "formatter": "standard"},
        "file": {
            "class": "logging.FileHandler",
            "filename": str(LOG_DIR / "linkup.log"),
            "formatter": "standard",
            "level": "INFO",
        },
    },
    "root": {"handlers": ["console", "file"], "level": os.getenv("LOG_LEVEL", "INFO")},
}
