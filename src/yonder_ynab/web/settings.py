"""
Django settings for the import web service.

The service is stateless: no database, no sessions, no templates.
Importer configuration (YNAB, Telegram, webhook secrets) is not read here;
see yonder_ynab.config.
"""

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent

# Security settings
SECRET_KEY = os.environ.get("DJANGO_SECRET_KEY", "dev-secret-key-change-in-production")
DEBUG = os.environ.get("DJANGO_DEBUG", "False").lower() == "true"
ALLOWED_HOSTS = os.environ.get("DJANGO_ALLOWED_HOSTS", "localhost,127.0.0.1,*").split(",")

# TLS usually terminates at a reverse proxy
SECURE_PROXY_SSL_HEADER = ("HTTP_X_FORWARDED_PROTO", "https")
USE_X_FORWARDED_HOST = True

INSTALLED_APPS: list[str] = []

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
]

ROOT_URLCONF = "yonder_ynab.web.urls"

# Webhook URLs are registered without trailing slashes
APPEND_SLASH = False

DATABASES: dict = {}

# Yonder exports are small; reject anything above 10 MB
DATA_UPLOAD_MAX_MEMORY_SIZE = 10 * 1024 * 1024
FILE_UPLOAD_MAX_MEMORY_SIZE = 10 * 1024 * 1024

USE_TZ = True

# Logging
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "default": {
            "format": "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "default",
        },
    },
    "loggers": {
        "django": {
            "handlers": ["console"],
            "level": "WARNING",
        },
        "yonder_ynab": {
            "handlers": ["console"],
            "level": os.environ.get("YONDER_YNAB_LOG_LEVEL", "INFO"),
        },
    },
}

# Path to the importer YAML config (environment variables still take precedence)
YONDER_YNAB_CONFIG = os.environ.get("YONDER_YNAB_CONFIG", "config.yaml")
