"""
Base Django settings for scorm_player.
Contains all common settings shared across environments.
"""

import os
from pathlib import Path
from django.core.management.utils import get_random_secret_key

# Load environment variables from unified .env file
from core.env_loader import get_env, get_bool_env, get_int_env

# Build paths inside the project like this: BASE_DIR / 'subdir'.
BASE_DIR = Path(__file__).resolve().parent.parent.parent

ENVIRONMENT = 'development'
DEBUG = get_bool_env('DJANGO_DEBUG', True)

# ==============================================
# LOGGING CONFIGURATION
# ==============================================

# Get logs directory from environment (server-independent)
LOG_DIR = get_env('LOGS_DIR', os.path.join(BASE_DIR, 'logs'))

SCORM_LOG_LEVEL = get_env('SCORM_LOG_LEVEL', 'INFO')

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '{levelname} {asctime} {module} {process:d} {thread:d} {message}',
            'style': '{',
        },
        'simple': {
            'format': '{levelname} {asctime} {name} {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'level': 'DEBUG',
            'class': 'logging.StreamHandler',
            'formatter': 'simple',
        },
    },
    'loggers': {
        'django': {
            'handlers': ['console'],
            'level': 'WARNING',
            'propagate': False,
        },
        'scorm': {
            'handlers': ['console'],
            'level': SCORM_LOG_LEVEL,
            'propagate': False,
        },
    },
    'root': {
        'handlers': ['console'],
        'level': 'WARNING',
    },
}

# ==============================================
# CORE DJANGO SETTINGS
# ==============================================

SECRET_KEY = get_env('DJANGO_SECRET_KEY') or get_random_secret_key()

ALLOWED_HOSTS = ['localhost', '127.0.0.1']

# Default primary key field type
DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

INSTALLED_APPS = [
    'django.contrib.contenttypes',
    'scorm',
]

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': get_env('SCORM_DB_PATH', str(BASE_DIR / 'db.sqlite3')),
    }
}

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
        'LOCATION': 'scorm-player',
    }
}

USE_TZ = True
TIME_ZONE = 'UTC'

# ==============================================
# SCORM RUN-TIME
# ==============================================

# Append Commit/Terminate snapshots of handlers with a history_key to CmiHistoryEntry
SCORM_PERSIST_HISTORY = get_bool_env('SCORM_PERSIST_HISTORY', True)

# Mirror every RTE call into ScormDebugLogger (logs + cache)
SCORM_DEBUG_LOGGING = get_bool_env('SCORM_DEBUG_LOGGING', False)
SCORM_DEBUG_CACHE_TIMEOUT = get_int_env('SCORM_DEBUG_CACHE_TIMEOUT', 3600)  # 1 hour
