"""
Production Django settings for scorm_player
"""

import os

from core.env_loader import validate_environment

from .base import *

validate_environment()

ENVIRONMENT = 'production'
DEBUG = False

SECRET_KEY = get_env('DJANGO_SECRET_KEY', required=True)
ALLOWED_HOSTS = [host.strip() for host in get_env('ALLOWED_HOSTS', 'localhost').split(',') if host.strip()]

LOGGING['handlers']['file'] = {
    'level': 'INFO',
    'class': 'logging.handlers.RotatingFileHandler',
    'filename': os.path.join(LOG_DIR, 'scorm.log'),
    'maxBytes': 50 * 1024 * 1024,  # 50MB
    'backupCount': 3,
    'formatter': 'verbose',
}
LOGGING['loggers']['scorm']['handlers'] = ['console', 'file']

os.makedirs(LOG_DIR, exist_ok=True)
