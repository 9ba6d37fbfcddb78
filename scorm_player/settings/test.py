"""
Test Django settings for scorm_player
"""

from .base import *

ENVIRONMENT = 'test'
DEBUG = True

SECRET_KEY = get_env('DJANGO_SECRET_KEY', 'test-key-for-development-only-not-secure')

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
        'LOCATION': 'scorm-player-test',
    }
}

SCORM_PERSIST_HISTORY = True
SCORM_DEBUG_LOGGING = False

# Keep test output quiet; tests capture what they need with assertLogs
LOGGING['handlers']['console']['level'] = 'CRITICAL'
