"""
Django settings for scorm_player
Dynamically loads settings based on DJANGO_ENV environment variable
"""

import os

# Get environment from environment variable, default to development
DJANGO_ENV = os.environ.get('DJANGO_ENV', 'development').lower()

# Load appropriate settings based on environment
if DJANGO_ENV == 'test':
    from .test import *
elif DJANGO_ENV == 'production':
    from .production import *
else:
    from .base import *
