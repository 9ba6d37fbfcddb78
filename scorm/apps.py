import logging

from django.apps import AppConfig
from django.conf import settings

logger = logging.getLogger(__name__)


class ScormConfig(AppConfig):
    """SCORM 2004 run-time: API handler, CMI data model and snapshot history"""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'scorm'
    verbose_name = 'SCORM Run-Time'

    def ready(self):
        """Connect the API signal receivers"""
        from . import signals  # noqa: F401

        logger.debug(
            f"SCORM run-time ready (history: {getattr(settings, 'SCORM_PERSIST_HISTORY', True)}, "
            f"debug logging: {getattr(settings, 'SCORM_DEBUG_LOGGING', False)})"
        )
