"""
SCORM Debug Logger
Detailed logging of run-time API calls, with the latest call per function kept in the cache
"""
import logging

from django.conf import settings
from django.core.cache import cache
from django.utils import timezone

logger = logging.getLogger(__name__)

RTE_FUNCTIONS = (
    'Initialize',
    'Terminate',
    'GetValue',
    'SetValue',
    'Commit',
    'GetLastError',
    'GetErrorString',
    'GetDiagnostic',
)


class ScormDebugLogger:
    """
    Debug logger for one run-time session

    Args:
        session_id: ScormAPIHandler.session_id
        history_key: package/session identity, if any
    """

    def __init__(self, session_id, history_key=None):
        self.session_id = session_id
        self.history_key = history_key

    @property
    def timeout(self):
        return getattr(settings, 'SCORM_DEBUG_CACHE_TIMEOUT', 3600)

    def _cache_key(self, kind, name=''):
        return f"scorm_{kind}_{self.session_id}_{name}" if name else f"scorm_{kind}_{self.session_id}"

    def log_api_call(self, method, parameters, result, error_code=None):
        """Log an RTE call and remember it as the latest call of `method`"""
        debug_data = {
            'timestamp': timezone.now().isoformat(),
            'session_id': self.session_id,
            'history_key': self.history_key,
            'method': method,
            'parameters': list(parameters),
            'result': result,
            'error_code': error_code,
        }

        if error_code:
            logger.warning(f"SCORM API ERROR: {method}{tuple(parameters)} -> {result!r} (code {error_code}, session {self.session_id})")
        else:
            logger.info(f"SCORM API CALL: {method}{tuple(parameters)} -> {result!r} (session {self.session_id})")

        cache.set(self._cache_key('debug', method), debug_data, timeout=self.timeout)

    def log_persist(self, snapshot):
        """Log a persisted snapshot (its keys only, values can be large)"""
        debug_data = {
            'timestamp': timezone.now().isoformat(),
            'session_id': self.session_id,
            'history_key': self.history_key,
            'elements': sorted(snapshot),
        }
        logger.info(f"SCORM PERSIST: session {self.session_id} ({len(snapshot)} elements)")
        cache.set(self._cache_key('persist'), debug_data, timeout=self.timeout)

    def get_last_call(self, method):
        return cache.get(self._cache_key('debug', method))

    def get_last_persist(self):
        return cache.get(self._cache_key('persist'))

    def get_debug_summary(self):
        """Latest call of every RTE function plus the latest persist"""
        calls = cache.get_many([self._cache_key('debug', method) for method in RTE_FUNCTIONS])
        return {
            'session_id': self.session_id,
            'history_key': self.history_key,
            'timestamp': timezone.now().isoformat(),
            'api_calls': sorted(calls.values(), key=lambda call: call['timestamp']),
            'persist': self.get_last_persist(),
        }

    def clear_debug_data(self):
        keys = [self._cache_key('debug', method) for method in RTE_FUNCTIONS]
        keys.append(self._cache_key('persist'))
        cache.delete_many(keys)
        logger.info(f"SCORM debug data cleared for session {self.session_id}")
