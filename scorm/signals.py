"""
Django signals for the SCORM run-time API
Every handler sends these after notifying its own listeners; `sender` is the handler
"""
import logging

from django.conf import settings
from django.dispatch import Signal, receiver

logger = logging.getLogger(__name__)

# kwargs: function, arguments, return_value, is_error
scorm_api_call = Signal()

# kwargs: code
scorm_error_code = Signal()

# kwargs: snapshot
scorm_persist = Signal()


@receiver(scorm_api_call)
def log_scorm_api_call(sender, function, arguments, return_value, is_error, **kwargs):
    """Mirror RTE calls into the debug logger when SCORM_DEBUG_LOGGING is on"""
    if not getattr(settings, 'SCORM_DEBUG_LOGGING', False):
        return

    from .debug_logger import ScormDebugLogger

    debug_logger = ScormDebugLogger(session_id=sender.session_id, history_key=sender.history_key)
    debug_logger.log_api_call(
        function,
        arguments,
        return_value,
        error_code=sender.last_error if is_error else None,
    )


@receiver(scorm_persist)
def log_scorm_persist(sender, snapshot, **kwargs):
    if not getattr(settings, 'SCORM_DEBUG_LOGGING', False):
        return

    from .debug_logger import ScormDebugLogger

    ScormDebugLogger(session_id=sender.session_id, history_key=sender.history_key).log_persist(snapshot)


@receiver(scorm_persist)
def store_cmi_snapshot(sender, snapshot, **kwargs):
    """
    Append persisted snapshots to the CMI history of the handler's package/session

    Handlers without a history_key are not stored (e.g. previews).
    """
    if not getattr(settings, 'SCORM_PERSIST_HISTORY', True):
        return
    if not sender.history_key:
        logger.debug(f"Snapshot of session {sender.session_id} not stored: no history key")
        return

    from .history import CmiHistoryStore

    entry = CmiHistoryStore(sender.history_key).append(snapshot)
    logger.info(f"Stored CMI snapshot {entry.id} for {sender.history_key}")
