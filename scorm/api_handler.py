"""
SCORM API Handler
Implements the SCORM 2004 Run-Time API (API_1484_11) over the CMI data model
"""
import copy
import logging
import threading
import uuid
from functools import wraps

from .cmi import ROOT, build_cmi
from .elements import BoundElement
from .errors import (
    ERROR_STRINGS,
    UNKNOWN_ERROR_STRING,
    DuplicatedObjectiveIdError,
    InvalidPatternError,
    OutOfBoundError,
    ReadOnlyError,
    ScormErrorCode,
    ScormSeedError,
    TargetNotCreatableError,
    TypeMismatchError,
    ValueNotInitializedError,
    ValueOutOfRangeError,
    WriteOnlyError,
)
from .signals import scorm_api_call, scorm_error_code, scorm_persist

logger = logging.getLogger(__name__)


def rte_call(name, updates_error=True):
    """
    Run an RTE function under the handler lock and report it as a `call` event

    Functions that do not update the error code (GetLastError, GetErrorString,
    GetDiagnostic) are never reported as failed.
    """
    def decorator(method):
        @wraps(method)
        def wrapper(self, *args, **kwargs):
            with self._lock:
                result = method(self, *args, **kwargs)
                is_error = updates_error and self.last_error != ScormErrorCode.NO_ERROR
                self._emit('call', name, args + tuple(kwargs.values()), result, is_error)
                return result
        return wrapper
    return decorator


class ScormAPIHandler:
    """
    Handler for SCORM 2004 API calls

    One handler is one session: not-initialized -> running -> terminated.
    Every function returns strings the way content expects them and reports
    failures only through GetLastError.

    Args:
        cmi: seed snapshot in the exported shape (optional)
        history_key: identity of the package/session for the CMI history (optional)
    """

    NOT_INITIALIZED = 'not-initialized'
    RUNNING = 'running'
    TERMINATED = 'terminated'

    EVENTS = ('call', 'error-code', 'persist')

    GET_ERROR_CODES = {
        WriteOnlyError: ScormErrorCode.DATA_MODEL_ELEMENT_IS_WRITE_ONLY,
        ValueNotInitializedError: ScormErrorCode.DATA_MODEL_ELEMENT_VALUE_NOT_INITIALIZED,
        OutOfBoundError: ScormErrorCode.GENERAL_GET_FAILURE,
    }

    SET_ERROR_CODES = {
        ReadOnlyError: ScormErrorCode.DATA_MODEL_ELEMENT_IS_READ_ONLY,
        TypeMismatchError: ScormErrorCode.DATA_MODEL_ELEMENT_TYPE_MISMATCH,
        ValueOutOfRangeError: ScormErrorCode.DATA_MODEL_ELEMENT_VALUE_OUT_OF_RANGE,
        InvalidPatternError: ScormErrorCode.GENERAL_SET_FAILURE,
        DuplicatedObjectiveIdError: ScormErrorCode.GENERAL_SET_FAILURE,
        OutOfBoundError: ScormErrorCode.GENERAL_SET_FAILURE,
        TargetNotCreatableError: ScormErrorCode.DATA_MODEL_DEPENDENCY_NOT_ESTABLISHED,
    }

    def __init__(self, cmi=None, history_key=None):
        self.session_id = uuid.uuid4().hex
        self.history_key = history_key
        self.state = self.NOT_INITIALIZED
        self.last_error = ScormErrorCode.NO_ERROR
        self._listeners = {event: [] for event in self.EVENTS}
        self._lock = threading.RLock()

        try:
            self.cmi = build_cmi(cmi)
        except ScormSeedError as e:
            logger.error(f"Invalid CMI seed for {history_key or self.session_id}: {e.element}: {e}")
            raise

        logger.debug(f"SCORM API handler created for {history_key or self.session_id}")

    @classmethod
    def from_history(cls, history_key, suspend_all=False):
        """Start a new session seeded from the last snapshot stored for history_key"""
        from .history import CmiHistoryStore
        from .utils import seed_from_history

        last = CmiHistoryStore(history_key).last()
        seed = seed_from_history(last['cmi'] if last else None, suspend_all)
        logger.info(f"SCORM session for {history_key} starts with entry '{seed['entry']}'")
        return cls(cmi=seed, history_key=history_key)

    #
    # Listeners
    #

    def add_listener(self, event, callback):
        """
        Register a callback for 'call', 'error-code' or 'persist'

        call(function, arguments, return_value, is_error)
        error-code(code)
        persist(snapshot)

        Callbacks run synchronously in registration order before the RTE
        function returns.
        """
        if event not in self._listeners:
            raise ValueError(f"Unknown SCORM API event: {event}")
        self._listeners[event].append(callback)

    def remove_listener(self, event, callback):
        if event not in self._listeners:
            raise ValueError(f"Unknown SCORM API event: {event}")
        if callback in self._listeners[event]:
            self._listeners[event].remove(callback)

    def _emit(self, event, *args):
        for callback in list(self._listeners[event]):
            callback(*args)

        if event == 'call':
            function, arguments, return_value, is_error = args
            scorm_api_call.send(
                sender=self,
                function=function,
                arguments=arguments,
                return_value=return_value,
                is_error=is_error,
            )
        elif event == 'error-code':
            scorm_error_code.send(sender=self, code=args[0])
        else:
            scorm_persist.send(sender=self, snapshot=args[0])

    def _set_error(self, code):
        if code == self.last_error:
            return
        self.last_error = code
        self._emit('error-code', code)

    def _fail(self, code, message):
        logger.warning(f"SCORM API {message} (error {code}, session {self.session_id})")
        self._set_error(code)

    def _persist(self):
        self._emit('persist', copy.deepcopy(self.export()))

    def export(self):
        """Plain snapshot of the CMI tree, in the shape accepted as a seed"""
        return self.cmi.export()

    #
    # Session
    #

    @rte_call('Initialize')
    def initialize(self, param=None):
        """Initialize("")"""
        if param != '':
            self._fail(ScormErrorCode.GENERAL_ARGUMENT_ERROR, f"Initialize called with {param!r}")
            return 'false'
        if self.state == self.RUNNING:
            self._fail(ScormErrorCode.ALREADY_INITIALIZED, "Initialize called twice")
            return 'false'
        if self.state == self.TERMINATED:
            self._fail(ScormErrorCode.CONTENT_INSTANCE_TERMINATED, "Initialize called after Terminate")
            return 'false'

        self.state = self.RUNNING
        self._set_error(ScormErrorCode.NO_ERROR)
        logger.info(f"SCORM API initialized for {self.history_key or self.session_id}")
        return 'true'

    @rte_call('Terminate')
    def terminate(self, param=None):
        """Terminate(""); persists the snapshot"""
        if param != '':
            self._fail(ScormErrorCode.GENERAL_ARGUMENT_ERROR, f"Terminate called with {param!r}")
            return 'false'
        if self.state == self.NOT_INITIALIZED:
            self._fail(ScormErrorCode.TERMINATION_BEFORE_INITIALIZATION, "Terminate called before Initialize")
            return 'false'
        if self.state == self.TERMINATED:
            self._fail(ScormErrorCode.TERMINATION_AFTER_TERMINATION, "Terminate called twice")
            return 'false'

        self._persist()
        self.state = self.TERMINATED
        self._set_error(ScormErrorCode.NO_ERROR)
        logger.info(f"SCORM API terminated for {self.history_key or self.session_id}")
        return 'true'

    @rte_call('Commit')
    def commit(self, param=None):
        """Commit(""); persists the snapshot"""
        if param != '':
            self._fail(ScormErrorCode.GENERAL_ARGUMENT_ERROR, f"Commit called with {param!r}")
            return 'false'
        if self.state == self.NOT_INITIALIZED:
            self._fail(ScormErrorCode.COMMIT_BEFORE_INITIALIZATION, "Commit called before Initialize")
            return 'false'
        if self.state == self.TERMINATED:
            self._fail(ScormErrorCode.COMMIT_AFTER_TERMINATION, "Commit called after Terminate")
            return 'false'

        self._persist()
        self._set_error(ScormErrorCode.NO_ERROR)
        return 'true'

    #
    # Data model
    #

    def _resolve(self, element, write):
        """Resolve a dot-path to a leaf, or None if it names no leaf"""
        if not isinstance(element, str):
            return None
        name, *path = element.split('.')
        if name != ROOT or not path:
            return None
        target = self.cmi.access(path, write)
        return target if isinstance(target, BoundElement) else None

    @rte_call('GetValue')
    def get_value(self, element=None):
        """GetValue(element) -> value or ''"""
        if self.state == self.NOT_INITIALIZED:
            self._fail(ScormErrorCode.RETRIEVE_DATA_BEFORE_INITIALIZATION, f"GetValue({element!r}) before Initialize")
            return ''
        if self.state == self.TERMINATED:
            self._fail(ScormErrorCode.RETRIEVE_DATA_AFTER_TERMINATION, f"GetValue({element!r}) after Terminate")
            return ''

        try:
            target = self._resolve(element, write=False)
            if target is None:
                self._fail(ScormErrorCode.UNDEFINED_DATA_MODEL_ELEMENT, f"GetValue({element!r}) undefined element")
                return ''
            value = target.get_value()
        except tuple(self.GET_ERROR_CODES) as e:
            self._fail(self.GET_ERROR_CODES[type(e)], f"GetValue({element!r}) failed: {type(e).__name__} {e}")
            return ''

        self._set_error(ScormErrorCode.NO_ERROR)
        logger.debug(f"SCORM API GetValue({element}) -> {value!r}")
        return str(value)

    @rte_call('SetValue')
    def set_value(self, element=None, value=None):
        """SetValue(element, value) -> 'true' / 'false'"""
        if self.state == self.NOT_INITIALIZED:
            self._fail(ScormErrorCode.STORE_DATA_BEFORE_INITIALIZATION, f"SetValue({element!r}) before Initialize")
            return 'false'
        if self.state == self.TERMINATED:
            self._fail(ScormErrorCode.STORE_DATA_AFTER_TERMINATION, f"SetValue({element!r}) after Terminate")
            return 'false'
        if value is None:
            self._fail(ScormErrorCode.GENERAL_ARGUMENT_ERROR, f"SetValue({element!r}) without a value")
            return 'false'

        try:
            target = self._resolve(element, write=True)
            if target is None:
                self._fail(ScormErrorCode.UNDEFINED_DATA_MODEL_ELEMENT, f"SetValue({element!r}) undefined element")
                return 'false'
            target.set_value(str(value))
        except tuple(self.SET_ERROR_CODES) as e:
            self._fail(self.SET_ERROR_CODES[type(e)], f"SetValue({element!r}, {value!r}) failed: {type(e).__name__} {e}")
            return 'false'

        self._set_error(ScormErrorCode.NO_ERROR)
        logger.debug(f"SCORM API SetValue({element}, {value!r})")
        return 'true'

    #
    # Errors
    #

    @rte_call('GetLastError', updates_error=False)
    def get_last_error(self):
        return self.last_error

    @rte_call('GetErrorString', updates_error=False)
    def get_error_string(self, error_code=None):
        return ERROR_STRINGS.get(str(error_code), UNKNOWN_ERROR_STRING)

    @rte_call('GetDiagnostic', updates_error=False)
    def get_diagnostic(self, error_code=None):
        # No vendor diagnostics are defined
        return ''

    # API_1484_11 names
    Initialize = initialize
    Terminate = terminate
    GetValue = get_value
    SetValue = set_value
    Commit = commit
    GetLastError = get_last_error
    GetErrorString = get_error_string
    GetDiagnostic = get_diagnostic
