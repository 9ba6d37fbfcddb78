"""
SCORM 2004 Run-Time errors
Internal data model errors raised by the CMI tree and the RTE error code table
"""


class ScormErrorCode:
    """
    SCORM 2004 RTE error codes (string typed, as returned by GetLastError)

    No error             0
    General errors       100 - 199
    Syntax errors        200 - 299
    RTS errors           300 - 399
    Data model errors    400 - 499
    """

    NO_ERROR = '0'

    GENERAL_EXCEPTION = '101'
    GENERAL_INITIALIZATION_FAILURE = '102'
    ALREADY_INITIALIZED = '103'
    CONTENT_INSTANCE_TERMINATED = '104'
    GENERAL_TERMINATION_FAILURE = '111'
    TERMINATION_BEFORE_INITIALIZATION = '112'
    TERMINATION_AFTER_TERMINATION = '113'
    RETRIEVE_DATA_BEFORE_INITIALIZATION = '122'
    RETRIEVE_DATA_AFTER_TERMINATION = '123'
    STORE_DATA_BEFORE_INITIALIZATION = '132'
    STORE_DATA_AFTER_TERMINATION = '133'
    COMMIT_BEFORE_INITIALIZATION = '142'
    COMMIT_AFTER_TERMINATION = '143'

    GENERAL_ARGUMENT_ERROR = '201'

    GENERAL_GET_FAILURE = '301'
    GENERAL_SET_FAILURE = '351'
    GENERAL_COMMIT_FAILURE = '391'

    UNDEFINED_DATA_MODEL_ELEMENT = '401'
    UNIMPLEMENTED_DATA_MODEL_ELEMENT = '402'
    DATA_MODEL_ELEMENT_VALUE_NOT_INITIALIZED = '403'
    DATA_MODEL_ELEMENT_IS_READ_ONLY = '404'
    DATA_MODEL_ELEMENT_IS_WRITE_ONLY = '405'
    DATA_MODEL_ELEMENT_TYPE_MISMATCH = '406'
    DATA_MODEL_ELEMENT_VALUE_OUT_OF_RANGE = '407'
    DATA_MODEL_DEPENDENCY_NOT_ESTABLISHED = '408'


ERROR_STRINGS = {
    ScormErrorCode.NO_ERROR: 'No Error',
    ScormErrorCode.GENERAL_EXCEPTION: 'General Exception',
    ScormErrorCode.GENERAL_INITIALIZATION_FAILURE: 'General Initialization Failure',
    ScormErrorCode.ALREADY_INITIALIZED: 'Already Initialized',
    ScormErrorCode.CONTENT_INSTANCE_TERMINATED: 'Content Instance Terminated',
    ScormErrorCode.GENERAL_TERMINATION_FAILURE: 'General Termination Failure',
    ScormErrorCode.TERMINATION_BEFORE_INITIALIZATION: 'Termination Before Initialization',
    ScormErrorCode.TERMINATION_AFTER_TERMINATION: 'Termination After Termination',
    ScormErrorCode.RETRIEVE_DATA_BEFORE_INITIALIZATION: 'Retrieve Data Before Initialization',
    ScormErrorCode.RETRIEVE_DATA_AFTER_TERMINATION: 'Retrieve Data After Termination',
    ScormErrorCode.STORE_DATA_BEFORE_INITIALIZATION: 'Store Data Before Initialization',
    ScormErrorCode.STORE_DATA_AFTER_TERMINATION: 'Store Data After Termination',
    ScormErrorCode.COMMIT_BEFORE_INITIALIZATION: 'Commit Before Initialization',
    ScormErrorCode.COMMIT_AFTER_TERMINATION: 'Commit After Termination',
    ScormErrorCode.GENERAL_ARGUMENT_ERROR: 'General Argument Error',
    ScormErrorCode.GENERAL_GET_FAILURE: 'General Get Failure',
    ScormErrorCode.GENERAL_SET_FAILURE: 'General Set Failure',
    ScormErrorCode.GENERAL_COMMIT_FAILURE: 'General Commit Failure',
    ScormErrorCode.UNDEFINED_DATA_MODEL_ELEMENT: 'Undefined Data Model Element',
    ScormErrorCode.UNIMPLEMENTED_DATA_MODEL_ELEMENT: 'Unimplemented Data Model Element',
    ScormErrorCode.DATA_MODEL_ELEMENT_VALUE_NOT_INITIALIZED: 'Data Model Element Value Not Initialized',
    ScormErrorCode.DATA_MODEL_ELEMENT_IS_READ_ONLY: 'Data Model Element Is Read Only',
    ScormErrorCode.DATA_MODEL_ELEMENT_IS_WRITE_ONLY: 'Data Model Element Is Write Only',
    ScormErrorCode.DATA_MODEL_ELEMENT_TYPE_MISMATCH: 'Data Model Element Type Mismatch',
    ScormErrorCode.DATA_MODEL_ELEMENT_VALUE_OUT_OF_RANGE: 'Data Model Element Value Out Of Range',
    ScormErrorCode.DATA_MODEL_DEPENDENCY_NOT_ESTABLISHED: 'Data Model Dependency Not Established',
}

UNKNOWN_ERROR_STRING = 'Unknown error code'


class ScormDataModelError(Exception):
    """Base class for errors raised while reading or writing the CMI tree"""


class ReadOnlyError(ScormDataModelError):
    pass


class WriteOnlyError(ScormDataModelError):
    pass


class TypeMismatchError(ScormDataModelError):
    pass


class ValueOutOfRangeError(ScormDataModelError):
    pass


class ValueNotInitializedError(ScormDataModelError):
    pass


class OutOfBoundError(ScormDataModelError):
    pass


class DuplicatedObjectiveIdError(ScormDataModelError):
    pass


class InvalidPatternError(ScormDataModelError):
    pass


class TargetNotCreatableError(ScormDataModelError):
    """Raised when a missing collection item, or a dependency of a value, does not exist yet"""


class ScormSeedError(ValueError):
    """Invalid seed snapshot data for an eagerly validated element"""

    def __init__(self, message, element=None):
        super().__init__(message)
        self.element = element
