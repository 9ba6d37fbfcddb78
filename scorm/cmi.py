"""
SCORM 2004 CMI data model
Schema of the `cmi` tree exposed to content through the run-time API
"""
import logging
import re

from .composites import Aggregate, Collection
from .elements import (
    CharacterString,
    Field,
    Real,
    TimeInterval,
    Timestamp,
    Vocabulary,
    creatable,
    read_only,
    to_decimal,
    with_default,
    write_only,
)
from .errors import (
    DuplicatedObjectiveIdError,
    InvalidPatternError,
    TargetNotCreatableError,
    TypeMismatchError,
)
from .utils import parse_character_string

logger = logging.getLogger(__name__)

ROOT = 'cmi'
VERSION = '1.0'

COMPLETION_STATUSES = ('completed', 'incomplete', 'not attempted', 'unknown')
SUCCESS_STATUSES = ('passed', 'failed', 'unknown')
CREDITS = ('credit', 'no-credit')
ENTRIES = ('ab-initio', 'resume', '')
EXITS = ('time-out', 'suspend', 'logout', 'normal', '')
MODES = ('browse', 'normal', 'review')
TIME_LIMIT_ACTIONS = ('exit,message', 'exit,no message', 'continue,message', 'continue,no message')
INTERACTION_TYPES = (
    'true-false', 'choice', 'fill-in', 'long-fill-in', 'likert', 'matching',
    'performance', 'sequencing', 'numeric', 'other',
)
INTERACTION_RESULTS = ('correct', 'incorrect', 'unanticipated', 'neutral')

NUMERIC_RANGE_PATTERN = re.compile(r'^(?P<minimum>[^:]*)(?:\[:\](?P<maximum>[^:]*))?$')


class CompletionStatus(Vocabulary):
    """
    cmi.completion_status

    When the record also holds completion_threshold and both it and
    progress_measure are set, the status is evaluated from them and the
    stored value is ignored. With a threshold but no progress it is unknown.
    """

    def __init__(self):
        super().__init__(COMPLETION_STATUSES)

    def derive(self, value, context):
        record = context.parent if context else None
        threshold_element = record.child('completion_threshold') if record else None
        if threshold_element is None:
            return value

        threshold = to_decimal(threshold_element.value) if threshold_element.value is not None else None
        if threshold is None:
            return value

        progress_element = record.child('progress_measure')
        progress = to_decimal(progress_element.value) if progress_element.value is not None else None
        if progress is None:
            return 'unknown'
        return 'completed' if progress >= threshold else 'incomplete'


class UniqueIdentifier(CharacterString):
    """An objective id that must not repeat among the items of its collection"""

    def validate(self, value, context):
        record = context.parent
        siblings = context.ancestor(2)
        for item in siblings.items:
            if item is record:
                continue
            if item.child('id').value == value:
                raise DuplicatedObjectiveIdError(f"Objective id {value} is already used.")


class InteractionResult(CharacterString):
    """One of the result tokens, or a real number"""

    def validate(self, value, context):
        if value not in INTERACTION_RESULTS and to_decimal(value) is None:
            raise TypeMismatchError(f"{value} is not a valid interaction result.")


class Pattern(CharacterString):
    """
    cmi.interactions.n.correct_responses.m.pattern

    Its format depends on cmi.interactions.n.type, which must be set first.
    """

    def validate(self, value, context):
        interaction = context.ancestor(3)
        interaction_type = interaction.child('type').value
        if not interaction_type:
            raise TargetNotCreatableError("The interaction type must be set before its patterns.")

        checker = PATTERN_CHECKS.get(interaction_type)
        if checker and not checker(value):
            raise InvalidPatternError(f"{value} is not a valid {interaction_type} pattern.")


def _check_true_false(value):
    return value in ('true', 'false')


def _check_not_blank(value):
    # TODO validate choice identifiers as URIs (RFC 3986)
    return bool(value.strip())


def _check_fill_in(value):
    parsed = parse_character_string(value)
    return all(name in ('lang', 'case_matters', 'order_matters') for name in parsed['delimiters'])


def _check_numeric(value):
    match = NUMERIC_RANGE_PATTERN.match(value)
    if not match:
        return False
    bounds = [bound for bound in match.groups() if bound]
    if not all(to_decimal(bound) is not None for bound in bounds):
        return False
    if match.group('minimum') and match.group('maximum'):
        return to_decimal(bounds[0]) <= to_decimal(bounds[1])
    return True


PATTERN_CHECKS = {
    'true-false': _check_true_false,
    'choice': _check_not_blank,
    'likert': _check_not_blank,
    'fill-in': _check_fill_in,
    'long-fill-in': _check_fill_in,
    'numeric': _check_numeric,
}


#
# Schema
#

def _score():
    return Aggregate({
        'scaled': Field(Real(-1, 1)),
        'raw': Field(Real()),
        'min': Field(Real()),
        'max': Field(Real()),
    }, expose_children=True)


COMMENT_FROM_LEARNER = Aggregate({
    'comment': creatable(Field()),  # localized_string_type
    'location': creatable(Field()),  # characterstring
    'timestamp': creatable(Field(Timestamp())),  # time
})

COMMENT_FROM_LMS = Aggregate({
    'comment': read_only(Field()),
    'location': read_only(Field()),
    'timestamp': read_only(Field(Timestamp())),
})

OBJECTIVE = Aggregate({
    'id': creatable(Field(UniqueIdentifier())),
    'score': _score(),
    'success_status': with_default(Field(Vocabulary(SUCCESS_STATUSES)), 'unknown'),
    'completion_status': with_default(Field(CompletionStatus()), 'unknown'),
    'progress_measure': Field(Real(0, 1)),
    'description': Field(),
})

INTERACTION_OBJECTIVE = Aggregate({
    'id': creatable(Field(UniqueIdentifier())),
})

CORRECT_RESPONSE = Aggregate({
    'pattern': creatable(Field(Pattern())),
})

INTERACTION = Aggregate({
    'id': creatable(Field()),
    'type': Field(Vocabulary(INTERACTION_TYPES)),
    'objectives': Collection(INTERACTION_OBJECTIVE),
    'timestamp': Field(Timestamp()),
    'correct_responses': Collection(CORRECT_RESPONSE),
    'weighting': Field(Real()),
    'learner_response': Field(),
    'result': Field(InteractionResult()),
    'latency': Field(TimeInterval()),
    'description': Field(),
})

CMI = Aggregate({
    '_version': read_only(with_default(Field(), VERSION)),
    'comments_from_learner': Collection(COMMENT_FROM_LEARNER),
    'comments_from_lms': Collection(COMMENT_FROM_LMS),
    'completion_status': with_default(Field(CompletionStatus()), 'unknown'),
    'completion_threshold': read_only(Field(Real(0, 1))),
    'credit': read_only(with_default(Field(Vocabulary(CREDITS)), 'credit')),
    'entry': read_only(with_default(Field(Vocabulary(ENTRIES)), '')),
    'exit': write_only(Field(Vocabulary(EXITS))),
    'interactions': Collection(INTERACTION),
    'launch_data': read_only(Field()),
    'learner_id': read_only(Field()),
    'learner_name': read_only(Field()),
    'location': Field(),
    'max_time_allowed': read_only(Field(TimeInterval())),
    'mode': read_only(with_default(Field(Vocabulary(MODES)), 'normal')),
    'objectives': Collection(OBJECTIVE),
    'progress_measure': Field(Real(0, 1)),
    'scaled_passing_score': read_only(Field(Real(-1, 1))),
    'score': _score(),
    'session_time': Field(TimeInterval()),
    'success_status': with_default(Field(Vocabulary(SUCCESS_STATUSES)), 'unknown'),
    'suspend_data': Field(),
    'time_limit_action': read_only(with_default(Field(Vocabulary(TIME_LIMIT_ACTIONS)), 'continue,no message')),
    'total_time': read_only(with_default(Field(TimeInterval()), 'PT0H0M0S')),
})


def build_cmi(seed=None):
    """Build a CMI tree from an exported snapshot (or an empty one)"""
    return CMI.build(seed)
