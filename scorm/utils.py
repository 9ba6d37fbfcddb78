"""
SCORM Utility Functions
Helpers shared by the run-time API and its persistence collaborators
"""
import logging
import re
from datetime import timedelta
from typing import Dict, Optional

from django.utils.dateparse import parse_duration

logger = logging.getLogger(__name__)

DELIMITER_PATTERN = re.compile(r'^\{([A-Za-z_][\w\-]*)=([^{}]*)\}')

# Provided by the LMS, carried into every following session
LMS_ELEMENTS = (
    'objectives',
    'comments_from_lms',
    'completion_threshold',
    'credit',
    'mode',
    'learner_id',
    'learner_name',
    'launch_data',
    'max_time_allowed',
    'scaled_passing_score',
    'time_limit_action',
)

# Reported by the content, carried only when the attempt is resumed
ATTEMPT_ELEMENTS = (
    'location',
    'suspend_data',
    'comments_from_learner',
    'completion_status',
    'success_status',
    'progress_measure',
    'score',
)


def parse_character_string(value: str) -> Dict:
    """
    Split the leading {name=value} delimiters from a characterstring

    Args:
        value: e.g. "{lang=es}{case_matters=true}Texto"

    Returns:
        {'str': 'Texto', 'delimiters': {'lang': 'es', 'case_matters': 'true'}}
    """
    delimiters = {}
    rest = value
    while True:
        match = DELIMITER_PATTERN.match(rest)
        if not match:
            break
        delimiters[match.group(1)] = match.group(2)
        rest = rest[match.end():]
    return {'str': rest, 'delimiters': delimiters}


def initial_entry_value(cmi: Optional[Dict], suspend_all: bool = False) -> str:
    """cmi.entry for a new session given the snapshot of the previous one"""
    if not cmi:
        return 'ab-initio'
    if cmi.get('exit') == 'suspend':
        return 'resume'
    if cmi.get('exit') == 'logout':
        return 'ab-initio'
    if suspend_all:
        return 'resume'
    return ''


def format_time_interval(duration: timedelta) -> str:
    """Format a timedelta as an ISO 8601 duration (PT#H#M#S)"""
    total = duration.total_seconds()
    hours = int(total // 3600)
    minutes = int((total % 3600) // 60)
    seconds = round(total % 60, 2)
    if seconds == int(seconds):
        seconds = int(seconds)
    return f"PT{hours}H{minutes}M{seconds}S"


def accumulate_total_time(total_time: Optional[str], session_time: Optional[str]) -> Optional[str]:
    """
    Add the session time of a finished session to the learner's total time

    Returns the previous total unchanged when the session time cannot be parsed.
    """
    session = parse_duration(session_time) if session_time else None
    if session is None:
        if session_time:
            logger.warning(f"Cannot add session time '{session_time}' to total time")
        return total_time

    total = parse_duration(total_time) if total_time else timedelta(0)
    if total is None:
        logger.warning(f"Cannot parse total time '{total_time}', restarting from the session time")
        total = timedelta(0)
    return format_time_interval(total + session)


def seed_from_history(cmi: Optional[Dict], suspend_all: bool = False) -> Dict:
    """
    Build the seed snapshot of a new session from the last stored snapshot

    Args:
        cmi: exported snapshot of the previous session, or None
        suspend_all: the player suspended every SCO when it was closed

    Returns:
        Seed dict for ScormAPIHandler
    """
    seed = {'entry': initial_entry_value(cmi, suspend_all)}
    if not cmi:
        return seed

    resume = seed['entry'] == 'resume'
    names = LMS_ELEMENTS + ATTEMPT_ELEMENTS if resume else LMS_ELEMENTS
    for name in names:
        if cmi.get(name) is not None:
            seed[name] = cmi[name]

    # A new attempt starts its total time from zero
    if resume:
        total_time = accumulate_total_time(cmi.get('total_time'), cmi.get('session_time'))
        if total_time is not None:
            seed['total_time'] = total_time
    return seed
