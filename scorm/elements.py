"""
SCORM CMI leaf elements
Value types, schema fields with their access modifiers, and the leaf nodes of the CMI tree
"""
import copy
import logging
from decimal import Decimal, InvalidOperation

from dateutil import parser as date_parser
from django.utils.dateparse import parse_duration

from .errors import (
    ReadOnlyError,
    ScormDataModelError,
    ScormSeedError,
    TypeMismatchError,
    ValueNotInitializedError,
    ValueOutOfRangeError,
    WriteOnlyError,
)

logger = logging.getLogger(__name__)


class ElementContext:
    """
    Ancestors of a node, root first

    Built while a path is resolved and handed to the leaf so cross-field rules
    can look at siblings. It never owns the nodes it points to.
    """

    def __init__(self, lineage=()):
        self.lineage = tuple(lineage)

    def child(self, node):
        return ElementContext(self.lineage + (node,))

    @property
    def root(self):
        return self.lineage[0] if self.lineage else None

    @property
    def parent(self):
        return self.ancestor(1)

    def ancestor(self, level):
        """Return the node `level` steps up (1 is the parent), or None"""
        if level < 1 or level > len(self.lineage):
            return None
        return self.lineage[-level]


#
# Value types
#

class CharacterString:
    """Any string; the base value type"""

    # Seed values of eager types are validated when the tree is built
    eager = False

    def validate(self, value, context):
        pass

    def derive(self, value, context):
        return value


class Timestamp(CharacterString):
    """ISO 8601 date or date-time, down to the year (YYYY[-MM[-DD[Thh[:mm[:ss[.s]]]]]][TZD])"""

    def validate(self, value, context):
        try:
            date_parser.isoparse(value)
        except (ValueError, OverflowError):
            raise TypeMismatchError(f"{value} is an invalid date.")


class TimeInterval(CharacterString):
    """ISO 8601 duration (P[yY][mM][dD][T[hH][nM][s[.s]S]])"""

    def validate(self, value, context):
        if not value.startswith('P') or value in ('P', 'PT') or value.endswith('T'):
            raise TypeMismatchError(f"{value} is an invalid time interval.")
        if parse_duration(value) is None and not _parse_calendar_duration(value):
            raise TypeMismatchError(f"{value} is an invalid time interval.")


def _parse_calendar_duration(value):
    # parse_duration has no years/months; accept them when the rest is well formed
    date_part, _, time_part = value[1:].partition('T')
    for unit in ('Y', 'M', 'D'):
        number, found, date_part = date_part.partition(unit)
        if not found:
            date_part = number
            continue
        if not number.isdigit():
            return False
    if date_part:
        return False
    return not time_part or parse_duration(f"PT{time_part}") is not None


class Vocabulary(CharacterString):
    """One of a fixed set of tokens"""

    eager = True

    def __init__(self, values):
        self.values = tuple(values)

    def validate(self, value, context):
        if value not in self.values:
            raise TypeMismatchError(
                f"{value} is not one of the valid values: {', '.join(self.values)}"
            )


class Real(CharacterString):
    """Decimal number, optionally bounded (inclusive)"""

    eager = True

    def __init__(self, minimum=None, maximum=None):
        self.minimum = None if minimum is None else Decimal(minimum)
        self.maximum = None if maximum is None else Decimal(maximum)

    def validate(self, value, context):
        number = to_decimal(value)
        if number is None:
            raise TypeMismatchError(f"{value} is not a number.")
        if self.minimum is not None and number < self.minimum:
            raise ValueOutOfRangeError(f"{value} is lower than {self.minimum}.")
        if self.maximum is not None and number > self.maximum:
            raise ValueOutOfRangeError(f"{value} is greater than {self.maximum}.")


def to_decimal(value):
    """Parse a real number string, None if it is not a finite number"""
    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not number.is_finite():
        return None
    return number


#
# Schema fields
#

class Field:
    """
    Schema entry for a leaf element

    Capabilities are plain flags chosen when the schema is declared; the
    modifiers below return adjusted copies so one field can be reused.
    """

    def __init__(self, value_type=None, readable=True, writable=True,
                 creatable=False, default=None, eager=None):
        self.value_type = value_type or CharacterString()
        self.readable = readable
        self.writable = writable
        self.creatable = creatable
        self.default = default
        self.eager = self.value_type.eager if eager is None else eager

    def replace(self, **changes):
        field = copy.copy(self)
        for name, value in changes.items():
            setattr(field, name, value)
        return field

    def build(self, value=None):
        if value is None:
            return Element(self, self.default)
        if self.eager:
            self.check_seed(value)
        return Element(self, value)

    def check_seed(self, value):
        try:
            self.value_type.validate(value, None)
        except ScormDataModelError as e:
            raise ScormSeedError(str(e)) from e


def read_only(field):
    return field.replace(writable=False)


def write_only(field):
    return field.replace(readable=False)


def creatable(field):
    """Writing this field on a missing collection item creates the item"""
    return field.replace(creatable=True)


def with_default(field, default):
    return field.replace(default=default)


#
# Tree leaves
#

class Element:
    """A leaf of the CMI tree holding an optional value"""

    def __init__(self, field, value=None):
        self.field = field
        self.value = value

    @property
    def creatable(self):
        return self.field.creatable

    def get_value(self, context):
        if not self.field.readable:
            raise WriteOnlyError()
        value = self.field.value_type.derive(self.value, context)
        if value is None:
            raise ValueNotInitializedError()
        return value

    def set_value(self, value, context):
        if not self.field.writable:
            raise ReadOnlyError()
        self.field.value_type.validate(value, context)
        self.value = value

    def access(self, path, write, context):
        if path:
            return None
        return BoundElement(self, context)

    def export(self):
        return self.value


class BoundElement:
    """
    A resolved leaf together with the context it was reached through

    `pending` holds the commit of a collection item created for this write;
    it runs only once the value has been accepted.
    """

    def __init__(self, element, context, pending=None):
        self.element = element
        self.context = context
        self.pending = pending

    @property
    def creatable(self):
        return self.element.creatable

    def get_value(self):
        return self.element.get_value(self.context)

    def set_value(self, value):
        self.element.set_value(value, self.context)
        if self.pending is not None:
            self.pending()
            self.pending = None
            logger.debug("Created collection item for accepted value")

    def export(self):
        return self.element.export()


def constant(value):
    """A synthetic read-only leaf, used for _count and _children"""
    return Element(read_only(Field()), value)
