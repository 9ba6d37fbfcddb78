"""
SCORM CMI composite elements
Aggregates (records with fixed children) and collections (indexed lists of records)
"""
import logging
import re

from .elements import BoundElement, ElementContext, constant
from .errors import OutOfBoundError, ScormSeedError, TargetNotCreatableError

logger = logging.getLogger(__name__)

INDEX_PATTERN = re.compile(r'^-?[0-9]+$')


def _seed_error(error, prefix):
    element = f"{prefix}.{error.element}" if error.element else str(prefix)
    return ScormSeedError(str(error), element=element)


class Aggregate:
    """
    Schema of a record: an ordered mapping from child name to child schema

    Args:
        children: dict of name -> Field / Aggregate / Collection
        expose_children: answer `_children` with the child names (e.g. cmi.score)
    """

    def __init__(self, children, expose_children=False):
        self.children = dict(children)
        self.expose_children = expose_children

    @property
    def child_names(self):
        return list(self.children)

    def build(self, value=None):
        value = value or {}
        if not isinstance(value, dict):
            raise ScormSeedError(f"Expected a record, got {value!r}.")
        unknown = set(value) - set(self.children)
        if unknown:
            logger.debug(f"Ignoring unknown seed keys: {sorted(unknown)}")

        nodes = {}
        for name, schema in self.children.items():
            try:
                nodes[name] = schema.build(value.get(name))
            except ScormSeedError as e:
                raise _seed_error(e, name) from e
        return AggregateNode(self, nodes)


class AggregateNode:
    """A record of the CMI tree; owns its child nodes"""

    def __init__(self, schema, children):
        self.schema = schema
        self.children = children

    def child(self, name):
        return self.children.get(name)

    def access(self, path, write, context=None):
        context = context or ElementContext()
        if not path:
            return self

        name, rest = path[0], path[1:]
        if name == '_children' and self.schema.expose_children and not rest:
            return BoundElement(constant(','.join(self.schema.child_names)), context.child(self))

        node = self.children.get(name)
        if node is None:
            return None
        return node.access(rest, write, context.child(self))

    def export(self):
        return {name: node.export() for name, node in self.children.items()}


class Collection:
    """Schema of a growing list of records sharing the `item` schema"""

    def __init__(self, item):
        self.item = item

    def build(self, value=None):
        if value is not None and not isinstance(value, (list, tuple)):
            raise ScormSeedError(f"Expected a list, got {value!r}.")
        items = []
        for index, item_value in enumerate(value or []):
            try:
                items.append(self.item.build(item_value))
            except ScormSeedError as e:
                raise _seed_error(e, index) from e
        return CollectionNode(self, items)


class CollectionNode:
    """
    A list of records of the CMI tree

    Items are only ever appended. A write to the index right after the last
    item creates a new item, but only through a creatable child of that item,
    and the item is kept only if the written value is accepted.

    Creation goes through direct children only: a creatable leaf deeper in
    the item (e.g. interactions.n.objectives.m.id) does not create it, so
    the item's own id has to be written first.
    """

    def __init__(self, schema, items):
        self.schema = schema
        self.items = items

    def __len__(self):
        return len(self.items)

    def access(self, path, write, context=None):
        context = context or ElementContext()
        if not path:
            return self

        name, rest = path[0], path[1:]
        own_context = context.child(self)

        if name == '_count':
            return None if rest else BoundElement(constant(str(len(self.items))), own_context)
        if name == '_children':
            return None if rest else BoundElement(constant(','.join(self.schema.item.child_names)), own_context)
        if not INDEX_PATTERN.match(name):
            return None

        index = int(name)
        if 0 <= index < len(self.items):
            return self.items[index].access(rest, write, own_context)

        if write and index == len(self.items):
            return self._create(rest, own_context)

        raise OutOfBoundError(f"Index {index} is out of bounds (count {len(self.items)}).")

    def _create(self, path, context):
        item = self.schema.item.build()
        target = item.access(path, True, context)
        if target is None:
            return None
        if len(path) != 1 or not isinstance(target, BoundElement) or not target.creatable:
            raise TargetNotCreatableError(f"{'.'.join(path)} cannot create a new item.")

        def commit():
            self.items.append(item)

        target.pending = commit
        return target

    def export(self):
        return [item.export() for item in self.items]
