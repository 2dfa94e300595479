"""
Declarative record schemas.

A schema lists, for one record class, the ordered fields printed as
``Name: value`` and the child sections rendered beneath them. The traversal in
``render`` is generic; adding a field or a record kind only touches the tables
registered here.
"""
from __future__ import annotations

from dataclasses import dataclass
from operator import attrgetter
from typing import Any, Callable, Dict, Mapping, Optional, Tuple, Union

from .formatting import format_value


class _Index:
    def __repr__(self) -> str:
        return "INDEX"


# source marker: the record's position in its parent collection
INDEX = _Index()

Source = Union[str, Callable[[Any], Any], _Index]


class UnknownRecordError(LookupError):
    """No schema is registered for a record's class."""


def constant(value: Any) -> Callable[[Any], Any]:
    return lambda _record: value


def _getter(source: Source) -> Callable[[Any], Any]:
    if isinstance(source, str):
        return attrgetter(source)
    return source


@dataclass(frozen=True)
class Field:
    name: str
    source: Source
    formatter: Callable[[Any], str] = format_value
    min_version: Optional[int] = None

    def applies(self, version: Optional[int]) -> bool:
        if self.min_version is None:
            return True
        return version is not None and version >= self.min_version

    def render(self, record: Any, index: Optional[int]) -> str:
        if self.source is INDEX:
            value = index
        else:
            value = _getter(self.source)(record)
        return f"{self.name}: {self.formatter(value)}"


@dataclass(frozen=True)
class Collection:
    """Ordered child records. ``title=None`` renders them without a heading."""

    title: Optional[str]
    source: Source

    def value(self, owner: Any):
        return _getter(self.source)(owner)


@dataclass(frozen=True)
class Nested:
    """A single optional sub-structure, skipped entirely when absent."""

    title: str
    source: Source

    def value(self, owner: Any):
        return _getter(self.source)(owner)


Section = Union[Collection, Nested]


@dataclass(frozen=True)
class Schema:
    kind: str
    fields: Tuple[Field, ...] = ()
    sections: Tuple[Section, ...] = ()
    # attribute shown in the "Kind: label" title; None uses the index
    label: Optional[str] = None
    # root schemas: value compared against Field.min_version
    version: Optional[Source] = None

    def title(self, record: Any, index: Optional[int]) -> str:
        label = index if self.label is None else attrgetter(self.label)(record)
        return f"{self.kind}: {label}"

    def version_of(self, record: Any) -> Optional[int]:
        if self.version is None:
            return None
        return _getter(self.version)(record)


SchemaRegistry = Mapping[type, Schema]

SCHEMAS: Dict[type, Schema] = {}


def register_schemas(table: Mapping[type, Schema], registry: Optional[Dict[type, Schema]] = None) -> None:
    target = SCHEMAS if registry is None else registry
    for cls, schema in table.items():
        if cls in target and target[cls] is not schema:
            raise ValueError(f"Schema already registered for {cls.__name__}")
        target[cls] = schema


def schema_for(record: Any, registry: Optional[SchemaRegistry] = None) -> Schema:
    table = SCHEMAS if registry is None else registry
    try:
        return table[type(record)]
    except KeyError:
        raise UnknownRecordError(f"Unrecognized record kind: {type(record).__name__}") from None
