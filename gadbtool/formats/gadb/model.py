from dataclasses import dataclass, field
from typing import Tuple

from .constants import *


@dataclass(frozen=True)
class Header:
    signature: bytes = GADB_MAGIC
    version: int = GADB_VERSION
    value_table_length: int = 0
    reserved_lengths: Tuple[int, ...] = (0,) * RESERVED_SECTION_COUNT


@dataclass(frozen=True)
class Vector:
    attribute_type: AttributeType
    w: float = 0.0
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    @classmethod
    def from_components(cls, attribute_type, components):
        # Vector4 is stored w, x, y, z; the smaller vectors start at x
        if attribute_type == AttributeType.Vector4:
            return cls(attribute_type, *components)

        return cls(attribute_type, 0.0, *components)

    @property
    def components(self):
        if self.attribute_type == AttributeType.Vector2:
            return (self.x, self.y)

        elif self.attribute_type == AttributeType.Vector3:
            return (self.x, self.y, self.z)

        return (self.w, self.x, self.y, self.z)

    def __str__(self):
        values = list(self.components) + [0.0] * (4 - len(self.components))
        return ", ".join("%.6f" % c for c in values)


@dataclass(frozen=True)
class RecordLink:
    record_index: int = UNLINKED_INDEX
    category_index: int = UNLINKED_INDEX

    @property
    def is_linked(self):
        return self.record_index != UNLINKED_INDEX and self.category_index != UNLINKED_INDEX


def _value_matches(attribute_type, value):
    if attribute_type == AttributeType.Bool:
        return isinstance(value, bool)

    elif attribute_type == AttributeType.Float:
        return isinstance(value, float)

    elif attribute_type in (AttributeType.Int32, AttributeType.Struct):
        return isinstance(value, int) and not isinstance(value, bool)

    elif attribute_type in (AttributeType.String, AttributeType.WString):
        return isinstance(value, str)

    elif attribute_type in VECTOR_TYPES:
        return isinstance(value, Vector) and value.attribute_type == attribute_type

    elif attribute_type == AttributeType.RecordLink:
        return isinstance(value, RecordLink)

    return False


@dataclass(frozen=True)
class Attribute:
    name: str
    attribute_type: AttributeType
    usage: AttributeUsage = AttributeUsage.Default
    values: tuple = ()

    def __post_init__(self):
        object.__setattr__(self, 'values', tuple(self.values))

        for value in self.values:
            if not _value_matches(self.attribute_type, value):
                raise TypeError("Attribute %s of type %s can't hold %r" % (self.name, self.attribute_type.name, value))


@dataclass(frozen=True)
class Record:
    name: str
    attributes: Tuple[Attribute, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, 'attributes', tuple(self.attributes))


@dataclass(frozen=True)
class Category:
    name: str
    records: Tuple[Record, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, 'records', tuple(self.records))


@dataclass(frozen=True)
class Database:
    """A fully decoded game database.

    Categories and records are addressed by position, which is what record
    links refer to. The value table and reserved sections are kept as read
    so the database can be written back out unchanged.
    """
    categories: Tuple[Category, ...] = ()
    header: Header = field(default_factory=Header)
    value_table: bytes = b""
    reserved_sections: Tuple[bytes, ...] = (b"",) * RESERVED_SECTION_COUNT

    def __post_init__(self):
        object.__setattr__(self, 'categories', tuple(self.categories))
        object.__setattr__(self, 'reserved_sections', tuple(self.reserved_sections))

    def iter_record_links(self):
        for category in self.categories:
            for record in category.records:
                for attribute in record.attributes:
                    if attribute.attribute_type != AttributeType.RecordLink:
                        continue

                    for value in attribute.values:
                        yield category, record, attribute, value
