import logging
import struct

import hexdump

from .constants import *
from .errors import *
from .model import Attribute, Category, Database, Header, Record, RecordLink, Vector
from .valuetable import ValueTable

logger = logging.getLogger(__name__)


class GadbReader:
    def __init__(self, data):
        self.data = bytes(data)
        self.cur_offset = 0
        self.header = None
        self.value_table = None
        self.reserved_sections = []

    def _read_bytes(self, length):
        if length < 0 or self.cur_offset + length > len(self.data):
            raise StreamExhausted(self.cur_offset, length, len(self.data) - self.cur_offset)

        chunk = self.data[self.cur_offset:self.cur_offset+length]
        self.cur_offset += length

        return chunk

    def read_int32(self):
        return int.from_bytes(self._read_bytes(4), 'little', signed=True)

    def read_int16(self):
        return int.from_bytes(self._read_bytes(2), 'little', signed=True)

    def read_float(self):
        return struct.unpack("<f", self._read_bytes(4))[0]

    def read_count(self, what):
        count = self.read_int32()

        if count < 0:
            raise MalformedCount("Negative %s count %d at %08x" % (what, count, self.cur_offset - 4))

        return count

    def read_header(self):
        raw = self._read_bytes(HEADER_SIZE)
        logger.debug(hexdump.dump(raw))

        signature, version, value_table_length, *reserved_lengths = struct.unpack(HEADER_FORMAT, raw)
        if signature != GADB_MAGIC or version != GADB_VERSION:
            raise InvalidSignatureOrVersion(signature, version)

        return Header(signature, version, value_table_length, tuple(reserved_lengths))

    def read_value(self, attribute_type):
        """Decode one attribute value of the given type from the stream.

        Every type occupies a single 32-bit slot. Strings and vectors store an
        offset into the value table, everything else is stored inline.
        """

        if attribute_type == AttributeType.Bool:
            return self.read_int32() != 0

        elif attribute_type == AttributeType.Float:
            return self.read_float()

        elif attribute_type in (AttributeType.Int32, AttributeType.Struct):
            return self.read_int32()

        elif attribute_type == AttributeType.String:
            return self.value_table.read_string(self.read_int32())

        elif attribute_type == AttributeType.WString:
            return self.value_table.read_wide_string(self.read_int32())

        elif attribute_type in VECTOR_TYPES:
            components = self.value_table.read_floats(self.read_int32(), VECTOR_COMPONENT_COUNTS[attribute_type])
            return Vector.from_components(attribute_type, components)

        elif attribute_type == AttributeType.RecordLink:
            record_index = self.read_int16()
            category_index = self.read_int16()
            return RecordLink(record_index, category_index)

        raise UnrecognizedAttributeType(attribute_type)

    def read_attribute(self):
        name = self.value_table.read_string(self.read_int32())

        raw_type = self.read_int32()
        raw_usage = self.read_int32()

        try:
            attribute_type = AttributeType(raw_type)
        except ValueError:
            raise UnrecognizedAttributeType(raw_type) from None

        if attribute_type == AttributeType.Invalid:
            raise UnrecognizedAttributeType(raw_type)

        try:
            usage = AttributeUsage(raw_usage)
        except ValueError:
            raise UnrecognizedAttributeUsage(raw_usage) from None

        value_count = self.read_count("value")

        values = [self.read_value(attribute_type) for _ in range(value_count)]

        return Attribute(name, attribute_type, usage, values)

    def read_record(self):
        name = self.value_table.read_string(self.read_int32())
        attribute_count = self.read_count("attribute")

        return Record(name, [self.read_attribute() for _ in range(attribute_count)])

    def read_category(self):
        name = self.value_table.read_string(self.read_int32())
        record_count = self.read_count("record")

        return Category(name, [self.read_record() for _ in range(record_count)])

    def read(self):
        self.cur_offset = 0
        self.header = self.read_header()

        self.value_table = ValueTable(self._read_bytes(self.header.value_table_length))

        # Purpose unknown, carried as-is so the cursor lands on the category list
        self.reserved_sections = [self._read_bytes(length) for length in self.header.reserved_lengths]

        categories = []
        category_count = self.read_count("category")
        for _ in range(category_count):
            category = self.read_category()
            categories.append(category)
            logger.info("[%s]..." % category.name)

        if self.cur_offset != len(self.data):
            logger.warning("%d trailing bytes after category list" % (len(self.data) - self.cur_offset))

        return Database(
            categories,
            header=self.header,
            value_table=self.value_table.data,
            reserved_sections=self.reserved_sections,
        )


def read_database(filename):
    with open(filename, "rb") as infile:
        data = infile.read()

    logger.debug("Read %d bytes from %s" % (len(data), filename))

    return GadbReader(data).read()
