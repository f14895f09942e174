import logging
import struct

from .constants import *
from .errors import UnrecognizedAttributeType

logger = logging.getLogger(__name__)


class GadbWriter:
    """Encodes a Database back into the binary container format.

    The value table the database was read from is reused as the starting
    point; any string or vector payload already present in it is referenced
    in place and only missing payloads are appended. A database that was read
    and written without changes therefore keeps its value table byte for byte.
    """

    def __init__(self, database):
        self.database = database
        self.value_table = bytearray(database.value_table)
        self.payload_offsets = {}

    def intern(self, payload):
        if payload in self.payload_offsets:
            return self.payload_offsets[payload]

        offset = self.value_table.find(payload)
        if offset == -1:
            offset = len(self.value_table)
            self.value_table += payload
            logger.debug("Appended %d bytes to value table at %08x" % (len(payload), offset))

        self.payload_offsets[payload] = offset

        return offset

    def intern_string(self, value):
        return self.intern(value.encode('utf-8') + b'\0')

    def intern_wide_string(self, value):
        return self.intern(value.encode('utf-16-le') + b'\0\0')

    def intern_vector(self, vector):
        return self.intern(struct.pack("<%df" % len(vector.components), *vector.components))

    def encode_value(self, attribute_type, value):
        if attribute_type == AttributeType.Bool:
            return struct.pack("<i", 1 if value else 0)

        elif attribute_type == AttributeType.Float:
            return struct.pack("<f", value)

        elif attribute_type in (AttributeType.Int32, AttributeType.Struct):
            return struct.pack("<i", value)

        elif attribute_type == AttributeType.String:
            return struct.pack("<i", self.intern_string(value))

        elif attribute_type == AttributeType.WString:
            return struct.pack("<i", self.intern_wide_string(value))

        elif attribute_type in VECTOR_TYPES:
            return struct.pack("<i", self.intern_vector(value))

        elif attribute_type == AttributeType.RecordLink:
            return struct.pack("<hh", value.record_index, value.category_index)

        raise UnrecognizedAttributeType(attribute_type)

    def encode_categories(self):
        output = bytearray()
        output += struct.pack("<i", len(self.database.categories))

        for category in self.database.categories:
            output += struct.pack("<ii", self.intern_string(category.name), len(category.records))

            for record in category.records:
                output += struct.pack("<ii", self.intern_string(record.name), len(record.attributes))

                for attribute in record.attributes:
                    output += struct.pack(
                        "<iiii",
                        self.intern_string(attribute.name),
                        attribute.attribute_type,
                        attribute.usage,
                        len(attribute.values)
                    )

                    for value in attribute.values:
                        output += self.encode_value(attribute.attribute_type, value)

        return output

    def write(self):
        # The body has to be encoded first since it can still grow the value table
        body = self.encode_categories()
        reserved_sections = self.database.reserved_sections

        output = bytearray()
        output += struct.pack(
            HEADER_FORMAT,
            GADB_MAGIC,
            GADB_VERSION,
            len(self.value_table),
            *[len(x) for x in reserved_sections]
        )
        output += self.value_table

        for section in reserved_sections:
            output += section

        output += body

        return bytes(output)


def write_database(database, filename):
    data = GadbWriter(database).write()

    with open(filename, "wb") as outfile:
        outfile.write(data)

    logger.debug("Wrote %d bytes to %s" % (len(data), filename))

    return len(data)
