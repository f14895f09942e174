from enum import IntEnum


GADB_MAGIC = b"GADB"
GADB_VERSION = 3

# magic, version, value table length, 4x reserved section lengths
HEADER_FORMAT = "<4s6i"
HEADER_SIZE = 0x1c

RESERVED_SECTION_COUNT = 4

# Every attribute value takes exactly one 32-bit slot in the stream
VALUE_SLOT_SIZE = 4

UNLINKED_INDEX = -1


class AttributeType(IntEnum):
    Invalid = 0
    Bool = 1
    Float = 2
    Int32 = 3
    String = 4
    WString = 5
    Vector2 = 6
    Vector3 = 7
    Vector4 = 8
    RecordLink = 9
    Struct = 10


class AttributeUsage(IntEnum):
    Default = 0
    Filename = 1
    ClientFX = 2
    Animation = 3


# Number of float components stored in the value table for each vector type
VECTOR_COMPONENT_COUNTS = {
    AttributeType.Vector2: 2,
    AttributeType.Vector3: 3,
    AttributeType.Vector4: 4,
}

VECTOR_TYPES = tuple(VECTOR_COMPONENT_COUNTS.keys())
