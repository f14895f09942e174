class GadbError(Exception):
    pass


class InvalidSignatureOrVersion(GadbError):
    def __init__(self, signature, version):
        super().__init__("Invalid database signature/version: %r v%d" % (signature, version))
        self.signature = signature
        self.version = version


class StreamExhausted(GadbError):
    def __init__(self, offset, requested, available):
        super().__init__("Read of %d bytes at %08x runs past end of stream (%d bytes left)" % (requested, offset, available))
        self.offset = offset
        self.requested = requested
        self.available = available


class MalformedCount(GadbError):
    pass


class MalformedValueTable(GadbError):
    pass


class MalformedStringOffset(MalformedValueTable):
    def __init__(self, offset, table_length, reason="no terminator found"):
        super().__init__("Bad value table offset %08x (table is %d bytes): %s" % (offset, table_length, reason))
        self.offset = offset
        self.table_length = table_length


class UnrecognizedAttributeType(GadbError):
    def __init__(self, attribute_type):
        super().__init__("Unrecognized attribute type: %d" % attribute_type)
        self.attribute_type = attribute_type


class UnrecognizedAttributeUsage(GadbError):
    def __init__(self, attribute_usage):
        super().__init__("Unrecognized attribute usage: %d" % attribute_usage)
        self.attribute_usage = attribute_usage


class LinkIndexOutOfRange(GadbError):
    def __init__(self, category_index, record_index):
        super().__init__("Record link points outside the database: category %d, record %d" % (category_index, record_index))
        self.category_index = category_index
        self.record_index = record_index
