import struct

from .errors import MalformedStringOffset


class ValueTable:
    """Shared byte table holding every string and vector payload of a database.

    Everything else in the stream refers into it by byte offset. Strings are
    null terminated: a single zero byte for UTF-8 strings and a zero code unit
    (two bytes, aligned to the start offset) for UTF-16 strings.
    """

    def __init__(self, data):
        self.data = bytes(data)

    def __len__(self):
        return len(self.data)

    def _check_offset(self, offset):
        if offset < 0 or offset >= len(self.data):
            raise MalformedStringOffset(offset, len(self.data), "offset outside of table")

    def read_string(self, offset):
        self._check_offset(offset)

        end = self.data.find(b'\0', offset)
        if end == -1:
            raise MalformedStringOffset(offset, len(self.data))

        # Undecodable bytes become U+FFFD rather than failing the whole database
        return self.data[offset:end].decode('utf-8', errors='replace')

    def read_wide_string(self, offset):
        self._check_offset(offset)

        end = offset
        while end + 1 < len(self.data):
            if self.data[end] == 0 and self.data[end+1] == 0:
                return self.data[offset:end].decode('utf-16-le', errors='replace')

            end += 2

        raise MalformedStringOffset(offset, len(self.data))

    def read_floats(self, offset, count):
        self._check_offset(offset)

        if offset + count * 4 > len(self.data):
            raise MalformedStringOffset(offset, len(self.data), "%d floats run past end of table" % count)

        return struct.unpack_from("<%df" % count, self.data, offset)
