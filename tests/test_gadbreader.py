from __future__ import annotations

import logging
import struct

import pytest

from gadb_fixtures import WEAPONS_TABLE, pack_ints, pack_stream, weapons_body, weapons_stream
from gadbtool.formats.gadb import (
    AttributeType,
    AttributeUsage,
    GadbReader,
    InvalidSignatureOrVersion,
    MalformedCount,
    MalformedStringOffset,
    RecordLink,
    StreamExhausted,
    UnrecognizedAttributeType,
    UnrecognizedAttributeUsage,
    read_database,
)


def _single_attribute_stream(value_table: bytes, attribute_type: int, values: bytes, value_count: int, usage: int = 0) -> bytes:
    # value_table must start with "C\0R\0A\0": category @ 0, record @ 2, attribute @ 4
    body = pack_ints(1, 0, 1, 2, 1, 4, attribute_type, usage, value_count) + values
    return pack_stream(value_table, body)


def _single_attribute(value_table: bytes, attribute_type: int, values: bytes, value_count: int):
    database = GadbReader(_single_attribute_stream(value_table, attribute_type, values, value_count)).read()
    return database.categories[0].records[0].attributes[0]


NAMES = b"C\0R\0A\0"


def test_decodes_weapons_database() -> None:
    database = GadbReader(weapons_stream()).read()

    assert len(database.categories) == 1
    category = database.categories[0]
    assert category.name == "Weapons"
    assert category.records[0].name == "Sword"

    attribute = category.records[0].attributes[0]
    assert attribute.name == "Damage"
    assert attribute.attribute_type == AttributeType.Int32
    assert attribute.usage == AttributeUsage.Default
    assert attribute.values == (42,)


def test_header_and_value_table_are_kept() -> None:
    database = GadbReader(weapons_stream()).read()

    assert database.header.signature == b"GADB"
    assert database.header.version == 3
    assert database.header.value_table_length == len(WEAPONS_TABLE)
    assert database.value_table == WEAPONS_TABLE


def test_reserved_sections_are_skipped() -> None:
    reserved = (b"abc", b"", b"\xff" * 5, b"\0")
    database = GadbReader(weapons_stream(reserved_sections=reserved)).read()

    assert database.header.reserved_lengths == (3, 0, 5, 1)
    assert database.reserved_sections == reserved
    assert database.categories[0].records[0].attributes[0].values == (42,)


@pytest.mark.parametrize("signature, version", [(b"GADC", 3), (b"GADB", 2), (b"\0\0\0\0", 0)])
def test_rejects_bad_signature_or_version(signature: bytes, version: int) -> None:
    with pytest.raises(InvalidSignatureOrVersion) as excinfo:
        GadbReader(weapons_stream(signature=signature, version=version)).read()

    assert excinfo.value.signature == signature
    assert excinfo.value.version == version


def test_empty_file_is_exhausted() -> None:
    with pytest.raises(StreamExhausted):
        GadbReader(b"").read()


def test_bool_values() -> None:
    attribute = _single_attribute(NAMES, AttributeType.Bool, pack_ints(0, 1, -5), 3)

    assert attribute.values == (False, True, True)


def test_float_values() -> None:
    attribute = _single_attribute(NAMES, AttributeType.Float, struct.pack("<2f", 1.5, -0.25), 2)

    assert attribute.values == (1.5, -0.25)


def test_struct_values_are_kept_verbatim() -> None:
    attribute = _single_attribute(NAMES, AttributeType.Struct, pack_ints(-123456), 1)

    assert attribute.values == (-123456,)


def test_string_values() -> None:
    table = NAMES + b"short\0long sword\0"
    attribute = _single_attribute(table, AttributeType.String, pack_ints(6, 12, 6), 3)

    assert attribute.values == ("short", "long sword", "short")


def test_wide_string_values() -> None:
    table = NAMES + "ÉpéeĀ".encode("utf-16-le") + b"\0\0"
    attribute = _single_attribute(table, AttributeType.WString, pack_ints(6), 1)

    assert attribute.values == ("ÉpéeĀ",)


@pytest.mark.parametrize(
    "attribute_type, expected",
    [
        (AttributeType.Vector2, (0.0, 1.0, 2.0, 0.0)),
        (AttributeType.Vector3, (0.0, 1.0, 2.0, 3.0)),
        (AttributeType.Vector4, (1.0, 2.0, 3.0, 4.0)),
    ],
)
def test_vector_values_leave_unused_components_zero(attribute_type: AttributeType, expected: tuple) -> None:
    table = NAMES + struct.pack("<4f", 1.0, 2.0, 3.0, 4.0)
    attribute = _single_attribute(table, attribute_type, pack_ints(6), 1)

    vector = attribute.values[0]
    assert vector.attribute_type == attribute_type
    assert (vector.w, vector.x, vector.y, vector.z) == expected


def test_vector_reaching_past_table_fails() -> None:
    table = NAMES + struct.pack("<2f", 1.0, 2.0)

    with pytest.raises(MalformedStringOffset):
        _single_attribute(table, AttributeType.Vector3, pack_ints(6), 1)


def test_record_link_values() -> None:
    values = struct.pack("<hhhh", 2, 1, -1, -1)
    attribute = _single_attribute(NAMES, AttributeType.RecordLink, values, 2)

    assert attribute.values == (RecordLink(2, 1), RecordLink(-1, -1))


@pytest.mark.parametrize("attribute_type", [0, 11, -1, 1000])
def test_rejects_unknown_attribute_type(attribute_type: int) -> None:
    with pytest.raises(UnrecognizedAttributeType) as excinfo:
        _single_attribute(NAMES, attribute_type, pack_ints(0), 1)

    assert excinfo.value.attribute_type == attribute_type


def test_rejects_unknown_attribute_usage() -> None:
    stream = _single_attribute_stream(NAMES, AttributeType.Int32, pack_ints(1), 1, usage=4)

    with pytest.raises(UnrecognizedAttributeUsage):
        GadbReader(stream).read()


def test_usage_is_carried() -> None:
    stream = _single_attribute_stream(NAMES, AttributeType.String, pack_ints(0), 1, usage=int(AttributeUsage.ClientFX))
    attribute = GadbReader(stream).read().categories[0].records[0].attributes[0]

    assert attribute.usage == AttributeUsage.ClientFX


def test_truncated_values_fail_instead_of_returning_partial_list() -> None:
    # Declares three values but only carries one
    stream = _single_attribute_stream(NAMES, AttributeType.Int32, pack_ints(1), 3)

    with pytest.raises(StreamExhausted):
        GadbReader(stream).read()


def test_truncated_value_table_fails() -> None:
    stream = weapons_stream()
    header = stream[:0x1c]

    with pytest.raises(StreamExhausted):
        GadbReader(header + WEAPONS_TABLE[:5]).read()


def test_negative_count_fails() -> None:
    body = pack_ints(1, 0, -2)

    with pytest.raises(MalformedCount):
        GadbReader(pack_stream(WEAPONS_TABLE, body)).read()


def test_bad_name_offset_fails() -> None:
    body = pack_ints(1, 500, 0)

    with pytest.raises(MalformedStringOffset):
        GadbReader(pack_stream(WEAPONS_TABLE, body)).read()


def test_categories_and_records_keep_stream_order() -> None:
    table = b"B\0A\0z\0y\0x\0"
    body = pack_ints(
        2,
        0, 3,    # "B": z, y, x
        4, 0,
        6, 0,
        8, 0,
        2, 1,    # "A": z
        4, 0,
    )
    database = GadbReader(pack_stream(table, body)).read()

    assert [c.name for c in database.categories] == ["B", "A"]
    assert [r.name for r in database.categories[0].records] == ["z", "y", "x"]
    assert [r.name for r in database.categories[1].records] == ["z"]


def test_logs_each_category(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.INFO, logger="gadbtool"):
        GadbReader(weapons_stream()).read()

    assert "[Weapons]..." in caplog.text


def test_trailing_bytes_are_reported(caplog: pytest.LogCaptureFixture) -> None:
    stream = pack_stream(WEAPONS_TABLE, weapons_body() + b"\0\0")

    with caplog.at_level(logging.WARNING, logger="gadbtool"):
        database = GadbReader(stream).read()

    assert database.categories[0].name == "Weapons"
    assert "2 trailing bytes" in caplog.text


def test_read_database_from_file(tmp_path) -> None:
    path = tmp_path / "game.Gamdb00p"
    path.write_bytes(weapons_stream())

    database = read_database(str(path))

    assert database.categories[0].records[0].attributes[0].values == (42,)


def test_header_bytes_are_dumped_at_debug(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.DEBUG, logger="gadbtool"):
        GadbReader(weapons_stream()).read()

    dumps = [r for r in caplog.records if r.getMessage().startswith("47 41 44 42 03 00 00 00")]
    assert len(dumps) == 1
    assert dumps[0].name == "gadbtool.formats.gadb.gadbreader"
    assert dumps[0].levelno == logging.DEBUG
