import configparser
import logging
import os
import uuid

import numpy as np

from .formats.gadb import VECTOR_TYPES, AttributeType, resolve_link

logger = logging.getLogger(__name__)


UNLINKED_TEXT = "<none>"

TYPE_NAMES = {
    AttributeType.Bool: "Boolean",
    AttributeType.Float: "Float",
    AttributeType.Int32: "Integer",
    AttributeType.String: "Text",
    AttributeType.WString: "Text",
    AttributeType.Vector2: "Vector2",
    AttributeType.Vector3: "Vector3",
    AttributeType.Vector4: "Vector4",
    AttributeType.RecordLink: "RecordLink",
    AttributeType.Struct: "Float",  # Struct contents aren't known, the editor gets a placeholder
}


def new_ini():
    config = configparser.ConfigParser(interpolation=None)
    config.optionxform = str  # Keys are case sensitive
    return config


def save_ini(config, filename):
    with open(filename, "w", encoding="utf-16", newline="\r\n") as outfile:
        config.write(outfile, space_around_delimiters=False)


def format_float(value):
    # Shortest text that reads back as the same single precision value. Exponent
    # form once the integer part needs more than max(7, significant digits) digits
    # or below 1e-4, the way the editor writes floats.
    value = np.float32(value)
    if value == 0 or not np.isfinite(value):
        return np.format_float_positional(value, trim='-')

    text = np.format_float_scientific(value, trim='-', exp_digits=2)
    mantissa, exponent = text.split('e')
    digits = sum(1 for x in mantissa if x.isdigit())
    exponent = int(exponent)
    if exponent >= max(7, digits) or exponent < -4:
        return text.upper()

    return np.format_float_positional(value, trim='-')


def format_value(database, attribute_type, value):
    """Render one attribute value as record file text.

    Returns None for values that have no text form (struct placeholders).
    """

    if attribute_type == AttributeType.Bool:
        return "True" if value else "False"

    elif attribute_type == AttributeType.Float:
        return format_float(value)

    elif attribute_type == AttributeType.Int32:
        return str(value)

    elif attribute_type in (AttributeType.String, AttributeType.WString):
        return value

    elif attribute_type in VECTOR_TYPES:
        return str(value)

    elif attribute_type == AttributeType.RecordLink:
        target = resolve_link(database, value)
        return target if target is not None else UNLINKED_TEXT

    return None


def get_schema_name(category):
    return category.name.replace('/', '.')


def build_project_ini(database, name):
    config = new_ini()
    config["General"] = {
        "Name": name,
        "Build": name + ".Gamdb00p",
        "Base": "..\\",
        "Game": "..\\..\\" + name + ".exe",
        "GameServer": "..\\GameServer.dll",
        "StringDatabase": "..\\StringDatabase\\" + name + ".Strdb00p",
        "Version": str(database.header.version),
        "Database": "{" + str(uuid.uuid4()).upper() + "}",
    }
    return config


def build_category_ini(category):
    config = new_ini()
    config["Category"] = {
        "Schema": get_schema_name(category) if category.records else "",
        "Comment": "",
        "Help": "",
        "System": "False",
    }
    return config


def build_schema_ini(category):
    config = new_ini()
    config["Schema"] = {
        "Name": get_schema_name(category),
        "Help": "",
        "Parent": "",
    }

    # Records of a category share one schema, later records overwrite the value counts
    for record in category.records:
        for attribute in record.attributes:
            config["Attrib.%s.0" % attribute.name] = {
                "Type": TYPE_NAMES[attribute.attribute_type],
                "Data": "",
                "Default": "",
                "Unicode": "True" if attribute.attribute_type == AttributeType.WString else "False",
                "Deleted": "False",
                "Inherit": "True",
                "Values": str(len(attribute.values)),
                "Help": "",
            }

    return config


def build_record_ini(database, category, record):
    config = new_ini()
    config["Record"] = {
        "Schema": get_schema_name(category),
        "Name": record.name,
        "Comment": "",
        "VirtualRelativeCategory": "",
    }

    for attribute in record.attributes:
        section = {
            "Inherit": "False",
            "PlaceHolder": "False",
            "Todo": "False",
            "Modified": "False",
            "Override": "False",
            "Lock": "",
            "Comment": "",
        }

        for i, value in enumerate(attribute.values):
            text = format_value(database, attribute.attribute_type, value)

            if text is not None:
                section["Value.%04d" % i] = text

        config["Attrib.%s" % attribute.name] = section

    return config


def export_database(database, database_path, output_folder=None, force_overwrite=False):
    """Write a decoded database out as a tree of editable text files.

    Creates <name>.Gamdb00s in the output folder plus one folder per category
    holding gdb.category, the category's .schema and one .record per record.
    Category folders that already exist are skipped unless force_overwrite is set.
    """

    name = os.path.splitext(os.path.basename(database_path))[0]
    if output_folder is None:
        output_folder = os.path.dirname(os.path.abspath(database_path))

    os.makedirs(output_folder, exist_ok=True)
    save_ini(build_project_ini(database, name), os.path.join(output_folder, name + ".Gamdb00s"))

    # Only folders from an earlier run count, nested categories create their parents as they go
    category_folders = [os.path.join(output_folder, *category.name.split('/')) for category in database.categories]
    existing_folders = {x for x in category_folders if os.path.exists(x)}

    exported = []
    for category, category_folder in zip(database.categories, category_folders):
        if not force_overwrite and category_folder in existing_folders:
            logger.info("Folder already exists, skipping... %s" % category_folder)
            continue

        os.makedirs(category_folder, exist_ok=True)
        save_ini(build_category_ini(category), os.path.join(category_folder, "gdb.category"))

        if category.records:
            for record in category.records:
                save_ini(build_record_ini(database, category, record), os.path.join(category_folder, record.name + ".record"))

            schema_filename = category.name.split('/')[-1] + ".schema"
            save_ini(build_schema_ini(category), os.path.join(category_folder, schema_filename))

        logger.debug("Exported %s (%d records)" % (category.name, len(category.records)))
        exported.append(category.name)

    return exported
