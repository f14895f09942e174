import argparse
import logging
import os
import sys

from .formats.gadb import GadbError, InvalidSignatureOrVersion, check_links, read_database
from .gdbexport import export_database

logger = logging.getLogger("gadbtool")


def setup_logging(loglevel, log_output=None):
    log_formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(message)s")
    logger.setLevel(loglevel)

    # main() can run more than once per process
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    stream_logger = logging.StreamHandler()
    stream_logger.setFormatter(log_formatter)
    logger.addHandler(stream_logger)

    if log_output is not None:
        file_logger = logging.FileHandler(log_output)
        file_logger.setFormatter(log_formatter)
        logger.addHandler(file_logger)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Extract a GADB game database into editable text files")
    parser.add_argument('input', help='Input database file')
    parser.add_argument('-o', '--output', help='Output folder (defaults to the folder of the input file)', default=None)
    parser.add_argument('-f', '--force-overwrite', help='Overwrite category folders that already exist', default=False, action="store_true")
    parser.add_argument('-v', '--verbose', help="Print lots of debugging statements",
                        action="store_const", dest="loglevel", const=logging.DEBUG, default=logging.INFO)
    parser.add_argument('-l', '--log-output', help="Save log to specified output file", default=None)

    args = parser.parse_args(argv)

    setup_logging(args.loglevel, args.log_output)

    if not os.path.isfile(args.input):
        logger.error("%s File not found." % args.input)
        return 1

    try:
        database = read_database(args.input)

    except InvalidSignatureOrVersion as e:
        logger.debug(e)
        logger.error("Invalid database file.")
        return 1

    except GadbError as e:
        logger.error("Failed to read database: %s" % e)
        return 1

    logger.info("Database opened successfully. Converting...")

    try:
        check_links(database)

    except GadbError as e:
        logger.error("Failed to convert database: %s" % e)
        return 1

    try:
        export_database(database, args.input, args.output, args.force_overwrite)

    except OSError as e:
        logger.error("Failed to save database: %s" % e)
        return 1

    logger.info("Database successfully saved.")

    return 0


if __name__ == "__main__":
    sys.exit(main())
