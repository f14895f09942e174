import logging

from .constants import UNLINKED_INDEX
from .errors import LinkIndexOutOfRange

logger = logging.getLogger(__name__)


def resolve_record_link(database, category_index, record_index):
    """Map a (category, record) index pair to "Category/Record".

    Returns None for an unset link (-1 in either slot). Links may point at
    categories that come later in the file, so this must only be called on
    a fully read database.
    """

    if category_index == UNLINKED_INDEX or record_index == UNLINKED_INDEX:
        return None

    if not 0 <= category_index < len(database.categories):
        raise LinkIndexOutOfRange(category_index, record_index)

    category = database.categories[category_index]
    if not 0 <= record_index < len(category.records):
        raise LinkIndexOutOfRange(category_index, record_index)

    return category.name + "/" + category.records[record_index].name


def resolve_link(database, link):
    return resolve_record_link(database, link.category_index, link.record_index)


def check_links(database):
    """Resolve every record link up front so a bad index fails before any output is written."""

    link_count = 0

    for category, record, attribute, link in database.iter_record_links():
        try:
            resolve_link(database, link)
        except LinkIndexOutOfRange:
            logger.error("Bad link in %s/%s, attribute %s" % (category.name, record.name, attribute.name))
            raise

        link_count += 1

    logger.debug("Checked %d record links" % link_count)

    return link_count
