from .constants import *
from .errors import *
from .model import Attribute, Category, Database, Header, Record, RecordLink, Vector
from .valuetable import ValueTable
from .gadbreader import GadbReader, read_database
from .gadbwriter import GadbWriter, write_database
from .links import check_links, resolve_link, resolve_record_link
