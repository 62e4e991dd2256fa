"""In-memory keyed record collections."""

from .collection import Collection
from .events import CollectionEvent, Events
from .index_table import IndexTable, is_blank, resolve_field
from .options import SetOptions
from .record import Record
from .sequence_ops import SequenceOps
