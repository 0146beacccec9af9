"""Interfaces (ports) for simpdb.

Abstract contracts implemented by adapters: the record identity contract,
codecs, record mappers and table storages.
"""

from .entity import Identifiable
from .storage import Codec, Payload, RecordMapper, Storage

__all__ = ["Identifiable", "Codec", "Payload", "RecordMapper", "Storage"]
