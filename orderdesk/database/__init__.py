"""
Persistence layer for OrderDesk.
"""

from .codec import decode_record, decode_records, encode_record, encode_records
from .store import MemoryStore, Record, SQLiteStore, Store, create_store

__all__ = [
    "Store",
    "MemoryStore",
    "SQLiteStore",
    "Record",
    "create_store",
    "encode_record",
    "encode_records",
    "decode_record",
    "decode_records",
]
