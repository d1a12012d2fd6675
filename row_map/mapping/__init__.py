"""Mapping layer - codec, result reader and record serialization."""

from __future__ import annotations

from row_map.mapping.codec import decode, encode, format_timestamp, parse_timestamp
from row_map.mapping.reader import ReaderState, ResultReader
from row_map.mapping.record import from_json, from_record, load_records, to_json, to_record

__all__ = [
    "encode",
    "decode",
    "format_timestamp",
    "parse_timestamp",
    "ResultReader",
    "ReaderState",
    "to_record",
    "from_record",
    "to_json",
    "from_json",
    "load_records",
]
