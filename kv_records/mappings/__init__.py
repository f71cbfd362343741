"""Mapping facades over the record store."""

from .records import RecordMapping


__all__ = ["RecordMapping"]
