"""Errors raised by the event store."""


class DataStoreError(Exception):
    """A query against the event store failed; nothing was retrieved."""
