class StoreError(Exception):
    """Raised when the relational store cannot complete an operation."""


class DuplicateRecordError(StoreError):
    """Raised when an insert or update violates a uniqueness constraint."""
