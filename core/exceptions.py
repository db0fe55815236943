"""Error taxonomy shared by the vote store, the tally service and the API."""


class StoreError(Exception):
    """Base class for every failure raised by the vote store."""


class StoreInvalidInputError(StoreError):
    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field
        self.message = message


class StoreBackendError(StoreError):
    """Wraps a failure of the underlying storage engine (I/O, constraint, timeout)."""


class VoteError(Exception):
    """Base class for caller-facing errors of the tally service."""


class InvalidVoteInputError(VoteError):
    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field
        self.message = message


class StorageFailureError(VoteError):
    pass
