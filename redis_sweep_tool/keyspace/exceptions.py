"""
Custom exceptions for keyspace operations.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""


class KeyspaceError(Exception):
    """Base exception for keyspace operations."""

    pass


class StoreError(KeyspaceError):
    """Redis reported an error or could not be reached."""

    pass


class StoreConnectionError(StoreError):
    """Redis endpoint is unreachable or timed out."""

    pass


class StoreAuthenticationError(StoreError):
    """Redis rejected the credentials."""

    pass


class StoreCommandError(StoreError):
    """Redis rejected a command (e.g. WRONGTYPE, unknown command)."""

    pass


class OperationCancelledError(KeyspaceError):
    """Operation was cancelled before it completed."""

    def __init__(self, message: str = "operation cancelled"):
        super().__init__(message)


class UserAbortedError(KeyspaceError):
    """Operator declined a confirmation prompt."""

    def __init__(self, message: str = "user aborted"):
        super().__init__(message)


class InvalidArgumentError(KeyspaceError):
    """Operator input is invalid."""

    pass
