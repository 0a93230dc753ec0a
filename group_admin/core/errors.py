"""
Exceptions shared by the gateway services and the HTTP layer
"""


class DocumentStoreError(Exception):
    """A database operation failed inside a gateway handler.

    The message is returned to the caller as the ``details`` field of the
    500 envelope.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


def describe_exception(exc: Exception) -> str:
    """Best human-readable message for a database exception (postgrest APIError carries .message)"""
    message = getattr(exc, "message", None)
    if isinstance(message, str) and message:
        return message
    return str(exc) or "Unknown error occurred"
