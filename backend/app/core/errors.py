"""
Service-layer error types.
"""


class BackendFetchError(Exception):
    """
    The storage backend failed a read.

    The backend's message is passed through to the caller verbatim; nothing
    is retried.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
