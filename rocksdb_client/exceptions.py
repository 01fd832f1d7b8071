class StoreClientError(Exception):
    """Base class for every error raised by the client."""


class InvalidArgument(StoreClientError, ValueError):
    """Raised before any I/O when a call is given unusable arguments."""


class CommunicationFailure(StoreClientError):
    """The request could not be sent or its response could not be read."""


class ApplicationError(StoreClientError):
    """The server answered, but with a failure code."""

    def __init__(self, code, message=None):
        self.code = code
        self.message = message
        super().__init__(f"code: {code}, message: {message}")
