"""Domain exceptions."""


class SquawkerError(Exception):
    """Base exception for squawker errors."""


class ValidationError(SquawkerError):
    """Raised when a payload or store request is missing or has bad fields."""


class PersistenceError(SquawkerError):
    """Raised when a store write fails.

    Attributes:
        uri: The content URI the failed request was addressed to.
    """

    def __init__(self, message: str, uri: str) -> None:
        super().__init__(message)
        self.uri = uri


class UnsupportedRequestError(SquawkerError):
    """Raised when a store request is addressed to an unknown URI."""

    def __init__(self, uri: str) -> None:
        super().__init__(f"Unknown uri: {uri}")
        self.uri = uri


class TopicTransportError(SquawkerError):
    """Raised when a topic subscribe/unsubscribe call fails."""

    def __init__(self, message: str, topic: str) -> None:
        super().__init__(message)
        self.topic = topic
