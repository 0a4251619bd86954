"""
Custom exceptions for the visit counter.

Every failure the service knows about derives from VisitCounterError.
StartupError aborts the process while it boots; the others are
request-scoped and are all reported to the caller as the same
generic 500 response.
"""


class VisitCounterError(Exception):
    """Base exception for the visit counter service."""
    pass


class StartupError(VisitCounterError):
    """Raised when a dependency can't be prepared before serving."""

    def __init__(self, component: str, reason: str):
        self.component = component
        self.reason = reason
        super().__init__(f"{component} startup failed: {reason}")


class CounterStoreError(VisitCounterError):
    """Raised when the counter cache rejects or can't run a command."""

    def __init__(self, message: str, original_error: Exception = None):
        self.original_error = original_error
        super().__init__(f"Counter store error: {message}")


class QueuePublishError(VisitCounterError):
    """Raised when a visit event can't be sent to the queue."""

    def __init__(self, destination: str, original_error: Exception = None):
        self.destination = destination
        self.original_error = original_error
        super().__init__(f"Queue publish to '{destination}' failed: {original_error}")


class StreamPublishError(VisitCounterError):
    """Raised when a visit event can't be appended to the stream."""

    def __init__(self, topic: str, original_error: Exception = None):
        self.topic = topic
        self.original_error = original_error
        super().__init__(f"Stream publish to '{topic}' failed: {original_error}")


class EnrichmentError(VisitCounterError):
    """Raised when the IP info lookup can't produce a result."""

    def __init__(self, message: str, original_error: Exception = None):
        self.original_error = original_error
        super().__init__(f"Enrichment lookup failed: {message}")
