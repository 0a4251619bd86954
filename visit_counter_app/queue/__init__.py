"""
Message queue module for the visit counter.
Implements Strategy Pattern for flexible queue backends.
"""

from .strategies import QueuePublisher, SqsQueuePublisher, InMemoryQueuePublisher
from .factory import QueuePublisherFactory, QueueBackend
from .models import VisitEvent, QueuedMessage, tenant_attributes

__all__ = [
    "QueuePublisher",
    "SqsQueuePublisher",
    "InMemoryQueuePublisher",
    "QueuePublisherFactory",
    "QueueBackend",
    "VisitEvent",
    "QueuedMessage",
    "tenant_attributes",
]
