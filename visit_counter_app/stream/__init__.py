"""
Stream module for the visit counter.
Implements Strategy Pattern for flexible stream backends.
"""

from .partitioner import LeastBytesPartitioner
from .strategies import StreamPublisher, KafkaStreamPublisher, InMemoryStreamPublisher
from .factory import StreamPublisherFactory, StreamBackend

__all__ = [
    "LeastBytesPartitioner",
    "StreamPublisher",
    "KafkaStreamPublisher",
    "InMemoryStreamPublisher",
    "StreamPublisherFactory",
    "StreamBackend",
]
