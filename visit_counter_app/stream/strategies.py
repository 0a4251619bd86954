"""
Stream strategies using Strategy Pattern.
Allows switching between different stream backends (Kafka, In-Memory).
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional
import asyncio

from kafka.errors import KafkaError

from visit_counter_app.exceptions import StreamPublishError
from .partitioner import LeastBytesPartitioner


class StreamPublisher(ABC):
    """
    Abstract base class for append-only, partitioned stream publishers.
    """

    @abstractmethod
    async def publish(self, topic: str, payload: bytes) -> None:
        """
        Append one message to a topic.

        Args:
            topic: Topic name
            payload: Message value

        Raises:
            StreamPublishError: if the message wasn't acknowledged
        """
        pass

    async def close(self) -> None:
        """Flush and release connections held by the publisher"""
        return None


class KafkaStreamPublisher(StreamPublisher):
    """
    Kafka implementation backed by kafka-python's KafkaProducer.

    The producer is thread safe and shared by every request. Each publish
    blocks until the broker acknowledges, so it runs in a worker thread.
    """

    def __init__(
        self,
        producer,
        partitioner: Optional[LeastBytesPartitioner] = None,
        send_timeout: Optional[float] = None
    ):
        """
        Initialize Kafka publisher.

        Args:
            producer: kafka.KafkaProducer instance
            partitioner: Partition picker (least bytes by default)
            send_timeout: Seconds to wait for the acknowledgement (None = producer default)
        """
        self.producer = producer
        self.partitioner = partitioner or LeastBytesPartitioner()
        self.send_timeout = send_timeout

    def _send(self, topic: str, payload: bytes) -> None:
        partitions = self.producer.partitions_for(topic)
        partition = self.partitioner.pick(partitions or [], len(payload))
        future = self.producer.send(topic, value=payload, partition=partition)
        future.get(timeout=self.send_timeout)

    async def publish(self, topic: str, payload: bytes) -> None:
        try:
            await asyncio.to_thread(self._send, topic, payload)
        except (KafkaError, ValueError) as e:
            raise StreamPublishError(topic, e) from e

    async def close(self) -> None:
        await asyncio.to_thread(self.producer.close)


class InMemoryStreamPublisher(StreamPublisher):
    """
    In-memory stream implementation: one list per partition.

    Uses the same least-bytes assignment as the Kafka backend.
    Used in development/testing environments.
    """

    def __init__(self, partitions: int = 1):
        """
        Initialize in-memory topics.

        Args:
            partitions: Number of partitions created for every topic
        """
        self.partition_count = partitions
        self.partitioner = LeastBytesPartitioner()
        self._topics: Dict[str, List[List[bytes]]] = {}

    async def publish(self, topic: str, payload: bytes) -> None:
        log = self._topics.setdefault(topic, [[] for _ in range(self.partition_count)])
        partition = self.partitioner.pick(range(self.partition_count), len(payload))
        log[partition].append(payload)

    def messages(self, topic: str) -> List[bytes]:
        """All messages of a topic, partition by partition"""
        return [message for partition in self._topics.get(topic, []) for message in partition]

    def partition(self, topic: str, partition: int) -> List[bytes]:
        log = self._topics.get(topic)
        if log is None:
            return []
        return list(log[partition])
