"""
Factory for creating stream publisher instances.
"""

from enum import Enum
from .strategies import StreamPublisher, KafkaStreamPublisher, InMemoryStreamPublisher
from visit_counter_app.config import Settings


class StreamBackend(Enum):
    """Available stream backends"""
    KAFKA = "kafka"
    MEMORY = "memory"


class StreamPublisherFactory:
    """
    Simple factory for creating stream publisher instances.
    """

    @classmethod
    def create(cls, backend: StreamBackend, settings: Settings) -> StreamPublisher:
        """
        Create a stream publisher.

        Args:
            backend: Type of stream backend (from enum)
            settings: Application settings

        Returns:
            StreamPublisher instance
        """
        if backend == StreamBackend.KAFKA:
            from kafka import KafkaProducer

            # Connects to the bootstrap servers; raises NoBrokersAvailable if none answer
            producer = KafkaProducer(
                bootstrap_servers=settings.kafka_address,
                client_id=settings.app_name.lower().replace(" ", "-"),
            )
            print(f"✅ Kafka producer initialized ({settings.kafka_address})")
            return KafkaStreamPublisher(producer)

        elif backend == StreamBackend.MEMORY:
            print("✅ In-memory stream initialized")
            return InMemoryStreamPublisher()

        raise ValueError(f"Unknown stream backend: {backend}")
