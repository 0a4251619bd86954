"""
Factory for creating queue publisher instances.
"""

from enum import Enum
from .strategies import QueuePublisher, SqsQueuePublisher, InMemoryQueuePublisher
from visit_counter_app.config import Settings


class QueueBackend(Enum):
    """Available queue backends"""
    SQS = "sqs"
    MEMORY = "memory"


class QueuePublisherFactory:
    """
    Simple factory for creating queue publisher instances.

    Queue resolution happens later, in bootstrap.
    """

    @classmethod
    def create(cls, backend: QueueBackend, settings: Settings) -> QueuePublisher:
        """
        Create a queue publisher.

        Args:
            backend: Type of queue backend (from enum)
            settings: Application settings

        Returns:
            QueuePublisher instance
        """
        if backend == QueueBackend.SQS:
            import boto3

            # Credentials and endpoint come from the default AWS chain
            client = boto3.client("sqs", region_name=settings.aws_region)
            print("✅ SQS queue client initialized")
            return SqsQueuePublisher(client)

        elif backend == QueueBackend.MEMORY:
            print("✅ In-memory queue initialized")
            return InMemoryQueuePublisher()

        raise ValueError(f"Unknown queue backend: {backend}")
