"""
Queue strategies using Strategy Pattern.
Allows switching between different queue backends (SQS, In-Memory).
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional
import asyncio
import uuid

from botocore.exceptions import BotoCoreError, ClientError

from visit_counter_app.exceptions import QueuePublishError, StartupError
from .models import QueuedMessage


class QueuePublisher(ABC):
    """
    Abstract base class for point-to-point queue publishers.

    Queues are addressed by a destination resolved once at startup
    from a logical queue name.
    """

    @abstractmethod
    async def resolve(self, queue_name: str) -> str:
        """
        Resolve a logical queue name to the address used for publishing.

        Args:
            queue_name: Name of the queue

        Returns:
            Destination address

        Raises:
            StartupError: if the queue can't be resolved
        """
        pass

    @abstractmethod
    async def publish(
        self,
        destination: str,
        payload: bytes,
        attributes: Optional[Dict[str, str]] = None
    ) -> str:
        """
        Publish one message to the queue.

        Args:
            destination: Address returned by resolve()
            payload: Message body
            attributes: String message attributes (e.g. tenant tag)

        Returns:
            Message ID assigned by the queue

        Raises:
            QueuePublishError: if the queue rejects the message
        """
        pass

    async def close(self) -> None:
        """Release connections held by the publisher"""
        return None


class SqsQueuePublisher(QueuePublisher):
    """
    AWS SQS implementation.

    boto3 clients are thread safe and blocking, so every call
    runs in a worker thread to keep the event loop free.
    """

    def __init__(self, sqs_client):
        """
        Initialize SQS publisher.

        Args:
            sqs_client: boto3 SQS client
        """
        self.sqs = sqs_client

    async def resolve(self, queue_name: str) -> str:
        try:
            response = await asyncio.to_thread(self.sqs.get_queue_url, QueueName=queue_name)
        except (BotoCoreError, ClientError) as e:
            raise StartupError("sqs", f"unable to get queue URL for '{queue_name}': {e}") from e
        return response["QueueUrl"]

    async def publish(
        self,
        destination: str,
        payload: bytes,
        attributes: Optional[Dict[str, str]] = None
    ) -> str:
        request = {
            "QueueUrl": destination,
            "MessageBody": payload.decode("utf-8"),
        }
        if attributes:
            request["MessageAttributes"] = {
                name: {"DataType": "String", "StringValue": value}
                for name, value in attributes.items()
            }

        try:
            response = await asyncio.to_thread(self.sqs.send_message, **request)
        except (BotoCoreError, ClientError) as e:
            raise QueuePublishError(destination, e) from e

        message_id = response["MessageId"]
        print(f"Message sent, ID: {message_id}")
        return message_id

    async def close(self) -> None:
        self.sqs.close()


class InMemoryQueuePublisher(QueuePublisher):
    """
    In-memory queue implementation using Python lists.

    Keeps every published message so tests and local runs can inspect them.
    Used in development/testing environments.
    """

    def __init__(self):
        """Initialize in-memory queues"""
        self._queues: Dict[str, List[QueuedMessage]] = {}

    async def resolve(self, queue_name: str) -> str:
        destination = f"memory://{queue_name}"
        self._queues.setdefault(destination, [])
        return destination

    async def publish(
        self,
        destination: str,
        payload: bytes,
        attributes: Optional[Dict[str, str]] = None
    ) -> str:
        if destination not in self._queues:
            raise QueuePublishError(destination, LookupError("queue does not exist"))

        message = QueuedMessage(
            message_id=str(uuid.uuid4()),
            destination=destination,
            body=payload.decode("utf-8"),
            attributes=dict(attributes) if attributes else None,
        )
        self._queues[destination].append(message)
        return message.message_id

    def messages(self, destination: str) -> List[QueuedMessage]:
        """Messages published to a destination, oldest first"""
        return list(self._queues.get(destination, []))
