"""
Tests for queue and stream publishers.
"""

import asyncio

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError
from kafka.errors import KafkaTimeoutError

from visit_counter_app.exceptions import QueuePublishError, StartupError, StreamPublishError
from visit_counter_app.queue.models import VisitEvent, tenant_attributes
from visit_counter_app.queue.strategies import InMemoryQueuePublisher, SqsQueuePublisher
from visit_counter_app.stream.partitioner import LeastBytesPartitioner
from visit_counter_app.stream.strategies import InMemoryStreamPublisher, KafkaStreamPublisher


QUEUE_URL = "https://sqs.eu-west-1.amazonaws.com/123456789012/visits"


class FakeSqs:
    def __init__(self, send_error: Exception = None, resolve_error: Exception = None):
        self.send_error = send_error
        self.resolve_error = resolve_error
        self.sent = []

    def get_queue_url(self, QueueName):
        if self.resolve_error:
            raise self.resolve_error
        return {"QueueUrl": f"https://sqs.eu-west-1.amazonaws.com/123456789012/{QueueName}"}

    def send_message(self, **kwargs):
        if self.send_error:
            raise self.send_error
        self.sent.append(kwargs)
        return {"MessageId": f"msg-{len(self.sent)}"}


class FakeFuture:
    def __init__(self, error: Exception = None):
        self.error = error
        self.timeout = None

    def get(self, timeout=None):
        self.timeout = timeout
        if self.error:
            raise self.error


class FakeProducer:
    def __init__(self, partitions=(0, 1, 2), error: Exception = None):
        self.partitions = set(partitions)
        self.error = error
        self.sent = []
        self.closed = False

    def partitions_for(self, topic):
        return self.partitions

    def send(self, topic, value=None, partition=None):
        self.sent.append((topic, value, partition))
        return FakeFuture(self.error)

    def close(self):
        self.closed = True


class TestVisitEvent:
    def test_payload_is_compact_json(self):
        assert VisitEvent(ip="1.2.3.4").to_payload() == b'{"ip":"1.2.3.4"}'

    def test_tenant_attributes(self):
        assert tenant_attributes("t1") == {"x-pg-tenant": "t1"}
        assert tenant_attributes(None) is None
        assert tenant_attributes("") is None


class TestSqsQueuePublisher:
    """Test the SQS publisher against a fake boto3 client"""

    def test_resolve(self):
        publisher = SqsQueuePublisher(FakeSqs())
        assert asyncio.run(publisher.resolve("visits")) == QUEUE_URL

    def test_resolve_failure_is_startup_error(self):
        error = ClientError(
            {"Error": {"Code": "AWS.SimpleQueueService.NonExistentQueue", "Message": "no queue"}},
            "GetQueueUrl",
        )
        publisher = SqsQueuePublisher(FakeSqs(resolve_error=error))

        with pytest.raises(StartupError):
            asyncio.run(publisher.resolve("visits"))

    def test_publish_with_tenant(self):
        sqs = FakeSqs()
        publisher = SqsQueuePublisher(sqs)

        message_id = asyncio.run(
            publisher.publish(QUEUE_URL, b'{"ip":"1.2.3.4"}', {"x-pg-tenant": "t1"})
        )

        assert message_id == "msg-1"
        assert sqs.sent == [{
            "QueueUrl": QUEUE_URL,
            "MessageBody": '{"ip":"1.2.3.4"}',
            "MessageAttributes": {
                "x-pg-tenant": {"DataType": "String", "StringValue": "t1"},
            },
        }]

    def test_publish_without_attributes(self):
        sqs = FakeSqs()
        asyncio.run(SqsQueuePublisher(sqs).publish(QUEUE_URL, b'{"ip":"1.2.3.4"}'))
        assert "MessageAttributes" not in sqs.sent[0]

    def test_publish_failure(self):
        publisher = SqsQueuePublisher(
            FakeSqs(send_error=EndpointConnectionError(endpoint_url="https://sqs.invalid"))
        )

        with pytest.raises(QueuePublishError) as exc_info:
            asyncio.run(publisher.publish(QUEUE_URL, b"{}"))
        assert exc_info.value.destination == QUEUE_URL


class TestInMemoryQueuePublisher:
    def test_publish_and_inspect(self):
        queue = InMemoryQueuePublisher()
        destination = asyncio.run(queue.resolve("visits"))

        message_id = asyncio.run(queue.publish(destination, b'{"ip":"1.2.3.4"}', {"x-pg-tenant": "t1"}))

        [message] = queue.messages(destination)
        assert message.message_id == message_id
        assert message.body == '{"ip":"1.2.3.4"}'
        assert message.attributes == {"x-pg-tenant": "t1"}

    def test_unresolved_destination(self):
        with pytest.raises(QueuePublishError):
            asyncio.run(InMemoryQueuePublisher().publish("memory://nowhere", b"{}"))


class TestLeastBytesPartitioner:
    """Test least-bytes partition assignment"""

    def test_ties_go_to_lowest_partition(self):
        partitioner = LeastBytesPartitioner()
        assert partitioner.pick({2, 0, 1}, 10) == 0

    def test_spreads_equal_messages(self):
        partitioner = LeastBytesPartitioner()
        picks = [partitioner.pick([0, 1, 2], 10) for _ in range(6)]
        assert picks == [0, 1, 2, 0, 1, 2]

    def test_prefers_partition_with_fewest_bytes(self):
        partitioner = LeastBytesPartitioner()
        partitioner.pick([0, 1], 100)   # -> 0
        partitioner.pick([0, 1], 10)    # -> 1
        assert partitioner.pick([0, 1], 10) == 1
        assert partitioner.bytes_written(0) == 100
        assert partitioner.bytes_written(1) == 20

    def test_no_partitions(self):
        with pytest.raises(ValueError):
            LeastBytesPartitioner().pick([], 10)


class TestKafkaStreamPublisher:
    """Test the Kafka publisher against a fake producer"""

    def test_publish_without_key_across_partitions(self):
        producer = FakeProducer()
        publisher = KafkaStreamPublisher(producer)

        for _ in range(3):
            asyncio.run(publisher.publish("visits", b'{"ip":"1.2.3.4"}'))

        assert [partition for _, _, partition in producer.sent] == [0, 1, 2]
        assert all(value == b'{"ip":"1.2.3.4"}' for _, value, _ in producer.sent)

    def test_publish_failure(self):
        publisher = KafkaStreamPublisher(FakeProducer(error=KafkaTimeoutError("no ack")))

        with pytest.raises(StreamPublishError) as exc_info:
            asyncio.run(publisher.publish("visits", b"{}"))
        assert exc_info.value.topic == "visits"

    def test_topic_without_partitions(self):
        publisher = KafkaStreamPublisher(FakeProducer(partitions=()))

        with pytest.raises(StreamPublishError):
            asyncio.run(publisher.publish("visits", b"{}"))

    def test_close(self):
        producer = FakeProducer()
        asyncio.run(KafkaStreamPublisher(producer).close())
        assert producer.closed is True


class TestInMemoryStreamPublisher:
    def test_messages_spread_over_partitions(self):
        stream = InMemoryStreamPublisher(partitions=2)

        asyncio.run(stream.publish("visits", b"a"))
        asyncio.run(stream.publish("visits", b"b"))
        asyncio.run(stream.publish("visits", b"c"))

        assert stream.partition("visits", 0) == [b"a", b"c"]
        assert stream.partition("visits", 1) == [b"b"]
        assert sorted(stream.messages("visits")) == [b"a", b"b", b"c"]
        assert stream.messages("other") == []
