"""
Startup wiring.

Builds every long-lived client once and bundles them in an AppContext
that is handed to request handlers through FastAPI dependencies.
Any failure here is fatal: the server must not start half-wired.
"""

from contextlib import AsyncExitStack
from dataclasses import dataclass
from pathlib import Path

from botocore.exceptions import BotoCoreError
from kafka.errors import KafkaError

from visit_counter_app.cache.factory import CounterBackend, CounterStoreFactory
from visit_counter_app.cache.strategies import CounterStore
from visit_counter_app.config import Settings
from visit_counter_app.enrichment.client import HttpEnrichmentClient
from visit_counter_app.exceptions import StartupError, VisitCounterError
from visit_counter_app.queue.factory import QueueBackend, QueuePublisherFactory
from visit_counter_app.queue.strategies import QueuePublisher
from visit_counter_app.stream.factory import StreamBackend, StreamPublisherFactory
from visit_counter_app.stream.strategies import StreamPublisher


@dataclass
class AppContext:
    """Shared, read-only dependencies of the request handler"""
    settings: Settings
    counter_store: CounterStore
    queue: QueuePublisher
    queue_destination: str
    stream: StreamPublisher
    enrichment: HttpEnrichmentClient
    response_text: str

    async def close(self) -> None:
        await self.counter_store.close()
        await self.queue.close()
        await self.stream.close()
        await self.enrichment.close()


def load_response_text(path: str) -> str:
    """
    Read the static response file as stored on disk.

    Bytes that aren't valid UTF-8 become U+FFFD instead of failing startup.
    """
    try:
        return Path(path).read_bytes().decode("utf-8", errors="replace")
    except OSError as e:
        raise StartupError("response file", f"{path}: {e}") from e


async def build_context(settings: Settings) -> AppContext:
    """
    Prepare all dependencies in order.

    1. Load the response text
    2. Connect to the counter store and ping it
    3. Resolve the queue name to its address
    4. Create the stream producer
    5. Create the enrichment client (base address is checked per request)

    Clients built before a failing step are closed before the error propagates.
    """
    response_text = load_response_text(settings.response_file)

    async with AsyncExitStack() as built:
        try:
            counter_store = CounterStoreFactory.create(CounterBackend(settings.cache_backend), settings)
            built.push_async_callback(counter_store.close)
            queue = QueuePublisherFactory.create(QueueBackend(settings.queue_backend), settings)
            built.push_async_callback(queue.close)
        except ValueError as e:
            raise StartupError("config", str(e)) from e
        except BotoCoreError as e:
            # NoRegionError when no AWS region is configured
            raise StartupError("queue", str(e)) from e

        try:
            await counter_store.ping()
        except VisitCounterError as e:
            raise StartupError("counter store", str(e)) from e

        queue_destination = await queue.resolve(settings.sqs_queue_name)
        print(f"✅ Queue resolved: {queue_destination}")

        try:
            stream = StreamPublisherFactory.create(StreamBackend(settings.stream_backend), settings)
        except ValueError as e:
            raise StartupError("config", str(e)) from e
        except KafkaError as e:
            # NoBrokersAvailable when no bootstrap server answers
            raise StartupError("stream", str(e)) from e

        enrichment = HttpEnrichmentClient(
            settings.ip_info_address,
            timeout=settings.lookup_timeout_seconds,
        )

        # fully wired: ownership moves to the AppContext
        built.pop_all()

    return AppContext(
        settings=settings,
        counter_store=counter_store,
        queue=queue,
        queue_destination=queue_destination,
        stream=stream,
        enrichment=enrichment,
        response_text=response_text,
    )
