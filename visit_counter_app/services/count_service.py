from visit_counter_app.cache.strategies import CounterStore
from visit_counter_app.enrichment.client import HttpEnrichmentClient
from visit_counter_app.queue.models import VisitEvent, tenant_attributes
from visit_counter_app.queue.strategies import QueuePublisher
from visit_counter_app.schemas.count import CountResponse, VisitContext
from visit_counter_app.stream.strategies import StreamPublisher


GREETING_SUFFIX = "hi from"


class CountService:
    """
    Counts a visit and fans it out.

    Every dependency is injected; the service keeps no state of its own.
    Steps run one after another and the first failure propagates.
    Nothing is compensated: a visit that fails after the increment
    stays counted (at-least-counted, not exactly-once).
    """

    def __init__(
        self,
        counter_store: CounterStore,
        queue: QueuePublisher,
        queue_destination: str,
        stream: StreamPublisher,
        stream_topic: str,
        enrichment: HttpEnrichmentClient,
        response_text: str,
        key_prefix: str = "ip-visit-counter-",
        ttl: int = 120
    ):
        self.counter_store = counter_store
        self.queue = queue
        self.queue_destination = queue_destination
        self.stream = stream
        self.stream_topic = stream_topic
        self.enrichment = enrichment
        self.response_text = response_text
        self.key_prefix = key_prefix
        self.ttl = ttl

    def counter_key(self, ip: str) -> str:
        return f"{self.key_prefix}{ip}"

    async def count_visit(self, visit: VisitContext) -> int:
        """Increment the caller's counter and refresh its TTL"""
        key = self.counter_key(visit.ip)
        count = await self.counter_store.increment(key)
        await self.counter_store.expire(key, self.ttl)
        return count

    async def record_visit(self, visit: VisitContext) -> CountResponse:
        """
        Handle one /count request.

        Flow:
        1. Increment counter for the caller's address, refresh TTL
        2. Publish VisitEvent to the queue (tenant attribute if present)
        3. Publish the same payload to the stream
        4. Look up IP info (tenant forwarded as header)
        5. Build the response

        Raises:
            VisitCounterError subclasses from whichever step failed
        """
        count = await self.count_visit(visit)

        # Serialized once, sent twice
        payload = VisitEvent(ip=visit.ip).to_payload()
        await self.queue.publish(self.queue_destination, payload, tenant_attributes(visit.tenant))
        await self.stream.publish(self.stream_topic, payload)

        info = await self.enrichment.lookup(visit.ip, visit.tenant)

        return CountResponse(
            count=count,
            text=self.response_text + GREETING_SUFFIX,
            info=info,
        )
