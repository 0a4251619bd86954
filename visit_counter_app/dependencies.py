"""
FastAPI dependencies for dependency injection.

The AppContext built at startup lives on app.state; everything a
route needs is derived from it here, so routes never touch globals
and tests can swap the whole context.
"""

from typing import Optional
import ipaddress

from fastapi import Depends, Request

from visit_counter_app.bootstrap import AppContext
from visit_counter_app.queue.models import TENANT_ATTRIBUTE
from visit_counter_app.schemas.count import VisitContext
from visit_counter_app.services.count_service import CountService


def get_context(request: Request) -> AppContext:
    """AppContext attached to the app by the lifespan handler"""
    return request.app.state.context


def _valid_address(value: str) -> bool:
    try:
        ipaddress.ip_address(value)
    except ValueError:
        return False
    return True


def _header_address(value: str) -> Optional[str]:
    """
    Client entry of a proxy header, or None when the header can't be used.

    Every proxy is trusted, so the chain is read right to left and the
    leftmost entry is the client. One unparseable entry discards the
    whole header.
    """
    if not value:
        return None
    hops = [hop.strip() for hop in value.split(",")]
    for hop in reversed(hops):
        if not _valid_address(hop):
            return None
    return hops[0]


def resolve_client_ip(request: Request, trust_forwarded_headers: bool = True) -> str:
    """
    Caller address.

    With trusted proxy headers: client entry of X-Forwarded-For, then
    X-Real-IP, then the socket peer. Headers holding anything but IP
    addresses are skipped.
    """
    if trust_forwarded_headers:
        for header in ("x-forwarded-for", "x-real-ip"):
            address = _header_address(request.headers.get(header, ""))
            if address:
                return address

    return request.client.host if request.client else ""


def get_visit(request: Request, context: AppContext = Depends(get_context)) -> VisitContext:
    """Caller address and tenant tag (None when the header is missing or empty)"""
    tenant: Optional[str] = request.headers.get(TENANT_ATTRIBUTE) or None
    return VisitContext(
        ip=resolve_client_ip(request, context.settings.trust_forwarded_headers),
        tenant=tenant,
    )


def get_count_service(context: AppContext = Depends(get_context)) -> CountService:
    """
    Get CountService with all dependencies injected from the AppContext.
    """
    settings = context.settings
    return CountService(
        counter_store=context.counter_store,
        queue=context.queue,
        queue_destination=context.queue_destination,
        stream=context.stream,
        stream_topic=settings.kafka_topic,
        enrichment=context.enrichment,
        response_text=context.response_text,
        key_prefix=settings.counter_key_prefix,
        ttl=settings.counter_ttl_seconds,
    )
