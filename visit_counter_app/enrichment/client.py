"""
Client for the IP info lookup service.

GET <base>/ip/<address> with the caller's tenant forwarded in the
x-pg-tenant header. The body is decoded as {"ip": ..., "name": ...}.
"""

from typing import Optional
from urllib.parse import quote, urlsplit, urlunsplit
import asyncio

import requests
from pydantic import ValidationError

from visit_counter_app.exceptions import EnrichmentError
from visit_counter_app.queue.models import TENANT_ATTRIBUTE
from visit_counter_app.schemas.count import IpInfo


class HttpEnrichmentClient:
    """
    Blocking requests-based client, called from a worker thread.

    One requests.Session is shared by all requests (connection pooling).
    """

    def __init__(
        self,
        base_address: str,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None
    ):
        """
        Initialize the lookup client.

        Args:
            base_address: Base URL of the lookup service (validated per call)
            session: HTTP session (a new requests.Session by default)
            timeout: Seconds to wait for the lookup (None = no limit)
        """
        self.base_address = base_address
        self.session = session or requests.Session()
        self.timeout = timeout

    def build_url(self, ip: str) -> str:
        """Join ip/<address> onto the base address path"""
        try:
            parts = urlsplit(self.base_address)
        except ValueError as e:
            # unbalanced IPv6 brackets and the like
            raise EnrichmentError(f"malformed base address '{self.base_address}'", e) from e
        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise EnrichmentError(f"malformed base address '{self.base_address}'")

        path = f"{parts.path.rstrip('/')}/ip/{quote(ip, safe=':')}"
        return urlunsplit((parts.scheme, parts.netloc, path, parts.query, parts.fragment))

    def _get(self, url: str, tenant: str) -> IpInfo:
        try:
            response = self.session.get(
                url,
                headers={TENANT_ATTRIBUTE: tenant},
                timeout=self.timeout,
            )
            try:
                return IpInfo.model_validate(response.json())
            finally:
                response.close()
        except (requests.RequestException, ValueError, ValidationError) as e:
            raise EnrichmentError(f"GET {url}", e) from e

    async def lookup(self, ip: str, tenant: Optional[str] = None) -> IpInfo:
        """
        Fetch IP info for a caller.

        The tenant header is always sent; an absent tenant goes out
        as an empty value.

        Raises:
            EnrichmentError: malformed base address, network failure or
                a body that isn't a JSON object
        """
        url = self.build_url(ip)
        return await asyncio.to_thread(self._get, url, tenant or "")

    async def close(self) -> None:
        self.session.close()
