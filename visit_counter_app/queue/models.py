"""
Data models for queue and stream messages.
"""

from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


TENANT_ATTRIBUTE = "x-pg-tenant"


class VisitEvent(BaseModel):
    """
    Event model for a counted visit.

    Serialized once per request and sent to both the queue and the stream.
    """

    ip: str = Field(..., description="Client IP address")

    model_config = ConfigDict(json_schema_extra={"example": {"ip": "192.168.1.1"}})

    def to_payload(self) -> bytes:
        """Compact JSON body, e.g. b'{"ip":"192.168.1.1"}'"""
        return self.model_dump_json().encode("utf-8")


class QueuedMessage(BaseModel):
    """A message as accepted by a queue backend"""

    message_id: str
    destination: str
    body: str
    attributes: Optional[Dict[str, str]] = None


def tenant_attributes(tenant: Optional[str]) -> Optional[Dict[str, str]]:
    """Message attributes for a visit; None when the caller sent no tenant"""
    if not tenant:
        return None
    return {TENANT_ATTRIBUTE: tenant}
