from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class VisitContext(BaseModel):
    """Who is visiting: resolved once per request"""
    ip: str
    tenant: Optional[str] = None


class IpInfo(BaseModel):
    """Enrichment result returned by the IP info service

    On the wire the info text is called "name", both in the lookup
    response and in our own /count response.
    """
    ip: str = ""
    info: str = Field("", alias="name")

    model_config = ConfigDict(populate_by_name=True)


class CountResponse(BaseModel):
    count: int
    text: str
    info: IpInfo


class ErrorResponse(BaseModel):
    error: str = "Internal server error"
