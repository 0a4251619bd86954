from .count import VisitContext, IpInfo, CountResponse, ErrorResponse

__all__ = ["VisitContext", "IpInfo", "CountResponse", "ErrorResponse"]
