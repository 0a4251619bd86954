from .count_service import CountService, GREETING_SUFFIX

__all__ = ["CountService", "GREETING_SUFFIX"]
