"""
IP info enrichment for /count responses.
"""

from .client import HttpEnrichmentClient

__all__ = ["HttpEnrichmentClient"]
