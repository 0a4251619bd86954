"""
IP visit counter: counts visits per client address and fans each
visit out to a queue and a stream before enriching the response.
"""

__version__ = "1.0.0"
