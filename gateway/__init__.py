"""
CBS Middleware Gateway

Reverse proxy in front of the CBS simulator that adds request timing,
correlation ids, health and process metrics.
"""

__version__ = "1.0.0"
