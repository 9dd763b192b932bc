"""
Client package for leverage-token planning.

Contains the swap venue adapters and the on-chain leverage protocol clients.
"""

from .base_client import BaseHTTPClient

__all__ = [
    "BaseHTTPClient",
]
