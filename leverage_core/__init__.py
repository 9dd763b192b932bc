"""
Core package for leverage-token mint/redeem planning.

Submodules are imported lazily by callers; importing the package itself does
not touch settings, logging, or the network.
"""

__all__ = [
    "settings",
    "log",
]
