"""
Store package for the rating prompt service.

Provides the key-value ``Store`` interface the policy persists through,
an in-memory implementation and a Redis-backed one.
"""

from .base import Store, InMemoryStore

__all__ = ["Store", "InMemoryStore"]
