"""
Database models for the golink registry.

Only the durable backend uses these; the in-memory backend stores
Golink entities directly.
"""

from .golink import GolinkRecord

__all__ = ["GolinkRecord"]
