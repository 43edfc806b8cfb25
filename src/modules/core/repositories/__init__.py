"""Core repository abstractions."""

from modules.core.repositories.interfaces import IRepository

__all__ = ["IRepository"]
