"""Fungible balance books."""
from .memory import InMemoryToken

__all__ = ["InMemoryToken"]
