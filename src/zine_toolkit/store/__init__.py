"""
Module: store

Purpose:
    Persistence collaborator for documents, pages and elements. The editor
    treats the backend as an opaque async CRUD store; this package defines
    that interface and ships two local implementations.

Key Classes:
    - ZineRepository: Abstract async CRUD interface
    - InMemoryRepository: Dict-backed implementation
    - JsonFileRepository: In-memory store persisted to a JSON file
"""

from .repository import ZineRepository, element_changes_record
from .memory import InMemoryRepository
from .json_store import JsonFileRepository

__all__ = [
    "ZineRepository",
    "InMemoryRepository",
    "JsonFileRepository",
    "element_changes_record",
]
