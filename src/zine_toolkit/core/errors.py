"""
Module: core.errors

Purpose:
    Error taxonomy shared by every layer of the toolkit. Editor boundaries
    catch these and log; nothing here is process-fatal.

Key Classes:
    - ZineError: Base class
    - ValidationError: Malformed geometry or crop
    - PersistenceError: Backend read/write failure
    - DecodeError: Image failed to load or convert
    - ResourceError: Rendering context missing
"""

from __future__ import annotations


class ZineError(Exception):
    """Base class for all toolkit errors."""
    pass


class ValidationError(ZineError, ValueError):
    """Malformed geometry, crop or configuration value."""
    pass


class PersistenceError(ZineError):
    """Persistence collaborator failed to read or write."""
    pass


class DecodeError(ZineError):
    """Image source could not be loaded, decoded or converted."""
    pass


class ResourceError(ZineError):
    """A resource needed for rendering (e.g. the raster context) is missing."""
    pass


__all__ = [
    "ZineError",
    "ValidationError",
    "PersistenceError",
    "DecodeError",
    "ResourceError",
]
