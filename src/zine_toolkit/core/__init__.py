"""
Core Package

Data models and the error taxonomy shared by the editor, layout and output
packages.
"""

from .errors import (
    DecodeError,
    PersistenceError,
    ResourceError,
    ValidationError,
    ZineError,
)
from .models import (
    CropInsets,
    Document,
    Element,
    ElementDraft,
    ElementKind,
    Page,
    Visibility,
)

__all__ = [
    "ZineError",
    "ValidationError",
    "PersistenceError",
    "DecodeError",
    "ResourceError",
    "CropInsets",
    "Document",
    "Element",
    "ElementDraft",
    "ElementKind",
    "Page",
    "Visibility",
]
