"""
Core Models Package

Immutable data models that serve as the single source of truth for the
editor, layout engine and export pipeline.

All models in this package are frozen dataclasses. Stores never mutate a
model in place: every change builds a new value and swaps it into the latest
state by id, so handlers holding an older reference cannot clobber newer
edits.
"""

from .crop import CropInsets
from .elements import Element, ElementDraft, ElementKind, NO_FILTER
from .pages import Document, Page, Visibility

__all__ = [
    "CropInsets",
    "Element",
    "ElementDraft",
    "ElementKind",
    "NO_FILTER",
    "Document",
    "Page",
    "Visibility",
]
