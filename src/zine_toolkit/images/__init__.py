"""
Images Package

Image source loading, colour filter presets and format conversion for
image elements.
"""

from .provider import CachingImageLoader, ImageLoader, decode_data_uri, open_image_bytes
from .filters import FILTERS, apply_filter, available_filters
from .conversion import (
    BackgroundRemover,
    ConversionReport,
    Upload,
    convert_document_images,
    prepare_uploads,
    solid_color_data_uri,
    to_webp_data_uri,
)

__all__ = [
    "ImageLoader",
    "CachingImageLoader",
    "decode_data_uri",
    "open_image_bytes",
    "FILTERS",
    "apply_filter",
    "available_filters",
    "BackgroundRemover",
    "ConversionReport",
    "Upload",
    "convert_document_images",
    "prepare_uploads",
    "solid_color_data_uri",
    "to_webp_data_uri",
]
