"""
Module: images.conversion

Purpose:
    Image format conversion for element content. Uploads and stored images
    are normalised to WebP data URIs; solid colours become PNG data URIs
    for background elements. Background removal is a pluggable collaborator.

Key Classes:
    - Upload: Raw uploaded file
    - BackgroundRemover: Collaborator protocol
    - ConversionReport: Outcome counts of a bulk conversion

Key Functions:
    - to_webp_data_uri(): Encode an image as a WebP data URI
    - prepare_uploads(): Decode and convert uploads, skipping bad files
    - solid_color_data_uri(): Single-colour PNG data URI
    - convert_document_images(): Bulk WebP migration of a document

Dependencies:
    - PIL: Encoding
    - images.provider: Decoding
    - store.repository: Bulk conversion

Used By:
    - layout.autolayout: Upload preparation
    - editor.elements: Background colour, background removal
"""

from __future__ import annotations

import base64
import io
import logging
from dataclasses import dataclass
from typing import Iterable, List, Protocol, Tuple

from PIL import Image, ImageColor

from zine_toolkit.core.errors import DecodeError, PersistenceError
from zine_toolkit.store.repository import ZineRepository

from .provider import decode_data_uri, open_image_bytes

logger = logging.getLogger(__name__)

WEBP_PREFIX = "data:image/webp"
DEFAULT_WEBP_QUALITY = 80


@dataclass(frozen=True)
class Upload:
    """A raw uploaded file."""

    name: str
    data: bytes


class BackgroundRemover(Protocol):
    """Returns the image with its background made transparent."""

    async def remove_background(self, image: Image.Image) -> Image.Image: ...


@dataclass(frozen=True)
class ConversionReport:
    total: int = 0
    converted: int = 0
    errors: int = 0


def encode_data_uri(data: bytes, mime: str) -> str:
    return f"data:{mime};base64,{base64.b64encode(data).decode('ascii')}"


def to_webp_data_uri(image: Image.Image, quality: int = DEFAULT_WEBP_QUALITY) -> str:
    """
    Encode an image as a lossy WebP data URI.

    Raises:
        DecodeError: If the image cannot be encoded
    """
    buffer = io.BytesIO()
    try:
        image.save(buffer, format="WEBP", quality=quality)
    except (OSError, ValueError) as e:
        raise DecodeError(f"WebP encoding failed: {e}") from e
    return encode_data_uri(buffer.getvalue(), "image/webp")


def to_png_data_uri(image: Image.Image) -> str:
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return encode_data_uri(buffer.getvalue(), "image/png")


def convert_to_webp(source_uri: str, quality: int = DEFAULT_WEBP_QUALITY) -> str:
    """Re-encode a data URI as WebP."""
    data, _ = decode_data_uri(source_uri)
    return to_webp_data_uri(open_image_bytes(data), quality)


def prepare_uploads(
    uploads: Iterable[Upload],
    quality: int = DEFAULT_WEBP_QUALITY,
) -> Tuple[List[str], List[str]]:
    """
    Decode uploads and convert each to a WebP data URI.

    Undecodable files are skipped and logged; the rest keep their order.

    Returns:
        (data_uris, skipped_names)
    """
    uris: List[str] = []
    skipped: List[str] = []
    for upload in uploads:
        try:
            image = open_image_bytes(upload.data, upload.name)
            uris.append(to_webp_data_uri(image, quality))
        except DecodeError as e:
            logger.warning(f"Skipping upload {upload.name}: {e}")
            skipped.append(upload.name)
    logger.info(f"Prepared {len(uris)} uploads ({len(skipped)} skipped)")
    return uris, skipped


def solid_color_data_uri(color: str, width: int, height: int) -> str:
    """
    PNG data URI of a width x height image filled with color.

    Raises:
        ValueError: If color is not a colour PIL understands
    """
    rgba = ImageColor.getcolor(color, "RGBA")
    return to_png_data_uri(Image.new("RGBA", (max(1, width), max(1, height)), rgba))


async def convert_document_images(
    repository: ZineRepository,
    document_id: str,
    quality: int = DEFAULT_WEBP_QUALITY,
) -> ConversionReport:
    """
    Re-encode every stored image element of a document as WebP.

    Elements already in WebP, or not holding a data URI, are left alone.
    Failures are counted and logged; the run continues.
    """
    total = converted = errors = 0
    for page in await repository.list_pages(document_id):
        for element in page.elements:
            if not element.is_image:
                continue
            total += 1
            if element.content.startswith(WEBP_PREFIX) or not element.content.startswith("data:"):
                continue
            try:
                webp = convert_to_webp(element.content, quality)
                await repository.update_element(element.id, content=webp)
                converted += 1
            except (DecodeError, PersistenceError) as e:
                logger.error(f"Error converting image {element.id}: {e}")
                errors += 1
    report = ConversionReport(total=total, converted=converted, errors=errors)
    logger.info(f"WebP conversion for {document_id}: {report}")
    return report
