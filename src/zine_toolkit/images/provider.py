"""
Module: images.provider

Purpose:
    Abstract interface for loading element image sources. A source is the
    content string of an image element: a data URI or a filesystem path.
    Decoded images are cached by source.

Key Classes:
    - ImageLoader: Abstract base class for image access
    - CachingImageLoader: Data-URI and path loader with a decode cache

Key Functions:
    - decode_data_uri(): Bytes and MIME type of a base64 data URI

Dependencies:
    - PIL: Image decoding
    - core.errors: DecodeError

Used By:
    - editor.elements: Intrinsic size for new images and stickers
    - output.pipeline: Preload before capture
    - output.rasterizer: Image drawing
"""

from __future__ import annotations

import asyncio
import base64
import binascii
import io
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Iterable, Optional, Tuple, Union

from PIL import Image, UnidentifiedImageError

from zine_toolkit.core.errors import DecodeError

logger = logging.getLogger(__name__)

LoadOutcome = Union[Image.Image, DecodeError]


class ImageLoader(ABC):
    """
    Abstract interface for turning image sources into PIL images.

    Implementations raise DecodeError for anything they cannot load.
    """

    @abstractmethod
    def load(self, source: str) -> Image.Image:
        """
        Decode an image source.

        Args:
            source: Data URI or file path

        Returns:
            RGBA PIL Image

        Raises:
            DecodeError: If the source cannot be read or decoded
        """

    def natural_size(self, source: str) -> Tuple[int, int]:
        """(width, height) of the decoded source."""
        return self.load(source).size

    async def preload(self, sources: Iterable[str]) -> Dict[str, LoadOutcome]:
        """
        Decode every source concurrently and wait for all to settle.

        A failure is recorded against its source and never stops the others.

        Returns:
            Mapping of source to image or the DecodeError it raised
        """
        unique = list(dict.fromkeys(sources))
        results = await asyncio.gather(
            *(self._load_async(source) for source in unique),
            return_exceptions=True,
        )
        outcomes: Dict[str, LoadOutcome] = {}
        for source, result in zip(unique, results):
            if isinstance(result, DecodeError):
                logger.warning(f"Preload failed for {_describe(source)}: {result}")
            elif isinstance(result, Exception):
                logger.error(
                    f"Unexpected failure preloading {_describe(source)}: {result}",
                    exc_info=result,
                )
                result = DecodeError(f"Cannot load {_describe(source)}: {result}")
            elif isinstance(result, BaseException):
                raise result
            outcomes[source] = result
        return outcomes

    async def _load_async(self, source: str) -> Image.Image:
        await asyncio.sleep(0)
        return self.load(source)


class CachingImageLoader(ImageLoader):
    """
    Loader for data URIs and file paths, caching decoded images.

    Attributes:
        base_dir: Directory relative paths resolve against

    Example:
        >>> loader = CachingImageLoader()
        >>> image = loader.load("data:image/png;base64,iVBORw0...")
    """

    def __init__(self, base_dir: Optional[Path] = None) -> None:
        self.base_dir = base_dir
        self._cache: Dict[str, Image.Image] = {}

    def load(self, source: str) -> Image.Image:
        cached = self._cache.get(source)
        if cached is not None:
            return cached
        image = self._decode(source)
        self._cache[source] = image
        return image

    def evict(self, source: str) -> None:
        self._cache.pop(source, None)

    def clear(self) -> None:
        for image in self._cache.values():
            image.close()
        self._cache.clear()

    def __enter__(self) -> "CachingImageLoader":
        return self

    def __exit__(self, *args) -> None:
        self.clear()

    def _decode(self, source: str) -> Image.Image:
        if not source:
            raise DecodeError("Empty image source")
        if source.startswith("data:"):
            data, _ = decode_data_uri(source)
            return open_image_bytes(data, _describe(source))

        path = Path(source)
        if self.base_dir is not None and not path.is_absolute():
            path = self.base_dir / path
        try:
            data = path.read_bytes()
        except OSError as e:
            raise DecodeError(f"Cannot read image {path}: {e}") from e
        return open_image_bytes(data, str(path))


def decode_data_uri(uri: str) -> Tuple[bytes, str]:
    """
    Split a base64 data URI into raw bytes and MIME type.

    Raises:
        DecodeError: If the URI is not a base64 data URI
    """
    header, sep, payload = uri.partition(",")
    if not sep or not header.startswith("data:") or not header.endswith(";base64"):
        raise DecodeError(f"Not a base64 data URI: {_describe(uri)}")
    mime = header[len("data:"):-len(";base64")] or "application/octet-stream"
    try:
        return base64.b64decode(payload, validate=True), mime
    except (binascii.Error, ValueError) as e:
        raise DecodeError(f"Invalid base64 payload in {_describe(uri)}") from e


def open_image_bytes(data: bytes, label: str = "image") -> Image.Image:
    """Decode image bytes fully into an RGBA image."""
    try:
        with Image.open(io.BytesIO(data)) as image:
            image.load()
            return image.convert("RGBA")
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
        raise DecodeError(f"Cannot decode {label}: {e}") from e


def _describe(source: str) -> str:
    return source if len(source) <= 48 else source[:45] + "..."
