"""
Module: images.filters

Purpose:
    Named colour filter presets for image elements. Tone presets use PIL's
    ImageEnhance; channel tints and duotones run on numpy arrays. Alpha is
    always preserved.

Key Functions:
    - apply_filter(): Apply a preset by name
    - available_filters(): Preset names in menu order

Dependencies:
    - PIL: ImageEnhance, ImageOps
    - numpy: Channel maths

Used By:
    - output.rasterizer
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Tuple

import numpy as np
from PIL import Image, ImageEnhance, ImageOps

from zine_toolkit.core.models import NO_FILTER

logger = logging.getLogger(__name__)

FilterFn = Callable[[Image.Image], Image.Image]

# Equal channel weights of a 0.33 grayscale colour matrix
_GRAY_WEIGHTS = np.array([0.33, 0.33, 0.33], dtype=np.float32)


@dataclass(frozen=True)
class Duotone:
    """
    Grayscale followed by a per-channel linear transfer from dark to light.

    Each channel maps luminance 0..1 onto [low, high].
    """

    red: Tuple[float, float]
    green: Tuple[float, float]
    blue: Tuple[float, float]

    def __call__(self, image: Image.Image) -> Image.Image:
        rgb, alpha = _split(image)
        arr = np.asarray(rgb, dtype=np.float32) / 255.0
        luminance = np.clip(arr @ _GRAY_WEIGHTS, 0.0, 1.0)
        out = np.empty_like(arr)
        for channel, (low, high) in enumerate((self.red, self.green, self.blue)):
            out[..., channel] = low + luminance * (high - low)
        return _merge(_from_array(out), alpha)


# ─────────────────────────────────────────────────────────────────────────────
# Presets
# ─────────────────────────────────────────────────────────────────────────────

def _polaroid(image: Image.Image) -> Image.Image:
    rgb, alpha = _split(image)
    rgb = ImageEnhance.Brightness(rgb).enhance(1.1)
    rgb = ImageEnhance.Contrast(rgb).enhance(1.1)
    rgb = ImageEnhance.Color(rgb).enhance(1.2)
    return _merge(_tint(rgb, (1.05, 1.0, 0.95)), alpha)


def _vintage(image: Image.Image) -> Image.Image:
    rgb, alpha = _split(image)
    rgb = Image.blend(rgb, _sepia(rgb), 0.5)
    rgb = ImageEnhance.Contrast(rgb).enhance(0.9)
    rgb = ImageEnhance.Brightness(rgb).enhance(1.05)
    return _merge(rgb, alpha)


def _noir(image: Image.Image) -> Image.Image:
    rgb, alpha = _split(image)
    gray = ImageOps.grayscale(rgb)
    gray = ImageEnhance.Contrast(gray).enhance(1.3)
    return _merge(gray.convert("RGB"), alpha)


def _chrome(image: Image.Image) -> Image.Image:
    rgb, alpha = _split(image)
    rgb = ImageEnhance.Contrast(rgb).enhance(1.2)
    rgb = ImageEnhance.Color(rgb).enhance(1.4)
    return _merge(rgb, alpha)


def _fade(image: Image.Image) -> Image.Image:
    rgb, alpha = _split(image)
    rgb = ImageEnhance.Contrast(rgb).enhance(0.8)
    rgb = ImageEnhance.Brightness(rgb).enhance(1.1)
    rgb = ImageEnhance.Color(rgb).enhance(0.8)
    return _merge(rgb, alpha)


def _warm(image: Image.Image) -> Image.Image:
    rgb, alpha = _split(image)
    return _merge(_tint(rgb, (1.1, 1.0, 0.9)), alpha)


def _cool(image: Image.Image) -> Image.Image:
    rgb, alpha = _split(image)
    return _merge(_tint(rgb, (0.9, 1.0, 1.1)), alpha)


FILTERS: Dict[str, FilterFn] = {
    "polaroid": _polaroid,
    "vintage": _vintage,
    "noir": _noir,
    "chrome": _chrome,
    "fade": _fade,
    "warm": _warm,
    "cool": _cool,
    "teal-white": Duotone(red=(0.03, 1.0), green=(0.57, 1.0), blue=(0.49, 1.0)),
    "sepia": Duotone(red=(0.26, 0.95), green=(0.19, 0.78), blue=(0.11, 0.59)),
    "cherry-icecream": Duotone(red=(0.84, 1.0), green=(0.05, 0.94), blue=(0.37, 0.61)),
}


def available_filters() -> List[str]:
    """Preset names, "none" first."""
    return [NO_FILTER, *FILTERS]


def apply_filter(image: Image.Image, name: str) -> Image.Image:
    """
    Apply a named preset.

    Args:
        image: Source image (any mode)
        name: Preset name or "none"

    Returns:
        Filtered RGBA image; unknown names return the image unfiltered
    """
    if not name or name == NO_FILTER:
        return image
    fn = FILTERS.get(name)
    if fn is None:
        logger.warning(f"Unknown filter {name!r}, rendering unfiltered")
        return image
    return fn(image)


# ─────────────────────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────────────────────

def _split(image: Image.Image) -> Tuple[Image.Image, Image.Image]:
    rgba = image.convert("RGBA")
    return rgba.convert("RGB"), rgba.getchannel("A")


def _merge(rgb: Image.Image, alpha: Image.Image) -> Image.Image:
    out = rgb.convert("RGB").convert("RGBA")
    out.putalpha(alpha)
    return out


def _tint(rgb: Image.Image, factors: Tuple[float, float, float]) -> Image.Image:
    arr = np.asarray(rgb, dtype=np.float32) / 255.0
    return _from_array(arr * np.array(factors, dtype=np.float32))


def _sepia(rgb: Image.Image) -> Image.Image:
    matrix = np.array(
        [
            [0.393, 0.769, 0.189],
            [0.349, 0.686, 0.168],
            [0.272, 0.534, 0.131],
        ],
        dtype=np.float32,
    )
    arr = np.asarray(rgb, dtype=np.float32) / 255.0
    return _from_array(arr @ matrix.T)


def _from_array(arr: np.ndarray) -> Image.Image:
    return Image.fromarray((np.clip(arr, 0.0, 1.0) * 255).round().astype(np.uint8))
