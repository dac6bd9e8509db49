"""
Module: settings

Purpose:
    Load editor, layout and export configuration from an optional JSON file.
    Any malformed data falls back to defaults with a logged warning; a bad
    settings file never stops the editor from opening.

Key Classes:
    - ZineSettings: Bundle of the three configs

Key Functions:
    - load_settings(): Read settings from JSON
    - save_settings(): Write settings to JSON

Dependencies:
    - json (std)
    - editor.config, layout.config, output.config

File format:
    {
      "editor": {"canvas_width": 900, ...},
      "layout": {"padding": 40, ...},
      "export": {"target_bytes": 250000, ...}
    }
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Mapping, Optional, Type, TypeVar

from zine_toolkit.editor.config import EditorConfig
from zine_toolkit.layout.config import LayoutConfig
from zine_toolkit.output.config import ExportConfig

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class ZineSettings:
    """Editor, layout and export configuration loaded together."""

    editor: EditorConfig = field(default_factory=EditorConfig)
    layout: LayoutConfig = field(default_factory=LayoutConfig)
    export: ExportConfig = field(default_factory=ExportConfig)

    def to_dict(self) -> dict[str, Any]:
        return {
            "editor": asdict(self.editor),
            "layout": asdict(self.layout),
            "export": asdict(self.export),
        }


def load_settings(path: Optional[Path]) -> ZineSettings:
    """
    Load settings from a JSON file.

    Canvas size declared under "editor" also seeds "layout" and "export"
    unless those sections set their own.

    Args:
        path: Settings file, or None for defaults

    Returns:
        ZineSettings (defaults for anything missing or invalid)
    """
    if path is None or not Path(path).exists():
        return ZineSettings()

    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        logger.warning(f"Settings file {path} could not be read, using defaults: {e}")
        return ZineSettings()

    if not isinstance(data, dict):
        logger.warning(f"Settings file {path} is not an object, using defaults")
        return ZineSettings()

    editor = _build(EditorConfig, data.get("editor"), "editor")
    canvas = {"canvas_width": editor.canvas_width, "canvas_height": editor.canvas_height}
    layout = _build(LayoutConfig, {**canvas, **(data.get("layout") or {})}, "layout")
    export = _build(
        ExportConfig,
        {
            "page_width": editor.canvas_width,
            "page_height": editor.canvas_height,
            **(data.get("export") or {}),
        },
        "export",
    )
    return ZineSettings(editor=editor, layout=layout, export=export)


def save_settings(settings: ZineSettings, path: Path) -> None:
    """Write settings to a JSON file, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(settings.to_dict(), indent=2), encoding="utf-8")


def _build(cls: Type[T], section: Optional[Mapping[str, Any]], name: str) -> T:
    if not section:
        return cls()
    if not isinstance(section, Mapping):
        logger.warning(f"Settings section {name!r} is not an object, using defaults")
        return cls()
    known = {f.name for f in fields(cls)}
    unknown = set(section) - known
    if unknown:
        logger.warning(f"Ignoring unknown {name} settings: {sorted(unknown)}")
    try:
        return cls(**{k: v for k, v in section.items() if k in known})
    except (TypeError, ValueError) as e:
        logger.warning(f"Invalid {name} settings, using defaults: {e}")
        return cls()
