"""Top-level package for the Zine Toolkit.

Provides subpackages:
- zine_toolkit.core – data models and error taxonomy
- zine_toolkit.store – persistence collaborator (async CRUD repositories)
- zine_toolkit.editor – element/page stores, layering, interaction, clipboard
- zine_toolkit.layout – batch auto-layout of images onto new pages
- zine_toolkit.images – image loading, filter presets, conversion
- zine_toolkit.output – page capture, compression and PDF export
"""

def _get_version() -> str:
    """Get version from pyproject.toml (dev) or importlib.metadata (installed)."""
    from pathlib import Path

    pyproject = Path(__file__).resolve().parent.parent.parent / "pyproject.toml"

    if pyproject.exists():
        try:
            content = pyproject.read_text()
            for line in content.splitlines():
                if line.strip().startswith("version"):
                    # Parse: version = "0.3.0"
                    return line.split("=")[1].strip().strip('"').strip("'")
        except OSError:
            pass

    # Fallback to importlib.metadata for installed package
    try:
        from importlib.metadata import version as pkg_version
        return pkg_version("zine_toolkit")
    except Exception:
        return "0.0.0"

__version__ = _get_version()
__all__: list[str] = ["__version__"]
