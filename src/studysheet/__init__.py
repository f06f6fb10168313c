"""Top-level package for the study-sheet layout engine.

Provides subpackages:
- studysheet.core – immutable input models (content blocks, topics) and serialization
- studysheet.layout – page geometry, typography, column flow, overflow
  detection, content prioritization and the LayoutEngine facade
"""

def _get_version() -> str:
    """Get version from pyproject.toml (dev) or importlib.metadata (installed)."""
    from pathlib import Path

    pyproject = Path(__file__).resolve().parent.parent.parent / "pyproject.toml"
    if pyproject.exists():
        try:
            for line in pyproject.read_text().splitlines():
                if line.strip().startswith("version"):
                    # Parse: version = "0.3.0"
                    return line.split("=")[1].strip().strip('"').strip("'")
        except OSError:
            pass

    # Fallback to importlib.metadata for installed package
    from importlib.metadata import PackageNotFoundError, version as pkg_version
    try:
        return pkg_version("studysheet-layout")
    except PackageNotFoundError:
        return "0.0.0"

__version__ = _get_version()
__copyright__ = "Copyright 2026 The studysheet-layout authors"
__all__: list[str] = ["__version__"]
