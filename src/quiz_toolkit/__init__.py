"""Top-level package for the Quiz Toolkit.

Provides subpackages:
- quiz_toolkit.core – question/session models, randomizer, serialization
- quiz_toolkit.catalog – question bank loading and dataset manifests
- quiz_toolkit.selection – filter/sampling pipeline for building subsets
- quiz_toolkit.quiz – evaluation rule, session controller, statistics
- quiz_toolkit.storage – durable per-dataset session store
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

    try:
        from importlib.metadata import version as pkg_version
        return pkg_version("quiz-toolkit")
    except Exception:
        return "0.0.0"

__version__ = _get_version()
__all__: list[str] = ["__version__"]
