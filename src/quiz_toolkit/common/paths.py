"""
Path utilities for dev vs installed file locations.

Override: QUIZ_TOOLKIT_HOME environment variable
Dev mode: Uses local workspace/ directory (when run from a source checkout)
Installed: Uses the per-OS application data directory
"""
from __future__ import annotations

import os
import platform
from pathlib import Path

APP_DIR_NAME = "Quiz Toolkit"
HOME_ENV_VAR = "QUIZ_TOOLKIT_HOME"


def is_source_checkout() -> bool:
    """Check if the package is imported from a src/ checkout rather than site-packages."""
    package_dir = Path(__file__).resolve().parent.parent
    return package_dir.parent.name == "src" and (package_dir.parent.parent / "pyproject.toml").exists()


def get_app_data_dir() -> Path:
    """
    Get the application data directory for session storage.

    Override: $QUIZ_TOOLKIT_HOME
    Dev: workspace/
    Installed: %LOCALAPPDATA%/Quiz Toolkit (Windows),
               ~/Library/Application Support/Quiz Toolkit (macOS),
               $XDG_DATA_HOME or ~/.local/share/Quiz Toolkit (Linux)
    """
    override = os.environ.get(HOME_ENV_VAR)
    if override:
        return Path(override).expanduser()

    if is_source_checkout():
        return Path.cwd() / "workspace"

    system = platform.system()
    if system == "Windows":
        base = os.environ.get("LOCALAPPDATA", os.environ.get("APPDATA"))
        return Path(base) / APP_DIR_NAME if base else Path.home() / ".quiz_toolkit"
    if system == "Darwin":
        return Path.home() / "Library/Application Support" / APP_DIR_NAME
    xdg = os.environ.get("XDG_DATA_HOME")
    return (Path(xdg) if xdg else Path.home() / ".local/share") / APP_DIR_NAME
