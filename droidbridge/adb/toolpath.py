"""Locating and validating the adb and fastboot executables."""

import os
import platform
import shutil
from pathlib import Path
from typing import List, Optional

from .errors import ToolPathError
from ..util.logging import get_logger

logger = get_logger(__name__)

ADB = "adb"
FASTBOOT = "fastboot"


def executable_name(tool: str) -> str:
    """Platform file name of a platform-tools executable."""
    if os.name == "nt":
        return f"{tool}.exe"
    return tool


def _is_file(path: Path) -> bool:
    try:
        return path.is_file()
    except OSError:
        return False


def _sdk_roots() -> List[Path]:
    roots = [
        os.environ.get("ANDROID_SDK_ROOT", ""),
        os.environ.get("ANDROID_HOME", ""),
    ]
    paths = [Path(root) for root in roots if root]

    home = Path.home()
    system = platform.system()
    if system == "Darwin":
        paths.append(home / "Library" / "Android" / "sdk")
    elif system == "Windows":
        paths.append(home / "AppData" / "Local" / "Android" / "Sdk")
    else:
        paths.append(home / "Android" / "Sdk")
        paths.append(home / "Android" / "sdk")
    return paths


def _well_known_locations(exe: str) -> List[Path]:
    system = platform.system()
    if system == "Darwin":
        return [Path("/usr/local/bin") / exe, Path("/opt/homebrew/bin") / exe]
    if system == "Windows":
        return [Path("C:\\Android") / "platform-tools" / exe]
    return [Path("/usr/bin") / exe, Path("/usr/local/bin") / exe]


def auto_detect(tool: str = ADB, near: Optional[str] = None) -> str:
    """Find a platform-tools executable.

    Looks on PATH, next to ``near`` (e.g. fastboot beside a configured adb),
    under the SDK roots and then in well-known install directories.

    Returns:
        The executable path, or an empty string when nothing was found.
    """
    exe = executable_name(tool)

    found = shutil.which(exe)
    if found:
        return found

    candidates: List[Path] = []
    if near:
        candidates.append(Path(near).expanduser().parent / exe)
    candidates.extend(root / "platform-tools" / exe for root in _sdk_roots())
    candidates.extend(_well_known_locations(exe))

    for candidate in candidates:
        if _is_file(candidate):
            logger.debug(f"Found {tool} at {candidate}")
            return str(candidate)

    logger.debug(f"{tool} not found")
    return ""


def validate_path(candidate: str, tool: str = ADB) -> str:
    """Validate a user-supplied tool location.

    A bare executable name (``adb`` / ``adb.exe``) is resolved through PATH.

    Returns:
        Normalized absolute path of the executable

    Raises:
        ToolPathError: If the path is empty or does not point to a file
    """
    candidate = (candidate or "").strip()
    if not candidate:
        raise ToolPathError("empty path")

    path = Path(candidate).expanduser()
    if _is_file(path):
        return str(path.resolve())

    if path.name in (tool, f"{tool}.exe"):
        found = shutil.which(path.name)
        if found:
            return found

    raise ToolPathError(f"{tool} not found at {candidate}")
