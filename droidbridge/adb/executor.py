"""Process execution for the adb and fastboot executables."""

import os
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

from .errors import ADBError, CommandFailedError, ToolNotFoundError
from ..util.logging import get_logger

logger = get_logger(__name__)


@dataclass
class ExecResult:
    """Combined stdout/stderr of one tool invocation and its failure, if any."""

    data: bytes = b""
    error: Optional[ADBError] = None

    @property
    def output(self) -> str:
        return self.data.decode("utf-8", errors="replace")

    @property
    def ok(self) -> bool:
        return self.error is None


def _platform_options() -> dict:
    """Keyword arguments that keep a console window from popping up on Windows."""
    if os.name != "nt":
        return {}
    startupinfo = subprocess.STARTUPINFO()
    startupinfo.dwFlags |= subprocess.STARTF_USESHOWWINDOW
    return {
        "creationflags": subprocess.CREATE_NO_WINDOW,
        "startupinfo": startupinfo,
    }


def run_tool(executable: str, args: Sequence[str]) -> ExecResult:
    """Run an external tool and capture its combined output.

    The call blocks until the process exits. No timeout is applied; a hung
    process blocks the calling thread.

    Args:
        executable: Path or bare name of the tool
        args: Arguments passed after the executable

    Returns:
        ExecResult with the raw output bytes. ``error`` is a ToolNotFoundError
        when the process could not start and a CommandFailedError when it
        exited non-zero.
    """
    cmd: List[str] = [executable] + list(args)
    tool = Path(executable).name or executable
    logger.debug(f"Running: {' '.join(cmd)}")

    try:
        completed = subprocess.run(
            cmd,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            env=os.environ.copy(),
            check=False,
            **_platform_options(),
        )
    except FileNotFoundError as e:
        logger.error(f"{tool} not found at {executable}")
        return ExecResult(error=ToolNotFoundError(tool, str(e)))
    except OSError as e:
        logger.error(f"Could not start {executable}: {e}")
        return ExecResult(error=ToolNotFoundError(tool, str(e)))

    data = completed.stdout or b""
    if completed.returncode != 0:
        error = CommandFailedError(cmd, completed.returncode, data.decode("utf-8", errors="replace"))
        logger.debug(str(error))
        return ExecResult(data=data, error=error)

    return ExecResult(data=data)
