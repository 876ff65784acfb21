"""Error types raised or returned by ADB and fastboot operations."""

import re
from typing import Optional, Sequence

# adb/fastboot diagnostics printed when the endpoint went away mid-operation,
# e.g. "error: device offline" or "adb: device 'emulator-5554' not found".
# Package ids such as com.offline.maps must not match.
DEVICE_UNAVAILABLE_RE = re.compile(
    r"device offline"
    r"|device unauthorized"
    r"|no devices"
    r"|device (?:'[^']*' )?not found"
    r"|(?<![\w.])disconnected(?![\w.])"
)


class ADBError(Exception):
    """ADB operation error."""
    pass


class ToolNotFoundError(ADBError):
    """The adb or fastboot executable is missing or could not be started."""

    def __init__(self, tool: str, reason: str = "") -> None:
        self.tool = tool
        message = f"{tool} executable not available"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class CommandFailedError(ADBError):
    """The external tool ran but exited with a non-zero status."""

    def __init__(self, args: Sequence[str], returncode: int, output: str = "") -> None:
        self.args_list = list(args)
        self.returncode = returncode
        self.output = output
        super().__init__(f"{' '.join(self.args_list)} exited with status {returncode}")


class ToolPathError(ADBError):
    """A candidate tool location could not be validated."""
    pass


class InvalidArgumentError(ADBError, ValueError):
    """An operation was called with an empty or malformed argument."""
    pass


def is_device_unavailable(output: str, error: Optional[BaseException] = None) -> bool:
    """Tell whether diagnostic text says the device is offline or gone."""
    text = output or ""
    if error is not None:
        # The message of a CommandFailedError is the argv; only its output counts.
        text = f"{text}\n{getattr(error, 'output', '')}"
    return DEVICE_UNAVAILABLE_RE.search(text.lower()) is not None
