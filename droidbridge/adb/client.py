"""ADB client wrapper holding the tool locations."""

import typing as t

from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from . import commands
from .errors import CommandFailedError, ToolNotFoundError, ToolPathError
from .executor import ExecResult, run_tool
from .models import CommandResult
from .toolpath import ADB, FASTBOOT, auto_detect, validate_path
from ..util.logging import get_logger

if t.TYPE_CHECKING:
    from ..config import BridgeConfig

logger = get_logger(__name__)


class ADBClient:
    """Runs adb and fastboot for any device.

    The two executable paths are the only mutable state. Change them between
    operations, not while one is in flight.
    """

    def __init__(self, adb_path: t.Optional[str] = None, fastboot_path: t.Optional[str] = None) -> None:
        """Initialize ADB client.

        Args:
            adb_path: Path to adb executable; auto-detected when omitted
            fastboot_path: Path to fastboot executable; auto-detected when
                omitted. An empty string means fastboot is unavailable.
        """
        if adb_path is None:
            adb_path = auto_detect(ADB) or ADB
        if fastboot_path is None:
            fastboot_path = auto_detect(FASTBOOT, near=adb_path)
        self.adb_path = adb_path
        self.fastboot_path = fastboot_path

    @classmethod
    def from_config(cls, config: "BridgeConfig") -> "ADBClient":
        return cls(adb_path=config.adb_path or None, fastboot_path=config.fastboot_path or None)

    def set_adb_path(self, candidate: str) -> str:
        """Validate and switch to a new adb location.

        Raises:
            ToolPathError: If the candidate is not a usable adb
        """
        self.adb_path = validate_path(candidate, ADB)
        logger.info(f"Using adb at {self.adb_path}")
        return self.adb_path

    def set_fastboot_path(self, candidate: str) -> str:
        self.fastboot_path = validate_path(candidate, FASTBOOT)
        logger.info(f"Using fastboot at {self.fastboot_path}")
        return self.fastboot_path

    def is_available(self) -> bool:
        return bool(self.adb_path) and bool(validate_or_empty(self.adb_path, ADB))

    def fastboot_available(self) -> bool:
        return bool(self.fastboot_path) and bool(validate_or_empty(self.fastboot_path, FASTBOOT))

    def run(self, args: t.Sequence[str]) -> ExecResult:
        """Run adb with already-built arguments."""
        return run_tool(self.adb_path or ADB, args)

    def run_fastboot(self, args: t.Sequence[str]) -> ExecResult:
        """Run fastboot with already-built arguments."""
        if not self.fastboot_path:
            return ExecResult(error=ToolNotFoundError(FASTBOOT, "not configured and not found on PATH"))
        return run_tool(self.fastboot_path, args)

    def version(self) -> CommandResult[str]:
        result = self.run(commands.version())
        return CommandResult(value=result.output.strip() if result.ok else None, output=result.output, error=result.error)

    @retry(
        retry=retry_if_exception_type(CommandFailedError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.5, min=0.5, max=4),
        reraise=True,
    )
    def _start_server(self) -> ExecResult:
        result = self.run(commands.start_server())
        if isinstance(result.error, CommandFailedError):
            raise result.error
        return result

    def ensure_server(self) -> ExecResult:
        """Start the adb server if it is not running.

        Non-zero exits are retried; a missing executable is reported at once.
        """
        try:
            result = self._start_server()
        except CommandFailedError as e:
            logger.warning(f"adb server did not start: {e}")
            return ExecResult(data=e.output.encode("utf-8"), error=e)
        if result.error is not None:
            logger.error(f"adb server not started: {result.error}")
        return result


def validate_or_empty(candidate: str, tool: str) -> str:
    """Like validate_path, but return an empty string instead of raising."""
    try:
        return validate_path(candidate, tool)
    except ToolPathError:
        return ""
