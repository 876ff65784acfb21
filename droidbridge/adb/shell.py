"""ADB shell queries: directory listings and system properties."""

from typing import Dict, List

from . import commands
from .device import ADBDevice
from .fallback import Candidate, run_chain, succeeded_supported
from .models import CommandResult, DirectoryEntry
from .parsers import parse_long_listing, parse_name_listing, parse_props
from ..util.logging import get_logger

logger = get_logger(__name__)


class ShellCommand:
    """Utility for running shell queries on an Android device."""

    def __init__(self, device: ADBDevice):
        self.device = device

    def list_directory(self, path: str = "/") -> CommandResult[List[DirectoryEntry]]:
        """List a remote directory.

        Tries `ls -lAp`, then `ls -lA` when the flags are rejected, and
        finally the names-only `ls -1p`, whose entries carry no metadata.
        """
        path = (path or "").strip() or "/"
        serial = self.device.serial

        result, _, accepted = run_chain(self.device.run, [
            Candidate(commands.list_dir_detailed(serial, path), succeeded_supported, "ls -lAp"),
            Candidate(commands.list_dir_long(serial, path), succeeded_supported, "ls -lA"),
        ])
        if accepted:
            return CommandResult(value=parse_long_listing(result.output), output=result.output)

        long_error = result.error
        logger.debug(f"Long listing of {path} failed, trying names only")
        names = self.device.run(commands.list_dir_names(serial, path))
        if names.error is not None:
            logger.error(f"Failed to list directory {path}: {long_error or names.error}")
            return CommandResult(output=names.output, error=long_error or names.error)

        return CommandResult(value=parse_name_listing(names.output), output=names.output)

    def get_properties(self) -> CommandResult[Dict[str, str]]:
        """Get all system properties (`getprop`)."""
        result = self.device.run(commands.getprop(self.device.serial))
        if result.error is not None:
            logger.error(f"Failed to read properties: {result.error}")
            return CommandResult(output=result.output, error=result.error)
        return CommandResult(value=parse_props(result.output), output=result.output)

    def get_property(self, name: str) -> CommandResult[str]:
        """Get a single system property from the full table."""
        result = self.get_properties()
        if result.value is None:
            return CommandResult(output=result.output, error=result.error)
        return CommandResult(value=result.value.get(name, ""), output=result.output)
