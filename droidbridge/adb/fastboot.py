"""Fastboot (boot loader) operations."""

from typing import Dict

from . import commands
from .device import ADBDevice
from .errors import InvalidArgumentError
from .models import CommandResult
from .parsers import parse_getvar
from ..util.logging import get_logger

logger = get_logger(__name__)


class Fastboot:
    """Boot loader commands for a device in fastboot mode."""

    def __init__(self, device: ADBDevice):
        self.device = device

    def run(self, *args: str) -> CommandResult[str]:
        """Run an arbitrary fastboot subcommand against this device."""
        if not args:
            return CommandResult(error=InvalidArgumentError("empty fastboot command"))
        result = self.device.run_fastboot(commands.fastboot(self.device.serial, *args))
        if result.error is not None:
            logger.warning(f"fastboot {' '.join(args)} failed: {result.error}")
        return CommandResult(value=result.output, output=result.output, error=result.error)

    def getvar_all(self) -> CommandResult[Dict[str, str]]:
        """Read all boot loader variables."""
        result = self.device.run_fastboot(commands.fastboot_getvar_all(self.device.serial))
        if result.error is not None:
            return CommandResult(output=result.output, error=result.error)
        return CommandResult(value=parse_getvar(result.output), output=result.output)

    def reboot(self) -> CommandResult[str]:
        return self.run("reboot")

    def reboot_bootloader(self) -> CommandResult[str]:
        return self.run("reboot-bootloader")

    def continue_boot(self) -> CommandResult[str]:
        return self.run("continue")

    def oem_unlock(self) -> CommandResult[str]:
        return self.run("oem", "unlock")

    def flashing_unlock(self) -> CommandResult[str]:
        return self.run("flashing", "unlock")

    def flash(self, partition: str, image_path: str) -> CommandResult[str]:
        if not (partition or "").strip() or not (image_path or "").strip():
            return CommandResult(error=InvalidArgumentError("partition and image are required"))
        logger.info(f"Flashing {image_path} to {partition} on {self.device.serial}")
        return self.run("flash", partition, image_path)

    def update(self, zip_path: str) -> CommandResult[str]:
        if not (zip_path or "").strip():
            return CommandResult(error=InvalidArgumentError("update package path cannot be empty"))
        return self.run("update", zip_path)

    def oem_device_info(self) -> CommandResult[str]:
        return self.run("oem", "device-info")

    def oem_edl(self) -> CommandResult[str]:
        return self.run("oem", "edl")
