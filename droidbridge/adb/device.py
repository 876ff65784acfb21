"""ADB device enumeration and the per-device command handle."""

from typing import Dict, Iterable, List, Optional, Sequence

from . import commands
from .client import ADBClient
from .errors import InvalidArgumentError
from .executor import ExecResult
from .models import CommandResult, DeviceInfo
from .parsers import parse_devices, parse_fastboot_devices
from ..util.logging import get_logger

logger = get_logger(__name__)


class ADBDevice:
    """Represents one addressed device (adb or fastboot serial)."""

    def __init__(self, serial: str, client: Optional[ADBClient] = None):
        self.serial = (serial or "").strip()
        self.client = client if client is not None else ADBClient()

    def __repr__(self) -> str:
        return f"ADBDevice(serial='{self.serial}')"

    def run(self, args: Sequence[str]) -> ExecResult:
        """Run adb with arguments already scoped by the command builders."""
        return self.client.run(args)

    def run_fastboot(self, args: Sequence[str]) -> ExecResult:
        return self.client.run_fastboot(args)

    def wait_for_device(self) -> ExecResult:
        return self.run(commands.wait_for_device(self.serial))

    def reboot(self, mode: str = "") -> CommandResult[str]:
        """Reboot normally or into ``recovery``, ``bootloader`` or ``sideload``."""
        mode = (mode or "").strip()
        if mode not in commands.REBOOT_MODES:
            return CommandResult(error=InvalidArgumentError(f"unknown reboot mode: {mode}"))
        logger.info(f"Rebooting {self.serial or 'device'}{' into ' + mode if mode else ''}")
        return _text_result(self.run(commands.reboot(self.serial, mode)))

    def sideload(self, zip_path: str) -> CommandResult[str]:
        if not (zip_path or "").strip():
            return CommandResult(error=InvalidArgumentError("sideload path cannot be empty"))
        return _text_result(self.run(commands.sideload(self.serial, zip_path)))

    def start_shizuku(self) -> CommandResult[str]:
        return _text_result(self.run(commands.start_shizuku(self.serial)))


def _text_result(result: ExecResult) -> CommandResult[str]:
    return CommandResult(value=result.output, output=result.output, error=result.error)


def merge_devices(
    adb_devices: Iterable[DeviceInfo],
    fastboot_devices: Iterable[DeviceInfo],
) -> Dict[str, DeviceInfo]:
    """Merge adb and fastboot enumerations keyed by serial.

    adb records win; a fastboot record is only added for a serial adb did
    not report. The result has no guaranteed order.
    """
    merged: Dict[str, DeviceInfo] = {}
    for device in adb_devices:
        merged[device.serial] = device
    for device in fastboot_devices:
        if device.serial not in merged:
            merged[device.serial] = device
    return merged


def list_devices(client: Optional[ADBClient] = None) -> CommandResult[Dict[str, DeviceInfo]]:
    """List devices known to adb and fastboot.

    Fastboot devices are omitted silently when fastboot is unavailable. The
    error of the adb enumeration, if any, is reported.
    """
    client = client if client is not None else ADBClient()
    client.ensure_server()

    adb_result = client.run(commands.devices())
    adb_devices = parse_devices(adb_result.output)

    fastboot_devices: List[DeviceInfo] = []
    fastboot_output = ""
    if client.fastboot_path:
        fb_result = client.run_fastboot(commands.fastboot_devices())
        fastboot_output = fb_result.output
        fastboot_devices = parse_fastboot_devices(fastboot_output)
        if fb_result.error is not None:
            logger.debug(f"fastboot devices failed: {fb_result.error}")

    merged = merge_devices(adb_devices, fastboot_devices)
    logger.debug(f"Found {len(merged)} devices")
    return CommandResult(
        value=merged,
        output=adb_result.output + "\n" + fastboot_output,
        error=adb_result.error,
    )


def get_device_by_serial(serial: str, client: Optional[ADBClient] = None) -> Optional[ADBDevice]:
    """Get a specific device by serial number."""
    client = client if client is not None else ADBClient()
    devices = list_devices(client).value or {}
    if serial in devices:
        return ADBDevice(serial, client)
    return None


def check_adb_available(client: Optional[ADBClient] = None) -> bool:
    """Check if ADB is available and working."""
    client = client if client is not None else ADBClient()
    if not client.is_available():
        return False
    return client.version().ok
