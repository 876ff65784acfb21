"""ADB module initialization."""

from .batch import run_batch
from .client import ADBClient
from .device import ADBDevice, check_adb_available, get_device_by_serial, list_devices, merge_devices
from .errors import (
    ADBError,
    CommandFailedError,
    InvalidArgumentError,
    ToolNotFoundError,
    ToolPathError,
    is_device_unavailable,
)
from .executor import ExecResult, run_tool
from .fastboot import Fastboot
from .models import (
    AppExtraction,
    BatchItem,
    BatchResult,
    CommandResult,
    DeviceInfo,
    DeviceState,
    DirectoryEntry,
    ExtractionResult,
    PackageType,
    UserProfile,
)
from .package import PackageManager
from .shell import ShellCommand
from .toolpath import auto_detect, validate_path
from .transfer import FileTransfer, create_transfer_progress_bar

__all__ = [
    # client / executor
    "ADBClient",
    "ExecResult",
    "run_tool",
    "auto_detect",
    "validate_path",
    # device
    "ADBDevice",
    "check_adb_available",
    "get_device_by_serial",
    "list_devices",
    "merge_devices",
    # errors
    "ADBError",
    "CommandFailedError",
    "InvalidArgumentError",
    "ToolNotFoundError",
    "ToolPathError",
    "is_device_unavailable",
    # models
    "AppExtraction",
    "BatchItem",
    "BatchResult",
    "CommandResult",
    "DeviceInfo",
    "DeviceState",
    "DirectoryEntry",
    "ExtractionResult",
    "PackageType",
    "UserProfile",
    # operations
    "Fastboot",
    "FileTransfer",
    "PackageManager",
    "ShellCommand",
    "create_transfer_progress_bar",
    "run_batch",
]
