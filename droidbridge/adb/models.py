"""Value types returned by device operations."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Generic, List, Optional, TypeVar

from .errors import ADBError
from ..util.timeutil import parse_listing_time

T = TypeVar("T")


class DeviceState(str, Enum):
    """Connection state of an endpoint."""

    READY = "device"
    UNAUTHORIZED = "unauthorized"
    OFFLINE = "offline"
    FASTBOOT = "fastboot"
    UNKNOWN = "unknown"

    @classmethod
    def from_word(cls, word: str) -> "DeviceState":
        try:
            return cls(word.strip().lower())
        except ValueError:
            return cls.UNKNOWN


class PackageType(str, Enum):
    """Package filter for listings."""

    ALL = "all"
    USER = "user"
    SYSTEM = "system"

    @property
    def flag(self) -> str:
        return {PackageType.USER: "-3", PackageType.SYSTEM: "-s"}.get(self, "")


@dataclass(frozen=True)
class DeviceInfo:
    """Snapshot of a connected device as reported by `adb devices -l` or `fastboot devices`."""

    serial: str
    state: DeviceState = DeviceState.UNKNOWN
    product: str = ""
    model: str = ""
    device: str = ""
    transport_id: str = ""
    state_text: str = ""

    @property
    def display_name(self) -> str:
        """Get a human-readable device name."""
        if self.model:
            return f"{self.model.replace('_', ' ')} ({self.serial})"
        return self.serial

    @property
    def in_fastboot(self) -> bool:
        return self.state is DeviceState.FASTBOOT


@dataclass(frozen=True)
class UserProfile:
    """An Android user account on a device."""

    id: int
    name: str
    state: str = ""


OWNER_PROFILE = UserProfile(id=0, name="Owner")


@dataclass(frozen=True)
class DirectoryEntry:
    """One entry of a remote directory listing.

    Only ``name`` and ``is_dir`` are reliable. The other fields are
    best-effort and fall back to zero or empty text.
    """

    name: str
    is_dir: bool = False
    size: int = 0
    mode: str = ""
    mod_time: str = ""

    @property
    def modified(self) -> Optional[datetime]:
        return parse_listing_time(self.mod_time)

    def sort_key(self) -> tuple:
        """Directories first, then newest first, entries without a time last, then by name."""
        modified = self.modified
        timestamp = -modified.timestamp() if modified is not None else 0.0
        return (not self.is_dir, modified is None, timestamp, self.name.lower(), self.name)


@dataclass
class CommandResult(Generic[T]):
    """Outcome of a device operation.

    ``output`` always carries the raw tool text so callers can show it,
    even when the operation succeeded.
    """

    value: Optional[T] = None
    output: str = ""
    error: Optional[ADBError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def raise_for_error(self) -> "CommandResult[T]":
        if self.error is not None:
            raise self.error
        return self


@dataclass(frozen=True)
class ExtractionResult:
    """A captured app-data archive on local storage."""

    archive_path: Path
    message: str


@dataclass
class AppExtraction:
    """Files produced by extracting a package's APKs and data."""

    apk_paths: List[Path] = field(default_factory=list)
    archive: Optional[ExtractionResult] = None


@dataclass
class BatchItem:
    """Outcome for one target of a batch operation."""

    target: str
    output: str = ""
    error: Optional[ADBError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class BatchResult:
    """Per-target outcomes of a sequential batch operation."""

    items: List[BatchItem] = field(default_factory=list)

    @property
    def succeeded(self) -> int:
        return sum(1 for item in self.items if item.ok)

    @property
    def failed(self) -> int:
        return sum(1 for item in self.items if not item.ok)

    @property
    def output(self) -> str:
        return "\n".join(item.output for item in self.items)

    @property
    def first_error(self) -> Optional[ADBError]:
        for item in self.items:
            if item.error is not None:
                return item.error
        return None

    def summary(self, title: str = "Batch") -> str:
        lines = [f"{title} complete: success {self.succeeded}, failed {self.failed}"]
        for item in self.items:
            if item.error is not None:
                lines.append(f"[{item.target}] error: {item.error}\n{item.output}".rstrip())
            elif item.output.strip():
                lines.append(f"[{item.target}] {item.output.strip()}")
            else:
                lines.append(f"[{item.target}] ok")
        return "\n".join(lines)
