"""Extraction of installed APKs and private app data."""

from pathlib import Path
from typing import List, Optional, Union

from ..adb import commands
from ..adb.device import ADBDevice
from ..adb.errors import InvalidArgumentError
from ..adb.fallback import Candidate, run_chain
from ..adb.executor import ExecResult
from ..adb.models import AppExtraction, CommandResult, ExtractionResult
from ..adb.package import PackageManager
from ..util.logging import get_logger
from ..util.paths import ensure_directory, format_size

logger = get_logger(__name__)

ARCHIVE_NAME = "data.tar"
ARCHIVE_UNAVAILABLE = "app data tar not available (requires debuggable app or root)"

PathLike = Union[str, Path]


def _captured(result: ExecResult) -> bool:
    return result.ok and len(result.data) > 0


class AppExtractor:
    """Copies an app's APK files and data archive to the host."""

    def __init__(self, device: ADBDevice):
        self.device = device
        self.package_manager = PackageManager(device)

    def extract_apk(self, package: str, dest_dir: Optional[PathLike] = None) -> CommandResult[List[Path]]:
        """Pull every APK of a package (base and splits) into ``dest_dir``.

        All pulls are attempted; the first failure is reported.
        """
        if not (package or "").strip():
            return CommandResult(error=InvalidArgumentError("empty package"))

        paths = self.package_manager.apk_paths(package)
        if paths.error is not None:
            return CommandResult(output=paths.output, error=paths.error)
        if not paths.value:
            return CommandResult(output=paths.output, error=InvalidArgumentError("no APK paths found for package"))

        dest = ensure_directory(Path(dest_dir) if dest_dir else Path(package))

        outputs = []
        pulled: List[Path] = []
        first_error = None
        for remote in paths.value:
            local = dest / Path(remote).name
            result = self.device.run(commands.pull(self.device.serial, remote, str(local)))
            outputs.append(result.output)
            if result.error is not None:
                logger.warning(f"Failed to pull {remote}: {result.error}")
                first_error = first_error or result.error
            else:
                pulled.append(local)

        logger.info(f"Pulled {len(pulled)}/{len(paths.value)} APKs of {package} to {dest}")
        return CommandResult(value=pulled, output="\n".join(outputs), error=first_error)

    def extract_app_data(self, package: str, dest_dir: Optional[PathLike] = None) -> CommandResult[ExtractionResult]:
        """Archive an app's private data directory as ``data.tar``.

        Streams a tar through `run-as` (debuggable apps) and, failing that,
        through `su` (rooted devices). Whichever strategy returns bytes first
        is written verbatim; nothing is written when both fail.
        """
        if not (package or "").strip():
            return CommandResult(error=InvalidArgumentError("empty package"))

        serial = self.device.serial
        result, candidate, captured = run_chain(self.device.run, [
            Candidate(commands.app_data_tar_run_as(serial, package), _captured, "run-as tar"),
            Candidate(commands.app_data_tar_su(serial, package), _captured, "su tar"),
        ])

        if not captured:
            logger.info(f"{package}: {ARCHIVE_UNAVAILABLE}")
            details = result.output.strip() if result.error is not None else ""
            output = f"{ARCHIVE_UNAVAILABLE}\n{details}" if details else ARCHIVE_UNAVAILABLE
            return CommandResult(output=output, error=result.error)

        dest = ensure_directory(Path(dest_dir) if dest_dir else Path(package))
        archive_path = dest / ARCHIVE_NAME
        archive_path.write_bytes(result.data)

        message = f"app data archived to {archive_path}"
        logger.info(f"{message} ({format_size(len(result.data))}, via {candidate.name})")
        return CommandResult(value=ExtractionResult(archive_path=archive_path, message=message), output=message)

    def extract_all(self, package: str, dest_dir: Optional[PathLike] = None) -> CommandResult[AppExtraction]:
        """Extract the APKs and, where possible, the data archive.

        A missing data archive degrades the result but is not an error.
        """
        if not (package or "").strip():
            return CommandResult(error=InvalidArgumentError("empty package"))

        apk = self.extract_apk(package, dest_dir)

        data = self.extract_app_data(package, dest_dir)
        extraction = AppExtraction(apk_paths=apk.value or [], archive=data.value)
        output = "\n".join(part for part in (apk.output.strip(), data.output.strip()) if part)
        return CommandResult(value=extraction, output=output, error=apk.error)
