"""ADB file push/pull utilities."""

from pathlib import Path
from typing import Callable, Optional, Sequence, Union

from tqdm import tqdm

from . import commands
from .batch import DEFAULT_BATCH_DELAY, run_batch
from .device import ADBDevice
from .errors import InvalidArgumentError
from .fallback import Candidate, accept_any, run_chain, succeeded
from .models import BatchResult, CommandResult
from ..util.logging import get_logger
from ..util.paths import ensure_directory

logger = get_logger(__name__)

PathLike = Union[str, Path]
ProgressCallback = Callable[[int, int, str], None]


class FileTransfer:
    """Utility for copying files between the host and an Android device."""

    def __init__(self, device: ADBDevice, delay: float = DEFAULT_BATCH_DELAY):
        self.device = device
        self.delay = delay

    def push(self, local_path: PathLike, remote_dir: str) -> CommandResult[str]:
        """Push one local file into a remote directory."""
        local = str(local_path or "").strip()
        remote_dir = (remote_dir or "").strip()
        if not local or not remote_dir:
            return CommandResult(error=InvalidArgumentError("invalid push arguments"))

        # A trailing slash makes adb treat the destination as a directory.
        if not remote_dir.endswith("/"):
            remote_dir += "/"

        logger.debug(f"Pushing {local} -> {remote_dir}")
        result = self.device.run(commands.push(self.device.serial, local, remote_dir))
        return CommandResult(value=result.output, output=result.output, error=result.error)

    def push_many(
        self,
        local_paths: Sequence[PathLike],
        remote_dir: str,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> CommandResult[BatchResult]:
        """Push several files, continuing past failures."""
        if not local_paths:
            return CommandResult(error=InvalidArgumentError("no files to push"))

        batch = run_batch(
            [str(p) for p in local_paths],
            lambda local: self.push(local, remote_dir),
            delay=self.delay,
            progress_callback=progress_callback,
        )
        return CommandResult(value=batch, output=batch.output, error=batch.first_error)

    def pull(self, remote_path: str, local_dir: PathLike, preserve: bool = True) -> CommandResult[str]:
        """Pull a remote file or directory into a local directory.

        With ``preserve`` the timestamps and modes are kept (`pull -a`) when
        the adb version supports it.
        """
        remote_path = (remote_path or "").strip()
        if not remote_path or not str(local_dir or "").strip():
            return CommandResult(error=InvalidArgumentError("invalid pull arguments"))

        local = ensure_directory(Path(local_dir))
        serial = self.device.serial

        candidates = []
        if preserve:
            candidates.append(Candidate(commands.pull(serial, remote_path, str(local), preserve=True), succeeded, "pull -a"))
        candidates.append(Candidate(commands.pull(serial, remote_path, str(local)), accept_any, "pull"))

        logger.debug(f"Pulling {remote_path} -> {local}")
        result, _, _ = run_chain(self.device.run, candidates)
        if result.error is not None:
            logger.error(f"Failed to pull {remote_path}: {result.error}")
        return CommandResult(value=result.output, output=result.output, error=result.error)

    def pull_many(
        self,
        remote_paths: Sequence[str],
        local_dir: PathLike,
        preserve: bool = True,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> CommandResult[BatchResult]:
        """Pull several remote paths, continuing past failures."""
        if not remote_paths:
            return CommandResult(error=InvalidArgumentError("no files to pull"))

        ensure_directory(Path(local_dir))
        batch = run_batch(
            list(remote_paths),
            lambda remote: self.pull(remote, local_dir, preserve),
            delay=self.delay,
            progress_callback=progress_callback,
        )
        return CommandResult(value=batch, output=batch.output, error=batch.first_error)


def create_transfer_progress_bar(total_files: int, desc: str = "Transferring files") -> tqdm:
    """Create a progress bar for batch transfers."""
    return tqdm(
        total=total_files,
        desc=desc,
        unit="file",
        bar_format="{l_bar}{bar}| {n_fmt}/{total_fmt} [{elapsed}<{remaining}, {rate_fmt}{postfix}]"
    )


def progress_bar_callback(bar: tqdm) -> ProgressCallback:
    """Adapt a tqdm bar to the batch progress callback signature."""
    def update(index: int, total: int, target: str) -> None:
        bar.set_postfix_str(target)
        bar.update(1)
    return update
