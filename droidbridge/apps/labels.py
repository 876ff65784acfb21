"""Background fetching of human-readable app labels."""

import threading
import time
from typing import Callable, Dict, List, Optional, Sequence

from ..adb.errors import is_device_unavailable
from ..adb.package import PackageManager
from ..util.logging import get_logger

logger = get_logger(__name__)

DEFAULT_MAX_COUNT = 40
DEFAULT_DELAY = 0.2

LabelCallback = Callable[[str, str], None]


def is_usable_label(label: Optional[str], package: str) -> bool:
    label = (label or "").strip()
    return bool(label) and label.lower() != "null" and label != package


class LabelFetcher:
    """Sequential, rate-limited label lookup for a package list.

    Only one run is active at a time. Each run remembers the generation it
    started in; once ``invalidate()`` bumps the generation, the run stops
    before its next package without publishing anything more.
    """

    def __init__(
        self,
        package_manager: PackageManager,
        on_label: Optional[LabelCallback] = None,
        max_count: int = DEFAULT_MAX_COUNT,
        delay: float = DEFAULT_DELAY,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.package_manager = package_manager
        self.on_label = on_label
        self.max_count = max_count
        self.delay = delay
        self._sleep = sleep

        self.labels: Dict[str, str] = {}
        self._lock = threading.Lock()
        self._generation = 0
        self._running = False
        self._thread: Optional[threading.Thread] = None

    @property
    def generation(self) -> int:
        with self._lock:
            return self._generation

    @property
    def running(self) -> bool:
        with self._lock:
            return self._running

    def invalidate(self) -> int:
        """Supersede the current run, e.g. after the package list was refreshed."""
        with self._lock:
            self._generation += 1
            self.labels = {}
            return self._generation

    def start(self, packages: Sequence[str]) -> bool:
        """Start a background run over a snapshot of ``packages``.

        Returns False without doing anything when a run is already active.
        """
        with self._lock:
            if self._running:
                return False
            self._running = True
            generation = self._generation

        snapshot = list(packages)
        self._thread = threading.Thread(
            target=self._run_and_release,
            args=(snapshot, generation),
            name="label-fetcher",
            daemon=True,
        )
        self._thread.start()
        return True

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the current run finishes; True if it has."""
        thread = self._thread
        if thread is None:
            return True
        thread.join(timeout)
        return not thread.is_alive()

    def _run_and_release(self, snapshot: List[str], generation: int) -> None:
        try:
            self.run(snapshot, generation)
        finally:
            with self._lock:
                self._running = False

    def run(self, packages: Sequence[str], generation: int) -> int:
        """Fetch labels on the calling thread; returns the number of packages processed."""
        count = 0
        for package in packages:
            if generation != self.generation:
                logger.debug("Label fetch superseded by a newer package list")
                return count

            # Placeholder rows such as status messages are not package names.
            if "." not in package:
                continue

            result = self.package_manager.app_label(package)
            if result.error is not None and is_device_unavailable(result.output, result.error):
                logger.info(f"Stopping label fetch, device unavailable: {result.error}")
                return count

            if is_usable_label(result.value, package):
                self._publish(package, result.value.strip(), generation)

            count += 1
            if count >= self.max_count:
                logger.debug(f"Label fetch stopped after {count} packages")
                return count

            self._sleep(self.delay)

        return count

    def _publish(self, package: str, label: str, generation: int) -> None:
        with self._lock:
            if generation != self._generation:
                return
            self.labels[package] = label
        if self.on_label is not None:
            self.on_label(package, label)
