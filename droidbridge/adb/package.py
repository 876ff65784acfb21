"""ADB package management utilities."""

from typing import List, Optional

from . import commands
from .device import ADBDevice
from .errors import InvalidArgumentError, ToolNotFoundError
from .executor import ExecResult
from .fallback import Candidate, accept_any, run_chain, succeeded, succeeded_non_empty, succeeded_with
from .models import OWNER_PROFILE, CommandResult, PackageType, UserProfile
from .parsers import PACKAGE_PREFIX, parse_app_label, parse_package_paths, parse_packages, parse_users
from ..util.logging import get_logger

logger = get_logger(__name__)

USER_RECORD_MARKER = "UserInfo{"


def _require_package(package: str) -> Optional[InvalidArgumentError]:
    if not (package or "").strip():
        return InvalidArgumentError("empty package")
    return None


def _text_result(result: ExecResult) -> CommandResult[str]:
    return CommandResult(value=result.output, output=result.output, error=result.error)


class PackageManager:
    """Utility for managing packages and users on an Android device."""

    def __init__(self, device: ADBDevice):
        self.device = device

    @property
    def serial(self) -> str:
        return self.device.serial

    def list_users(self) -> CommandResult[List[UserProfile]]:
        """List user profiles.

        Prefers `cmd user list`; falls back to `pm list users`. Never returns
        an empty list: when nothing parses, the owner profile (id 0) is
        assumed.
        """
        self.device.client.ensure_server()
        result, _, _ = run_chain(self.device.run, [
            Candidate(commands.cmd_user_list(self.serial), succeeded_with(USER_RECORD_MARKER), "cmd user list"),
            Candidate(commands.pm_list_users(self.serial), accept_any, "pm list users"),
        ])

        users = parse_users(result.output)
        if not users:
            logger.info(f"No users parsed for {self.serial}, assuming owner only")
            users = [OWNER_PROFILE]
        launch_error = result.error if isinstance(result.error, ToolNotFoundError) else None
        return CommandResult(value=users, output=result.output, error=launch_error)

    def list_packages(
        self,
        user_id: Optional[int] = None,
        package_type: PackageType = PackageType.ALL,
    ) -> CommandResult[List[str]]:
        """List installed package names.

        Typed listings try `cmd package` then `pm` with the ``-3``/``-s``
        flag, and finally an unfiltered listing. Devices that do not support
        filtering therefore return a superset.
        """
        package_type = PackageType(package_type)
        self.device.client.ensure_server()
        self.device.wait_for_device()

        has_packages = succeeded_with(PACKAGE_PREFIX)
        flag = package_type.flag
        candidates = []
        if flag or user_id is not None:
            candidates.append(Candidate(
                commands.list_packages(self.serial, user_id, flag, tool="cmd"), has_packages, "cmd package list"))
            candidates.append(Candidate(
                commands.list_packages(self.serial, user_id, flag, tool="pm"), has_packages, "pm list"))
        if flag and user_id is not None:
            candidates.append(Candidate(
                commands.list_packages(self.serial, user_id, tool="pm"), has_packages, "pm list unfiltered"))
        candidates.append(Candidate(commands.list_packages(self.serial), succeeded, "pm list all"))

        result, candidate, _ = run_chain(self.device.run, candidates)
        if flag and candidate is not None and flag not in candidate.args:
            logger.info(f"Package filter {flag} unsupported on {self.serial}, returning all packages")

        if result.error is not None:
            logger.error(f"Failed to list packages: {result.error}")
            return CommandResult(output=result.output, error=result.error)

        packages = parse_packages(result.output)
        logger.debug(f"Found {len(packages)} packages")
        return CommandResult(value=packages, output=result.output)

    def apk_paths(self, package: str) -> CommandResult[List[str]]:
        """Remote APK paths of a package; split APKs give several."""
        error = _require_package(package)
        if error:
            return CommandResult(error=error)
        result = self.device.run(commands.package_paths(self.serial, package))
        if result.error is not None:
            return CommandResult(output=result.output, error=result.error)
        return CommandResult(value=parse_package_paths(result.output), output=result.output)

    def install(self, apk_path: str, user_id: Optional[int] = None, replace: bool = True) -> CommandResult[str]:
        if not (apk_path or "").strip():
            return CommandResult(error=InvalidArgumentError("empty APK path"))
        logger.info(f"Installing {apk_path} on {self.serial}")
        return _text_result(self.device.run(commands.install(self.serial, apk_path, user_id, replace)))

    def uninstall(self, package: str, user_id: int = 0) -> CommandResult[str]:
        """Uninstall a package for one user, preferring `cmd package`."""
        error = _require_package(package)
        if error:
            return CommandResult(error=error)

        def reports_success(result: ExecResult) -> bool:
            return result.ok and "success" in result.output.lower()

        result, _, _ = run_chain(self.device.run, [
            Candidate(commands.cmd_uninstall(self.serial, user_id, package), reports_success, "cmd package uninstall"),
            Candidate(commands.pm_uninstall(self.serial, user_id, package), accept_any, "pm uninstall"),
        ])
        return _text_result(result)

    def clear_data(self, package: str) -> CommandResult[str]:
        error = _require_package(package)
        if error:
            return CommandResult(error=error)
        return _text_result(self.device.run(commands.clear_data(self.serial, package)))

    def force_stop(self, package: str) -> CommandResult[str]:
        error = _require_package(package)
        if error:
            return CommandResult(error=error)
        return _text_result(self.device.run(commands.force_stop(self.serial, package)))

    def app_label(self, package: str) -> CommandResult[str]:
        """Get the human-readable application label of a package.

        Tries a grepped `cmd package dump`, a grepped `dumpsys package`, then a
        single full dump. When no label is found the package name itself is
        returned; the error, if any, is the last command's.
        """
        error = _require_package(package)
        if error:
            return CommandResult(error=error)

        def has_label(result: ExecResult) -> bool:
            return result.ok and parse_app_label(result.output) is not None

        result, _, _ = run_chain(self.device.run, [
            Candidate(commands.label_grep_cmd(self.serial, package), has_label, "cmd package dump | grep"),
            Candidate(commands.label_grep_dumpsys(self.serial, package), has_label, "dumpsys package | grep"),
            Candidate(commands.package_dump(self.serial, package), succeeded_non_empty, "cmd package dump"),
            Candidate(commands.dumpsys_package(self.serial, package), accept_any, "dumpsys package"),
        ])

        label = parse_app_label(result.output) or package
        return CommandResult(value=label, output=result.output, error=result.error)
