"""Argument vectors for adb and fastboot operations.

Every function here is a pure mapping from parameters to the argument list
that follows the executable. Nothing is executed or parsed.
"""

import shlex
from typing import List, Optional

SERIAL_FLAG = "-s"

# Shell pipeline that pulls the first label declaration out of a package dump.
LABEL_GREP = "grep -m 1 -E 'application-label|nonLocalizedLabel'"

SHIZUKU_START_SCRIPT = "/sdcard/Android/data/moe.shizuku.privileged.api/start.sh"

REBOOT_MODES = ("", "recovery", "bootloader", "sideload")


def for_serial(serial: Optional[str], *args: str) -> List[str]:
    """Prefix ``args`` with the device selector when a serial is given."""
    if serial and serial.strip():
        return [SERIAL_FLAG, serial.strip()] + list(args)
    return list(args)


# adb server / enumeration

def version() -> List[str]:
    return ["version"]


def start_server() -> List[str]:
    return ["start-server"]


def devices() -> List[str]:
    return ["devices", "-l"]


def wait_for_device(serial: str) -> List[str]:
    return for_serial(serial, "wait-for-device")


# users

def cmd_user_list(serial: str) -> List[str]:
    return for_serial(serial, "shell", "cmd", "user", "list")


def pm_list_users(serial: str) -> List[str]:
    return for_serial(serial, "shell", "pm", "list", "users")


# packages

def list_packages(
    serial: str,
    user_id: Optional[int] = None,
    flag: str = "",
    tool: str = "pm",
) -> List[str]:
    """`<tool> list packages [--user N] [flag]` where tool is ``cmd`` or ``pm``."""
    if tool == "cmd":
        args = ["shell", "cmd", "package", "list", "packages"]
    else:
        args = ["shell", "pm", "list", "packages"]
    if user_id is not None:
        args += ["--user", str(user_id)]
    if flag:
        args.append(flag)
    return for_serial(serial, *args)


def package_paths(serial: str, package: str) -> List[str]:
    return for_serial(serial, "shell", "pm", "path", package)


def install(serial: str, apk_path: str, user_id: Optional[int] = None, replace: bool = True) -> List[str]:
    args = ["install"]
    if replace:
        args.append("-r")
    if user_id is not None:
        args += ["--user", str(user_id)]
    args.append(apk_path)
    return for_serial(serial, *args)


def cmd_uninstall(serial: str, user_id: int, package: str) -> List[str]:
    return for_serial(serial, "shell", "cmd", "package", "uninstall", "--user", str(user_id), package)


def pm_uninstall(serial: str, user_id: int, package: str) -> List[str]:
    return for_serial(serial, "shell", "pm", "uninstall", "--user", str(user_id), package)


def clear_data(serial: str, package: str) -> List[str]:
    return for_serial(serial, "shell", "pm", "clear", package)


def force_stop(serial: str, package: str) -> List[str]:
    return for_serial(serial, "shell", "am", "force-stop", package)


def label_grep_cmd(serial: str, package: str) -> List[str]:
    script = f"cmd package dump {shlex.quote(package)} 2>/dev/null | {LABEL_GREP}"
    return for_serial(serial, "shell", "sh", "-lc", shlex.quote(script))


def label_grep_dumpsys(serial: str, package: str) -> List[str]:
    script = f"dumpsys package {shlex.quote(package)} 2>/dev/null | {LABEL_GREP}"
    return for_serial(serial, "shell", "sh", "-lc", shlex.quote(script))


def package_dump(serial: str, package: str) -> List[str]:
    return for_serial(serial, "shell", "cmd", "package", "dump", package)


def dumpsys_package(serial: str, package: str) -> List[str]:
    return for_serial(serial, "shell", "dumpsys", "package", package)


# properties and files

def getprop(serial: str) -> List[str]:
    return for_serial(serial, "shell", "getprop")


def list_dir_detailed(serial: str, path: str) -> List[str]:
    """Long listing with dot entries and directories marked by a trailing slash."""
    return for_serial(serial, "shell", "ls", "-lAp", "--", shlex.quote(path))


def list_dir_long(serial: str, path: str) -> List[str]:
    return for_serial(serial, "shell", "ls", "-lA", "--", shlex.quote(path))


def list_dir_names(serial: str, path: str) -> List[str]:
    return for_serial(serial, "shell", "ls", "-1p", "--", shlex.quote(path))


def push(serial: str, local_path: str, remote_dir: str) -> List[str]:
    return for_serial(serial, "push", local_path, remote_dir)


def pull(serial: str, remote_path: str, local_dir: str, preserve: bool = False) -> List[str]:
    args = ["pull"]
    if preserve:
        args.append("-a")
    return for_serial(serial, *args, remote_path, local_dir)


def app_data_tar_run_as(serial: str, package: str) -> List[str]:
    """Stream /data/data/<pkg> as tar from inside the app's own sandbox."""
    script = f"cd {shlex.quote('/data/data/' + package)} && tar cf - ."
    return for_serial(serial, "exec-out", "run-as", package, "sh", "-c", shlex.quote(script))


def app_data_tar_su(serial: str, package: str) -> List[str]:
    """Stream /data/user/0/<pkg> as tar with root privileges."""
    script = f"tar cf - -C {shlex.quote('/data/user/0/' + package)} ."
    return for_serial(serial, "exec-out", "su", "-c", shlex.quote(script))


# power / recovery

def reboot(serial: str, mode: str = "") -> List[str]:
    if mode:
        return for_serial(serial, "reboot", mode)
    return for_serial(serial, "reboot")


def sideload(serial: str, zip_path: str) -> List[str]:
    return for_serial(serial, "sideload", zip_path)


def start_shizuku(serial: str) -> List[str]:
    return for_serial(serial, "shell", "sh", SHIZUKU_START_SCRIPT)


# fastboot

def fastboot(serial: str, *args: str) -> List[str]:
    """Arbitrary fastboot subcommand, scoped to a device when a serial is given."""
    return for_serial(serial, *args)


def fastboot_devices() -> List[str]:
    return ["devices"]


def fastboot_getvar_all(serial: str) -> List[str]:
    return for_serial(serial, "getvar", "all")
