"""Parsers for the plain-text responses of adb and fastboot.

All functions are pure and never raise on malformed input: unrecognised
lines are dropped and unparsable metadata falls back to default values.
"""

import re
from typing import Dict, List, Optional

from .models import DeviceInfo, DeviceState, DirectoryEntry, UserProfile
from ..util.timeutil import is_listing_time

PACKAGE_PREFIX = "package:"
BOOTLOADER_TAG = "(bootloader)"
FASTBOOT_STATE = "fastboot"
DIR_MARKER = "/"

DEVICE_ATTRIBUTES = {
    "product": "product",
    "model": "model",
    "device": "device",
    "transport_id": "transport_id",
}

USER_RE = re.compile(r"UserInfo\{(\d+):([^:}]+).*?\}\s*([a-zA-Z]+)?")
PROP_RE = re.compile(r"^\[([^\]]+)\]: \[([^\]]*)\]$")
LABEL_RE = re.compile(r"application-label(?:-[\w-]+)?\s*:\s*'?([^']*)'?")
LEGACY_LABEL_RE = re.compile(r"nonLocalizedLabel=?'?(.*?)'?(\s|$)")


def _lines(text: str) -> List[str]:
    return [line.strip() for line in (text or "").splitlines()]


def _is_device_noise(line: str) -> bool:
    return (
        line.startswith("List of devices")
        or line.startswith("*")
        or "daemon" in line
        or "adb server" in line
    )


def parse_devices(text: str) -> List[DeviceInfo]:
    """Parse `adb devices -l` output.

    Example line::

        0123456789ABCDEF  device usb:1-1 product:sunfish model:Pixel_4a device:sunfish transport_id:2
    """
    devices = []
    for line in _lines(text):
        if not line or _is_device_noise(line):
            continue

        fields = line.split()
        if len(fields) < 2:
            continue

        serial, rest = fields[0], fields[1:]
        state_text = ""
        if rest and ":" not in rest[0]:
            state_text = rest[0]
            rest = rest[1:]

        attributes = {}
        for token in rest:
            key, sep, value = token.partition(":")
            if sep and key in DEVICE_ATTRIBUTES:
                attributes[DEVICE_ATTRIBUTES[key]] = value

        devices.append(DeviceInfo(
            serial=serial,
            state=DeviceState.from_word(state_text) if state_text else DeviceState.UNKNOWN,
            state_text=state_text,
            **attributes,
        ))

    return devices


def parse_fastboot_devices(text: str) -> List[DeviceInfo]:
    """Parse `fastboot devices` output; only `<serial> fastboot` lines count."""
    devices = []
    for line in _lines(text):
        fields = line.split()
        if len(fields) >= 2 and fields[1] == FASTBOOT_STATE:
            devices.append(DeviceInfo(
                serial=fields[0],
                state=DeviceState.FASTBOOT,
                state_text=FASTBOOT_STATE,
            ))
    return devices


def parse_users(text: str) -> List[UserProfile]:
    """Parse `cmd user list` / `pm list users` output.

    Both print records such as ``UserInfo{0:Owner:c13} running``.
    """
    users = []
    for line in _lines(text):
        if not line:
            continue
        match = USER_RE.search(line)
        if not match:
            continue
        users.append(UserProfile(
            id=int(match.group(1)),
            name=match.group(2).strip(),
            state=(match.group(3) or "").strip(),
        ))
    return users


def parse_props(text: str) -> Dict[str, str]:
    """Parse `getprop` output of ``[key]: [value]`` lines."""
    props = {}
    for line in _lines(text):
        match = PROP_RE.match(line)
        if match:
            props[match.group(1)] = match.group(2)
    return props


def parse_getvar(text: str) -> Dict[str, str]:
    """Parse `fastboot getvar all` output.

    Lines look like ``(bootloader) version-bootloader: b1c1-0.4`` and keys may
    themselves contain colons (``partition-size:boot_a: 0x4000000``), so the
    key ends at the first colon followed by whitespace when there is one,
    otherwise at the first colon.
    """
    variables = {}
    for line in _lines(text):
        if not line.startswith(BOOTLOADER_TAG):
            continue
        body = line[len(BOOTLOADER_TAG):].strip()

        match = re.search(r":\s", body)
        if match:
            key, value = body[:match.start()], body[match.end():]
        else:
            key, sep, value = body.partition(":")
            if not sep:
                continue

        key = key.strip()
        if key:
            variables[key] = value.strip()
    return variables


def parse_packages(text: str) -> List[str]:
    """Parse `pm list packages` output into package names.

    ``package:`` prefixes are stripped and ``path=package`` lines (from ``-f``)
    are reduced to the package name.
    """
    packages = []
    for line in _lines(text):
        if not line:
            continue
        if line.startswith(PACKAGE_PREFIX):
            line = line[len(PACKAGE_PREFIX):]
        eq = line.rfind("=")
        if 0 <= eq < len(line) - 1:
            line = line[eq + 1:]
        packages.append(line)
    return packages


def parse_package_paths(text: str) -> List[str]:
    """Parse `pm path` output; split APKs produce one line each."""
    paths = []
    for line in _lines(text):
        if line.startswith(PACKAGE_PREFIX):
            line = line[len(PACKAGE_PREFIX):].strip()
        if line:
            paths.append(line)
    return paths


def _is_skipped_name(name: str) -> bool:
    return name in ("", ".", "..")


def _guess_mod_time(fields: List[str]) -> str:
    """Rebuild the modification time from the tokens right before the name."""
    before_name = fields[1:-1]
    for count in (2, 3):
        if len(before_name) < count:
            continue
        candidate = " ".join(before_name[-count:])
        if is_listing_time(candidate):
            return candidate
    return ""


def parse_long_listing(text: str) -> List[DirectoryEntry]:
    """Parse `ls -l` style output from toybox, busybox or vendor builds.

    The column layout differs between builds, so the size is the last field
    that looks like an integer and the name is the last field. A numeric file
    name can therefore be mistaken for the size.
    """
    entries = []
    for line in _lines(text):
        if _is_skipped_name(line) or line.startswith("total "):
            continue

        fields = line.split()
        if len(fields) < 6:
            # Not a metadata line; keep the name only.
            name = line.rstrip(DIR_MARKER)
            if _is_skipped_name(name):
                continue
            entries.append(DirectoryEntry(name=name, is_dir=line.endswith(DIR_MARKER)))
            continue

        mode = fields[0]

        size = 0
        for field in fields[1:]:
            try:
                size = int(field)
            except ValueError:
                continue

        name = fields[-1].rstrip(DIR_MARKER)
        if _is_skipped_name(name):
            continue

        entries.append(DirectoryEntry(
            name=name,
            is_dir=mode.startswith("d"),
            size=size,
            mode=mode,
            mod_time=_guess_mod_time(fields),
        ))

    return entries


def parse_name_listing(text: str) -> List[DirectoryEntry]:
    """Parse `ls -1p` output; directories carry a trailing slash."""
    entries = []
    for line in _lines(text):
        if _is_skipped_name(line):
            continue
        name = line.rstrip(DIR_MARKER)
        if _is_skipped_name(name):
            continue
        entries.append(DirectoryEntry(name=name, is_dir=line.endswith(DIR_MARKER)))
    return entries


def parse_app_label(text: str) -> Optional[str]:
    """Find the first application label declaration in a package dump.

    Recognises ``application-label:'Name'`` and the older
    ``nonLocalizedLabel=Name`` form. Returns None when neither is present.
    """
    for line in _lines(text):
        for pattern in (LABEL_RE, LEGACY_LABEL_RE):
            match = pattern.search(line)
            if match:
                label = match.group(1).strip()
                if label:
                    return label
    return None
