"""Tests for the adb/fastboot output parsers."""

from datetime import datetime, timedelta

from droidbridge.adb.models import DeviceState
from droidbridge.adb.parsers import (
    parse_app_label,
    parse_devices,
    parse_fastboot_devices,
    parse_getvar,
    parse_long_listing,
    parse_name_listing,
    parse_package_paths,
    parse_packages,
    parse_props,
    parse_users,
)


class TestParseDevices:
    """Test `adb devices -l` parsing."""

    def test_parse_device_with_attributes(self):
        """Test a ready device with its descriptive attributes."""
        text = (
            "List of devices attached\n"
            "0123456789ABCDEF       device usb:1-1 product:sunfish model:Pixel_4a device:sunfish transport_id:2\n"
        )

        devices = parse_devices(text)

        assert len(devices) == 1
        device = devices[0]
        assert device.serial == "0123456789ABCDEF"
        assert device.state == DeviceState.READY
        assert device.product == "sunfish"
        assert device.model == "Pixel_4a"
        assert device.device == "sunfish"
        assert device.transport_id == "2"
        assert device.display_name == "Pixel 4a (0123456789ABCDEF)"

    def test_skips_daemon_noise(self):
        """Test that server start-up chatter is not mistaken for devices."""
        text = (
            "* daemon not running; starting now at tcp:5037\n"
            "* daemon started successfully\n"
            "List of devices attached\n"
            "emulator-5554 device\n"
            "\n"
        )

        devices = parse_devices(text)

        assert [d.serial for d in devices] == ["emulator-5554"]

    def test_unauthorized_and_unknown_states(self):
        """Test state words outside the ready state."""
        text = "AAA unauthorized usb:1-2 transport_id:3\nBBB recovery\n"

        devices = {d.serial: d for d in parse_devices(text)}

        assert devices["AAA"].state == DeviceState.UNAUTHORIZED
        assert devices["AAA"].transport_id == "3"
        assert devices["BBB"].state == DeviceState.UNKNOWN
        assert devices["BBB"].state_text == "recovery"

    def test_line_without_state_is_skipped(self):
        """Test that a bare serial without a state is dropped."""
        assert parse_devices("lonely-serial\n") == []

    def test_empty_output(self):
        """Test empty and missing output."""
        assert parse_devices("") == []
        assert parse_devices(None) == []


class TestParseFastbootDevices:
    """Test `fastboot devices` parsing."""

    def test_parse_fastboot_devices(self):
        """Test that only fastboot lines are kept."""
        text = "B123\tfastboot\nC456\trecovery\ngarbage\n"

        devices = parse_fastboot_devices(text)

        assert len(devices) == 1
        assert devices[0].serial == "B123"
        assert devices[0].in_fastboot


class TestParseUsers:
    """Test user table parsing."""

    def test_parse_users(self):
        """Test records from `cmd user list`."""
        text = (
            "Users:\n"
            "\tUserInfo{0:Owner:c13} running\n"
            "\tUserInfo{10:Work profile:1030}\n"
        )

        users = parse_users(text)

        assert len(users) == 2
        assert users[0].id == 0
        assert users[0].name == "Owner"
        assert users[0].state == "running"
        assert users[1].id == 10
        assert users[1].name == "Work profile"
        assert users[1].state == ""

    def test_no_records(self):
        """Test output without user records."""
        assert parse_users("Error: unknown command\n") == []


class TestParseProps:
    """Test property table parsing."""

    def test_parse_props(self):
        """Test well-formed and malformed property lines."""
        text = "[ro.product.model]: [Pixel 7]\n[ro.build.version.sdk]: [34]\ngarbage line\n"

        props = parse_props(text)

        assert props == {"ro.product.model": "Pixel 7", "ro.build.version.sdk": "34"}

    def test_empty_value(self):
        """Test a property with an empty value."""
        assert parse_props("[persist.sys.locale]: []") == {"persist.sys.locale": ""}


class TestParseGetvar:
    """Test boot loader variable parsing."""

    def test_key_with_colon(self):
        """Test keys that themselves contain a colon."""
        text = "(bootloader) partition-size:boot: 0x4000000\n(bootloader) version: 0.5"

        assert parse_getvar(text) == {"partition-size:boot": "0x4000000", "version": "0.5"}

    def test_ignores_untagged_lines(self):
        """Test that status lines without the tag are dropped."""
        text = "(bootloader) unlocked: yes\nall: \nFinished. Total time: 0.010s\n"

        assert parse_getvar(text) == {"unlocked": "yes"}

    def test_value_without_space(self):
        """Test the compact key:value form."""
        assert parse_getvar("(bootloader) slot-count:2") == {"slot-count": "2"}


class TestParsePackages:
    """Test package listing parsing."""

    def test_strips_prefix(self):
        """Test that the package: prefix is removed."""
        text = "package:com.android.chrome\npackage:org.fdroid.fdroid\n\n"

        assert parse_packages(text) == ["com.android.chrome", "org.fdroid.fdroid"]

    def test_path_form(self):
        """Test `pm list packages -f` lines."""
        text = "package:/data/app/~~x==/com.example.app-1/base.apk=com.example.app\n"

        assert parse_packages(text) == ["com.example.app"]

    def test_package_paths(self):
        """Test split APK paths from `pm path`."""
        text = "package:/data/app/com.example/base.apk\npackage:/data/app/com.example/split_config.en.apk\n"

        assert parse_package_paths(text) == [
            "/data/app/com.example/base.apk",
            "/data/app/com.example/split_config.en.apk",
        ]


class TestParseLongListing:
    """Test directory listing parsing."""

    TOYBOX = (
        "total 24\n"
        "drwxrwx--x 2 root sdcard_rw 4096 2023-05-01 10:22 Download/\n"
        "-rw-rw---- 1 root sdcard_rw 12345 2023-06-02 08:15 notes.txt\n"
        "drwxrwx--x 3 root sdcard_rw 4096 2023-05-01 10:22 ./\n"
        "drwxrwx--x 9 root sdcard_rw 4096 2023-05-01 10:22 ../\n"
    )

    def test_toybox_layout(self):
        """Test a toybox listing with dot entries and a summary line."""
        entries = parse_long_listing(self.TOYBOX)

        assert [e.name for e in entries] == ["Download", "notes.txt"]

        download, notes = entries
        assert download.is_dir
        assert download.mode == "drwxrwx--x"
        assert download.mod_time == "2023-05-01 10:22"
        assert not notes.is_dir
        assert notes.size == 12345
        assert notes.modified.year == 2023

    def test_total_line_never_listed(self):
        """Test that the summary line does not become an entry."""
        entries = parse_long_listing("total 0\n")

        assert entries == []

    def test_time_with_nanoseconds(self):
        """Test toybox full-time output with nine fractional digits."""
        text = "-rw-r--r-- 1 shell shell 42 2024-01-09 13:45:12.000000000 log.txt\n"

        entries = parse_long_listing(text)

        assert len(entries) == 1
        assert entries[0].size == 42
        assert entries[0].name == "log.txt"
        assert entries[0].mod_time == "2024-01-09 13:45:12.000000000"
        assert entries[0].modified == datetime(2024, 1, 9, 13, 45, 12)

    def test_time_with_zone(self):
        """Test full-time output followed by a UTC offset."""
        text = "-rw-r--r-- 1 shell shell 42 2024-01-09 13:45:12.123456789 +0000 log.txt\n"

        entry = parse_long_listing(text)[0]

        assert entry.mod_time == "2024-01-09 13:45:12.123456789 +0000"
        assert entry.modified.microsecond == 123456
        assert entry.modified.utcoffset() == timedelta(0)

    def test_busybox_layout(self):
        """Test a busybox listing with a year-less time."""
        text = "-rw-rw---- 1 root sdcard_rw 12345 Jan 15 10:30 photo.jpg\n"

        entry = parse_long_listing(text)[0]

        assert entry.name == "photo.jpg"
        assert entry.mod_time == "Jan 15 10:30"
        assert (entry.modified.month, entry.modified.day, entry.modified.hour) == (1, 15, 10)
        assert entry.modified.year == datetime.now().year
        # Right-most integer rule: the day of the month is taken as the size.
        assert entry.size == 15

    def test_vendor_layouts_with_year(self):
        """Test vendor listings printing a date with the year and no time."""
        text = (
            "-rw-r--r-- 1 system system 2048 Jan 15 2023 old.log\n"
            "-rw-r--r-- 1 system system 4096 15 Jan 2023 new.log\n"
        )

        old, new = parse_long_listing(text)

        assert old.mod_time == "Jan 15 2023"
        assert new.mod_time == "15 Jan 2023"
        assert old.modified == new.modified == datetime(2023, 1, 15)
        # Right-most integer rule: the year is taken as the size.
        assert old.size == new.size == 2023

    def test_unparsable_time_left_empty(self):
        """Test that an unknown time layout is not fatal."""
        text = "-rw-r--r-- 1 shell shell 42 sometime yesterday file.bin\n"

        entries = parse_long_listing(text)

        assert entries[0].name == "file.bin"
        assert entries[0].mod_time == ""
        assert entries[0].modified is None

    def test_short_line_keeps_name(self):
        """Test a line too short to carry metadata."""
        entries = parse_long_listing("lost+found/\n")

        assert entries[0].name == "lost+found"
        assert entries[0].is_dir
        assert entries[0].size == 0

    def test_numeric_name_taken_as_size(self):
        """Test the right-most integer rule with a numeric file name."""
        text = "-rw-rw---- 1 root sdcard_rw 512 2023-05-01 10:22 2048\n"

        entries = parse_long_listing(text)

        assert entries[0].name == "2048"
        assert entries[0].size == 2048

    def test_sort_key_orders_dirs_then_newest(self):
        """Test ordering of listing entries for display."""
        text = (
            "-rw-rw---- 1 root root 1 2022-01-01 00:00 old.txt\n"
            "-rw-rw---- 1 root root 1 2024-01-01 00:00 new.txt\n"
            "-rw-rw---- 1 root root 1 whenever ever undated.txt\n"
            "drwxrwx--x 2 root root 4096 2020-01-01 00:00 Music/\n"
        )

        entries = sorted(parse_long_listing(text), key=lambda e: e.sort_key())

        assert [e.name for e in entries] == ["Music", "new.txt", "old.txt", "undated.txt"]


class TestParseNameListing:
    """Test names-only listing parsing."""

    def test_parse_names(self):
        """Test directory markers and skipped entries."""
        entries = parse_name_listing("./\n../\nDCIM/\nfile.txt\n\n")

        assert [(e.name, e.is_dir) for e in entries] == [("DCIM", True), ("file.txt", False)]
        assert all(e.size == 0 and e.mode == "" for e in entries)


class TestParseAppLabel:
    """Test application label extraction."""

    def test_application_label(self):
        """Test the modern label declaration."""
        assert parse_app_label("    application-label:'Chrome'\n") == "Chrome"

    def test_localized_label(self):
        """Test a locale-qualified label declaration."""
        assert parse_app_label("application-label-en-US:'Files'") == "Files"

    def test_legacy_label(self):
        """Test the older nonLocalizedLabel form."""
        assert parse_app_label("  nonLocalizedLabel=Calculator icon=0x0") == "Calculator"

    def test_no_label(self):
        """Test output without any declaration."""
        assert parse_app_label("Packages:\n  Package [com.example]\n") is None
