"""Tests for the command line interface."""

import pytest
from click.testing import CliRunner

from droidbridge.adb import commands
from droidbridge.cli import cli
from droidbridge.config import load_config

SERIAL = "R58"


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "adb_path: adb\n"
        "fastboot_path: fastboot\n"
        "batch_delay_seconds: 0\n"
        "labels:\n"
        "  delay_seconds: 0\n"
    )
    return path


@pytest.fixture
def invoke(runner, config_file):
    """Invoke the CLI with the temporary config and the scripted tools."""
    def _invoke(*args):
        return CliRunner().invoke(cli, ["-c", str(config_file)] + list(args))
    return _invoke


class TestDevicesCommand:
    """Test the devices command."""

    def test_lists_devices(self, runner, invoke):
        """Test the device table."""
        runner.add(commands.devices(), "List of devices attached\nR58 device model:A52\n")
        runner.add(commands.fastboot_devices(), "FB1\tfastboot\n", tool="fastboot")

        result = invoke("devices")

        assert result.exit_code == 0
        assert "R58" in result.output
        assert "FB1" in result.output

    def test_no_devices(self, runner, invoke):
        """Test an empty enumeration."""
        result = invoke("devices")

        assert result.exit_code == 0
        assert "No devices found" in result.output


class TestPackageCommands:
    """Test package related commands."""

    def test_packages(self, runner, invoke):
        """Test listing packages."""
        runner.add(commands.list_packages(SERIAL, None, "-3", tool="cmd"), "package:com.a.one\n")

        result = invoke("packages", "-s", SERIAL, "-t", "user")

        assert result.exit_code == 0
        assert "com.a.one" in result.output

    def test_uninstall_partial_failure(self, runner, invoke):
        """Test that a failed package makes the command fail after all packages ran."""
        runner.add(commands.cmd_uninstall(SERIAL, 0, "com.a.one"), "Success\n")
        runner.add(commands.cmd_uninstall(SERIAL, 0, "com.b.two"), "Failure\n")
        runner.add(commands.pm_uninstall(SERIAL, 0, "com.b.two"), "Failure [not installed]\n", fail=True)

        result = invoke("app", "uninstall", "-s", SERIAL, "com.a.one", "com.b.two")

        assert result.exit_code == 1
        assert "Uninstall complete: success 1, failed 1" in result.output

    def test_label(self, runner, invoke):
        """Test printing an app label."""
        runner.add(commands.label_grep_cmd(SERIAL, "com.android.chrome"), "application-label:'Chrome'\n")

        result = invoke("app", "label", "-s", SERIAL, "com.android.chrome")

        assert result.exit_code == 0
        assert "Chrome" in result.output


class TestDeviceCommands:
    """Test shell, file and fastboot commands."""

    def test_ls(self, runner, invoke):
        """Test a directory listing."""
        runner.add(
            commands.list_dir_detailed(SERIAL, "/sdcard"),
            "total 8\ndrwxrwx--x 2 root sdcard_rw 4096 2023-05-01 10:22 DCIM/\n",
        )

        result = invoke("ls", "-s", SERIAL)

        assert result.exit_code == 0
        assert "DCIM/" in result.output

    def test_ls_failure(self, runner, invoke):
        """Test a listing that fails."""
        for build in (commands.list_dir_detailed, commands.list_dir_long, commands.list_dir_names):
            runner.add(build(SERIAL, "/data"), "permission denied", fail=True)

        result = invoke("ls", "/data", "-s", SERIAL)

        assert result.exit_code == 1
        assert "permission denied" in result.output

    def test_fastboot_passthrough(self, runner, invoke):
        """Test an arbitrary fastboot subcommand."""
        runner.add(["-s", SERIAL, "oem", "device-info"], "(bootloader) Device unlocked: true\n", tool="fastboot")

        result = invoke("fastboot", "-s", SERIAL, "oem", "device-info")

        assert result.exit_code == 0
        assert "Device unlocked: true" in result.output

    def test_reboot_mode(self, runner, invoke):
        """Test rebooting into recovery."""
        result = invoke("reboot", "-s", SERIAL, "--mode", "recovery")

        assert result.exit_code == 0
        assert runner.called(["-s", SERIAL, "reboot", "recovery"])


class TestConfigCommands:
    """Test configuration commands."""

    def test_set_adb_path(self, runner, invoke, config_file, tmp_path):
        """Test saving a validated adb path."""
        adb = tmp_path / "platform-tools" / "adb"
        adb.parent.mkdir()
        adb.write_text("")

        result = invoke("config", "set-adb-path", str(adb))

        assert result.exit_code == 0
        assert load_config(config_file).adb_path == str(adb.resolve())

    def test_set_invalid_adb_path(self, runner, invoke, config_file, tmp_path):
        """Test that an invalid path is rejected and not saved."""
        result = invoke("config", "set-adb-path", str(tmp_path / "missing"))

        assert result.exit_code == 1
        assert load_config(config_file).adb_path == "adb"


class TestLastDevice:
    """Test remembering the selected device between runs."""

    def test_explicit_serial_is_saved(self, runner, invoke, config_file):
        """Test that a serial given with -s is written to the config file."""
        result = invoke("reboot", "-s", SERIAL)

        assert result.exit_code == 0
        assert load_config(config_file).last_device == SERIAL

    def test_later_run_uses_saved_serial(self, runner, invoke):
        """Test that a command without -s targets the remembered device."""
        invoke("reboot", "-s", SERIAL)

        result = invoke("reboot", "--mode", "bootloader")

        assert result.exit_code == 0
        assert runner.called(["-s", SERIAL, "reboot", "bootloader"])

    def test_no_serial_leaves_config_alone(self, runner, invoke, config_file):
        """Test that running without -s does not store a device."""
        before = config_file.read_text()

        invoke("reboot")

        assert config_file.read_text() == before
        assert load_config(config_file).last_device is None
