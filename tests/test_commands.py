"""Tests for the argument vector builders."""

import shlex

from droidbridge.adb import commands


class TestCommandBuilders:
    """Test argument construction."""

    def test_serial_prefix(self):
        """Test the device selector."""
        assert commands.for_serial("abc", "shell", "getprop") == ["-s", "abc", "shell", "getprop"]
        assert commands.for_serial("  ", "devices") == ["devices"]
        assert commands.for_serial(None, "devices") == ["devices"]

    def test_list_packages_forms(self):
        """Test the cmd and pm listing forms."""
        assert commands.list_packages("s", 10, "-3", tool="cmd") == [
            "-s", "s", "shell", "cmd", "package", "list", "packages", "--user", "10", "-3",
        ]
        assert commands.list_packages("", None) == ["shell", "pm", "list", "packages"]

    def test_label_script_is_one_shell_word(self):
        """Test that the grep pipeline is passed as a single quoted script."""
        args = commands.label_grep_dumpsys("s", "com.example")

        assert args[:5] == ["-s", "s", "shell", "sh", "-lc"]
        script = shlex.split(args[5])
        assert len(script) == 1
        assert script[0].startswith("dumpsys package com.example 2>/dev/null | grep -m 1 -E ")

    def test_pull_preserve_flag(self):
        """Test the attribute preserving pull."""
        assert commands.pull("s", "/sdcard/a", "out", preserve=True) == ["-s", "s", "pull", "-a", "/sdcard/a", "out"]

    def test_reboot(self):
        """Test the reboot forms."""
        assert commands.reboot("s") == ["-s", "s", "reboot"]
        assert commands.reboot("s", "bootloader") == ["-s", "s", "reboot", "bootloader"]
