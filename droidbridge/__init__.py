"""
droidbridge - command orchestration for Android devices over adb and fastboot.

Runs the platform tools, falls back through the command forms different
Android builds accept, and parses their plain-text output into typed results:
- Device enumeration across adb and fastboot
- Users, packages, properties and boot loader variables
- Directory listings, push/pull and app data extraction
- Background app label lookup
"""

__version__ = "0.1.0"
__author__ = "droidbridge Contributors"
