"""Constant values and name validation rules used by the AMS service."""

import re

DEFAULT_NETWORK_NAME = "amsbr0"
"""Default LXD network name AMS creates."""

DEFAULT_NODE_BRIDGE_ADDRESS = "192.168.100.1"
"""IP address assigned to the default network bridge on all LXD nodes."""

APPLICATION_NAME_PATTERN = r"^([A-Za-z0-9_\-\.]*)$"
"""Regular expression validating an application name."""

ADDON_NAME_PATTERN = APPLICATION_NAME_PATTERN
"""Regular expression validating an addon name."""

ANDROID_PACKAGE_NAME_PATTERN = r"^([A-Za-z]{1}[A-Za-z\d_]*\.){1,}[A-Za-z][A-Za-z\d_]*$"
"""Regular expression validating an Android package name."""

VERSION = "unknown"
"""Version of AMS as set by the build system."""

_APPLICATION_NAME_RE = re.compile(APPLICATION_NAME_PATTERN, re.ASCII)
_ADDON_NAME_RE = re.compile(ADDON_NAME_PATTERN, re.ASCII)
_ANDROID_PACKAGE_NAME_RE = re.compile(ANDROID_PACKAGE_NAME_PATTERN, re.ASCII)


def is_valid_application_name(name: str) -> bool:
    """Return True if ``name`` is an acceptable application name."""
    return _APPLICATION_NAME_RE.fullmatch(name) is not None


def is_valid_addon_name(name: str) -> bool:
    """Return True if ``name`` is an acceptable addon name."""
    return _ADDON_NAME_RE.fullmatch(name) is not None


def is_valid_android_package_name(name: str) -> bool:
    """Return True if ``name`` is a well-formed Android package name."""
    return _ANDROID_PACKAGE_NAME_RE.fullmatch(name) is not None