"""Host Platform Detection.

This module maps the running operating system onto one of the two implicit
platform features every package carries.

Supported Platforms:
    - Windows: windows
    - Linux, macOS and other POSIX systems: linux
"""

import platform
from typing import Tuple

# Implicit features present in every package's feature universe
BASE_FEATURES: Tuple[str, ...] = ("windows", "linux")


class HostPlatformDetector:
    """Detects which implicit platform feature applies to the current host."""

    @staticmethod
    def detect() -> str:
        """Detect the host platform feature name.

        Returns:
            'windows' on Windows hosts, 'linux' everywhere else
        """
        system = platform.system().lower()

        if system == "windows":
            return "windows"
        return "linux"


def detect_host_platform() -> str:
    """Shortcut for HostPlatformDetector.detect()."""
    return HostPlatformDetector.detect()
