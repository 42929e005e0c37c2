"""Unit tests for host platform detection and toolchain configuration."""

from unittest.mock import patch

import pytest

from teapot.config.host_platform import BASE_FEATURES, HostPlatformDetector, detect_host_platform
from teapot.config.toolchain_config import ToolchainConfig


class TestHostPlatformDetector:
    """Tests for mapping the host OS onto a platform feature."""

    @pytest.mark.parametrize(
        "system, expected",
        [
            ("Windows", "windows"),
            ("Linux", "linux"),
            ("Darwin", "linux"),
            ("FreeBSD", "linux"),
        ],
    )
    def test_detect(self, system, expected):
        with patch("teapot.config.host_platform.platform.system", return_value=system):
            assert HostPlatformDetector.detect() == expected
            assert detect_host_platform() == expected

    def test_detected_feature_is_a_base_feature(self):
        assert detect_host_platform() in BASE_FEATURES


class TestToolchainConfig:
    """Tests for resolving tools from the environment."""

    def test_defaults(self):
        with patch("teapot.config.toolchain_config.psutil.cpu_count", return_value=8):
            config = ToolchainConfig.from_environment({})

        assert config.cc == ("cc",)
        assert config.ar == ("ar",)
        assert config.nm == ("nm",)
        assert config.jobs == 8

    def test_cpu_count_unknown(self):
        with patch("teapot.config.toolchain_config.psutil.cpu_count", return_value=None):
            config = ToolchainConfig.from_environment({})

        assert config.jobs == 1

    def test_teapot_variables_take_precedence(self):
        env = {
            "CC": "gcc",
            "TEAPOT_CC": "clang",
            "AR": "gcc-ar",
            "NM": "llvm-nm",
        }

        config = ToolchainConfig.from_environment(env)

        assert config.cc == ("clang",)
        assert config.ar == ("gcc-ar",)
        assert config.nm == ("llvm-nm",)

    def test_launcher_prefix_is_split(self):
        config = ToolchainConfig.from_environment({"CC": "ccache gcc", "TEAPOT_AR": "  "})

        assert config.cc == ("ccache", "gcc")
        assert config.ar == ("ar",)

    def test_jobs_override(self):
        config = ToolchainConfig.from_environment({"TEAPOT_JOBS": "3"})

        assert config.jobs == 3

    def test_invalid_jobs_falls_back_to_cpu_count(self):
        with patch("teapot.config.toolchain_config.psutil.cpu_count", return_value=4):
            config = ToolchainConfig.from_environment({"TEAPOT_JOBS": "many"})

        assert config.jobs == 4

    def test_no_parallel_forces_single_worker(self):
        config = ToolchainConfig.from_environment({"NO_PARALLEL": "1", "TEAPOT_JOBS": "16"})

        assert config.jobs == 1
