"""Toolchain configuration.

Resolves the external tools (compiler driver, archiver, symbol inspector)
and the compile worker count from the environment.

Environment variables:
    TEAPOT_CC / CC     C compiler driver (default: cc)
    TEAPOT_AR / AR     Archiver (default: ar)
    TEAPOT_NM / NM     Symbol table inspector (default: nm)
    TEAPOT_JOBS        Parallel compile workers (default: logical CPU count)
    NO_PARALLEL        When set, forces a single compile worker

Tool variables are split with shell quoting rules, so a launcher prefix such
as CC="ccache gcc" runs ccache with gcc as its first argument.
"""

import logging
import os
import shlex
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

import psutil


def default_jobs() -> int:
    """Number of compile workers matching the host's hardware concurrency."""
    return psutil.cpu_count(logical=True) or 1


@dataclass(frozen=True)
class ToolchainConfig:
    """External tool executables used by the compilation engine."""

    cc: Tuple[str, ...] = ("cc",)
    ar: Tuple[str, ...] = ("ar",)
    nm: Tuple[str, ...] = ("nm",)
    jobs: int = 1

    @classmethod
    def from_environment(cls, env: Optional[Mapping[str, str]] = None) -> "ToolchainConfig":
        """Build a configuration from environment variables.

        Args:
            env: Mapping to read from (defaults to os.environ)

        Returns:
            ToolchainConfig with resolved tool command prefixes and worker count
        """
        if env is None:
            env = os.environ

        def pick(primary: str, fallback: str, default: str) -> Tuple[str, ...]:
            value = env.get(primary) or env.get(fallback) or ""
            return tuple(shlex.split(value)) or (default,)

        jobs = default_jobs()
        if env.get("NO_PARALLEL"):
            logging.info("NO_PARALLEL set - forcing sequential compilation")
            jobs = 1
        elif env.get("TEAPOT_JOBS"):
            try:
                jobs = max(1, int(env["TEAPOT_JOBS"]))
            except ValueError:
                logging.warning(f"Ignoring invalid TEAPOT_JOBS value: {env['TEAPOT_JOBS']!r}")

        return cls(
            cc=pick("TEAPOT_CC", "CC", "cc"),
            ar=pick("TEAPOT_AR", "AR", "ar"),
            nm=pick("TEAPOT_NM", "NM", "nm"),
            jobs=jobs,
        )
