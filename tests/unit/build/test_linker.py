"""Unit tests for toolchain wrappers: compile executor, archiver, linker."""

import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from teapot.build.archive_creator import ArchiveCreator
from teapot.build.build_utils import (
    ToolchainInvocationError,
    archive_path,
    c_identifier,
    run_tool,
    tool_command,
)
from teapot.build.compilation_executor import CompilationExecutor
from teapot.build.linker import Linker


def completed(cmd, returncode=0, stdout="", stderr=""):
    return subprocess.CompletedProcess(cmd, returncode, stdout=stdout, stderr=stderr)


class TestRunTool:
    """Tests for the shared subprocess wrapper."""

    def test_success(self):
        with patch("teapot.build.build_utils.subprocess.run", return_value=completed(["cc"], stdout="ok")) as mock_run:
            result = run_tool(["cc", "--version"], "query compiler")

        assert result.stdout == "ok"
        assert mock_run.call_args[0][0] == ["cc", "--version"]
        assert mock_run.call_args[1]["capture_output"] is True

    def test_nonzero_exit(self):
        failed = completed(["cc"], returncode=2, stdout="out", stderr="err")
        with patch("teapot.build.build_utils.subprocess.run", return_value=failed):
            with pytest.raises(ToolchainInvocationError) as exc_info:
                run_tool(["cc", "x.c"], "compile x.c")

        error = exc_info.value
        assert error.returncode == 2
        assert error.command == ["cc", "x.c"]
        assert "Failed to compile x.c (exit code 2)" in str(error)
        assert "stdout: out" in str(error)
        assert "stderr: err" in str(error)

    def test_missing_executable(self):
        with patch("teapot.build.build_utils.subprocess.run", side_effect=FileNotFoundError("no such file")):
            with pytest.raises(ToolchainInvocationError, match="could not run nope"):
                run_tool(["nope"], "compile x.c")


class TestHelpers:
    """Tests for naming helpers."""

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("app", "app"),
            ("my-app", "my_app"),
            ("json.c", "json_c"),
            ("2d", "_2d"),
        ],
    )
    def test_c_identifier(self, name, expected):
        assert c_identifier(name) == expected

    def test_archive_path(self, tmp_path):
        assert archive_path(tmp_path, "util") == tmp_path / "libutil.a"

    @pytest.mark.parametrize(
        "tool, expected",
        [
            ("cc", ["cc"]),
            ("ccache gcc", ["ccache", "gcc"]),
            ("'/opt/my tools/cc' -m32", ["/opt/my tools/cc", "-m32"]),
            (("distcc", "cc"), ["distcc", "cc"]),
        ],
    )
    def test_tool_command(self, tool, expected):
        assert tool_command(tool) == expected


class TestCompilationExecutor:
    """Tests for single-source compilation."""

    def test_build_command(self):
        executor = CompilationExecutor("clang")

        cmd = executor.build_command(Path("src/a.c"), Path("obj/a.o"), ["-DX", "-Iinc"])

        assert cmd == ["clang", "-DX", "-Iinc", "-c", str(Path("src/a.c")), "-o", str(Path("obj/a.o"))]

    def test_launcher_prefix_is_split(self):
        executor = CompilationExecutor("ccache gcc")

        cmd = executor.build_command(Path("a.c"), Path("a.o"), [])

        assert cmd[:2] == ["ccache", "gcc"]
        assert cmd[2:] == ["-c", "a.c", "-o", "a.o"]

    def test_compile_source_creates_output_directory(self, tmp_path):
        source = tmp_path / "a.c"
        source.write_text("int x;")
        output = tmp_path / "objects" / "pkg" / "a.o"

        with patch("teapot.build.build_utils.subprocess.run", return_value=completed([])):
            result = CompilationExecutor().compile_source(source, output, [])

        assert result == output
        assert output.parent.is_dir()

    def test_missing_source(self, tmp_path):
        with pytest.raises(ToolchainInvocationError, match="Source file not found"):
            CompilationExecutor().compile_source(tmp_path / "gone.c", tmp_path / "gone.o", [])


class TestArchiveCreator:
    """Tests for static archive creation."""

    def test_replaces_existing_archive(self, tmp_path):
        archive = tmp_path / "libutil.a"
        archive.write_bytes(b"stale")
        seen_before_run = []

        def fake_run(cmd, **kwargs):
            seen_before_run.append(archive.exists())
            archive.write_bytes(b"!<arch>\n")
            return completed(cmd)

        with patch("teapot.build.build_utils.subprocess.run", side_effect=fake_run) as mock_run:
            result = ArchiveCreator().create_archive(archive, [tmp_path / "a.o", tmp_path / "b.o"])

        assert result == archive
        assert seen_before_run == [False]
        assert mock_run.call_args[0][0] == [
            "ar", "rcs", str(archive), str(tmp_path / "a.o"), str(tmp_path / "b.o"),
        ]

    def test_archive_not_created(self, tmp_path):
        with patch("teapot.build.build_utils.subprocess.run", return_value=completed([])):
            with pytest.raises(ToolchainInvocationError, match="Archive was not created"):
                ArchiveCreator().create_archive(tmp_path / "libx.a", [])


class TestLinker:
    """Tests for executable linking."""

    def test_inputs_precede_link_flags(self, tmp_path):
        linker = Linker("gcc")

        cmd = linker.build_command([tmp_path / "main.o", tmp_path / "libapp.a"], tmp_path / "app", ["-lm"])

        assert cmd == ["gcc", str(tmp_path / "main.o"), str(tmp_path / "libapp.a"), "-o", str(tmp_path / "app"), "-lm"]

    def test_link_failure(self, tmp_path):
        failed = completed([], returncode=1, stderr="undefined reference to `app_main'")
        with patch("teapot.build.build_utils.subprocess.run", return_value=failed):
            with pytest.raises(ToolchainInvocationError, match="app_main"):
                Linker().link([tmp_path / "main.o"], tmp_path / "app", ["-lm"])

    def test_argv_list_compiler(self, tmp_path):
        cmd = Linker(["ccache", "cc"]).build_command([tmp_path / "main.o"], tmp_path / "app", [])

        assert cmd == ["ccache", "cc", str(tmp_path / "main.o"), "-o", str(tmp_path / "app")]
