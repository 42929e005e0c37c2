"""
Pytest configuration for the teapot test suite.

Integration tests drive a real C toolchain and only run with --full.
"""

import pytest


def pytest_addoption(parser):
    """Add custom command-line options."""
    parser.addoption(
        "--full",
        action="store_true",
        default=False,
        help="Run full test suite including integration tests (slow)",
    )


def pytest_configure(config):
    """Register markers."""
    config.addinivalue_line(
        "markers", "integration: builds real packages with the host C toolchain"
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless --full is given."""
    if config.getoption("--full"):
        return

    skip_integration = pytest.mark.skip(reason="integration test (use --full to run)")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)


@pytest.fixture
def make_package(tmp_path):
    """Factory writing a package directory with a tea.toml and optional files.

    Usage:
        app = make_package("app", '''
            [package]
            name = "app"
            version = "0.1.0"

            [dependencies]
        ''', {"src/app.c": "void app_main(void) {}"})
    """
    import textwrap

    def _make(relative_dir, manifest, files=None):
        package_dir = tmp_path / relative_dir
        package_dir.mkdir(parents=True, exist_ok=True)
        (package_dir / "tea.toml").write_text(textwrap.dedent(manifest).lstrip())
        for relative_path, content in (files or {}).items():
            path = package_dir / relative_path
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content)
        return package_dir

    return _make
