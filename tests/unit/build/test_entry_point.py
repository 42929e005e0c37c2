"""Unit tests for entry-point and test-harness generation."""

from teapot.build.entry_point import (
    GENERATED_HEADER,
    entry_symbol,
    generate_program_main,
    generate_test_harness,
    write_generated_source,
)


class TestProgramMain:
    """Tests for the program-mode shim."""

    def test_entry_symbol(self):
        assert entry_symbol("app") == "app_main"
        assert entry_symbol("my-app") == "my_app_main"

    def test_calls_entry_once(self):
        source = generate_program_main("app")

        assert source.startswith(GENERATED_HEADER)
        assert "void app_main(void);" in source
        assert "int main(void)" in source
        assert source.count("app_main();") == 1
        assert "return 0;" in source


class TestTestHarness:
    """Tests for the test-mode runner."""

    def test_calls_tests_in_given_order(self):
        source = generate_test_harness(["test_b", "test_a"])

        assert "void test_b(void);" in source
        assert "void test_a(void);" in source
        assert source.index("    test_b();") < source.index("    test_a();")
        assert 'printf("running 2 tests\\n");' in source
        assert "2 passed" in source

    def test_empty_harness_is_valid(self):
        source = generate_test_harness([])

        assert "int main(void)" in source
        assert 'printf("running 0 tests\\n");' in source
        assert "0 passed" in source
        assert "return 0;" in source
        assert "void test_" not in source


class TestWriteGeneratedSource:
    """Tests for writing generated translation units."""

    def test_creates_parent_directories(self, tmp_path):
        path = tmp_path / "target" / "debug" / "generated" / "main.c"

        result = write_generated_source(path, generate_program_main("app"))

        assert result == path
        assert "app_main" in path.read_text()
