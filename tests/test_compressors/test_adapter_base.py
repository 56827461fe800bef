"""
Tests for minifold.compressors.base module.
"""

from pathlib import Path

import pytest

from minifold.compressors.base import CompressionResult, JarAdapter, LibraryAdapter, ProcessAdapter
from minifold.core.errors import AdapterExecutionError, FileSystemError
from minifold.core.process_executor import ProcessExecutor
from minifold.core.resolver import ResolvedPlan


class UpperAdapter(LibraryAdapter):
    name = "upper"
    allowed_options = frozenset({"suffix"})

    def minify_text(self, text, options):
        return text.upper() + options.get("suffix", "")


class BrokenAdapter(LibraryAdapter):
    name = "broken"

    def minify_text(self, text, options):
        raise RuntimeError("parse failure at line 1")


class EchoAdapter(ProcessAdapter):
    name = "echo"
    binary_name = "echo-tool"
    allowed_options = frozenset({"level"})


class FileOnlyAdapter(EchoAdapter):
    name = "file-only"
    accepts_stdin = False


class StdinOnlyAdapter(EchoAdapter):
    name = "stdin-only"
    accepts_files = False


class FakeJarAdapter(JarAdapter):
    name = "fake-jar"
    jar_env = "FAKE_JAR"
    jvm_args = ("-Xss1m",)


@pytest.mark.unit
class TestLibraryAdapter:
    """Tests for in-process adapters."""

    def test_run_with_content(self, memory_plan):
        result = UpperAdapter().run(memory_plan("upper", content="abc"))

        assert isinstance(result, CompressionResult)
        assert result.output == "ABC"
        assert result.warnings == []

    def test_run_reads_and_joins_inputs(self, write_file):
        first = write_file("a.js", "one")
        second = write_file("b.js", "two")
        plan = ResolvedPlan(compressor="upper", inputs=(str(first), str(second)), output="out.js")

        assert UpperAdapter().run(plan).output == "ONE\nTWO"

    def test_run_with_index_reads_single_input(self, write_file):
        first = write_file("a.js", "one")
        second = write_file("b.js", "two")
        plan = ResolvedPlan(compressor="upper", inputs=(str(first), str(second)), output=("a.o", "b.o"))

        assert UpperAdapter().run(plan, index=1).output == "TWO"

    def test_unknown_options_are_dropped(self, memory_plan):
        plan = memory_plan("upper", content="a", options={"suffix": "!", "mangle": True, "colour": "blue"})

        assert UpperAdapter().run(plan).output == "A!"

    def test_filter_options(self):
        assert UpperAdapter().filter_options({"suffix": 1, "other": 2}) == {"suffix": 1}

    def test_library_exception_becomes_adapter_error(self, memory_plan):
        with pytest.raises(AdapterExecutionError) as exc_info:
            BrokenAdapter().run(memory_plan("broken"))

        assert exc_info.value.compressor == "broken"
        assert "parse failure at line 1" in exc_info.value.detail
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    def test_missing_input_is_filesystem_error(self, temp_dir):
        plan = ResolvedPlan(compressor="upper", inputs=(str(temp_dir / "missing.js"),), output="out.js")

        with pytest.raises(FileSystemError, match="Cannot read input file"):
            UpperAdapter().run(plan)


@pytest.mark.unit
class TestProcessAdapter:
    """Tests for spawned-process adapters."""

    def test_file_inputs_are_passed_as_arguments(self, fake_popen):
        mock_popen = fake_popen(stdout="min")
        plan = ResolvedPlan(
            compressor="echo", inputs=("a.js", "b.js"), output="out.js", executable="/bin/echo-tool",
            options={"level": 2, "unknown": True},
        )

        result = EchoAdapter().run(plan)

        assert result.output == "min"
        assert mock_popen.call_args[0][0] == ["/bin/echo-tool", "--level", "2", "a.js", "b.js"]

    def test_content_is_piped_to_stdin(self, fake_popen, memory_plan):
        mock_popen = fake_popen(stdout="min")

        EchoAdapter().run(memory_plan("echo", content="var a = 1;", executable="/bin/echo-tool"))

        assert mock_popen.call_args[0][0] == ["/bin/echo-tool"]
        mock_popen.return_value.communicate.assert_called_once_with(input="var a = 1;", timeout=None)

    def test_stdin_only_tool_gets_file_content(self, fake_popen, write_file):
        mock_popen = fake_popen(stdout="min")
        first = write_file("a.css", "a{}")
        second = write_file("b.css", "b{}")
        plan = ResolvedPlan(
            compressor="stdin-only", inputs=(str(first), str(second)), output="out.css", executable="/bin/tool"
        )

        StdinOnlyAdapter().run(plan)

        assert mock_popen.call_args[0][0] == ["/bin/tool"]
        mock_popen.return_value.communicate.assert_called_once_with(input="a{}\nb{}", timeout=None)

    def test_binary_is_looked_up(self, fake_popen, memory_plan, mocker):
        mock_popen = fake_popen(stdout="min")
        find = mocker.patch.object(ProcessExecutor, "find_executable", return_value="/usr/bin/echo-tool")

        EchoAdapter().run(memory_plan("echo"))

        find.assert_called_once_with("echo-tool", ())
        assert mock_popen.call_args[0][0][0] == "/usr/bin/echo-tool"

    def test_missing_binary(self, fake_popen, memory_plan, mocker):
        mock_popen = fake_popen()
        mocker.patch.object(ProcessExecutor, "find_executable", return_value=None)

        with pytest.raises(AdapterExecutionError, match="echo-tool not found"):
            EchoAdapter().run(memory_plan("echo"))

        mock_popen.assert_not_called()

    def test_failure_with_stderr_is_raised_even_with_partial_stdout(self, fake_popen, memory_plan):
        fake_popen(stdout="var a", stderr="SyntaxError: Unexpected token", returncode=1)

        with pytest.raises(AdapterExecutionError) as exc_info:
            EchoAdapter().run(memory_plan("echo", executable="/bin/echo-tool"))

        assert exc_info.value.detail == "SyntaxError: Unexpected token"

    def test_stderr_on_success_is_a_warning(self, fake_popen, memory_plan):
        fake_popen(stdout="var a=1;", stderr="WARN: deprecated option", returncode=0)

        result = EchoAdapter().run(memory_plan("echo", executable="/bin/echo-tool"))

        assert result.output == "var a=1;"
        assert len(result.warnings) == 1
        assert result.warnings[0].detail == "WARN: deprecated option"

    def test_uses_given_executor(self, memory_plan, mocker):
        executor = ProcessExecutor()
        run = mocker.patch.object(executor, "run")
        run.return_value.returncode = 0
        run.return_value.stdout = "out"
        run.return_value.stderr = ""

        result = EchoAdapter(executor=executor).run(memory_plan("echo", executable="/bin/echo-tool"))

        assert result.output == "out"
        run.assert_called_once()


@pytest.mark.unit
class TestScratchFileStaging:
    """Content given to file-only tools is staged and always cleaned up."""

    def test_scratch_file_exists_during_run_and_is_removed(self, fake_popen, memory_plan):
        seen = {}

        def capture(cmd, **kwargs):
            staged = Path(cmd[-1])
            seen["path"] = staged
            seen["content"] = staged.read_text(encoding="utf-8")

        fake_popen(stdout="min", side_effect=capture)

        result = FileOnlyAdapter().run(memory_plan("file-only", content="var a = 1;", executable="/bin/tool"))

        assert result.output == "min"
        assert seen["content"] == "var a = 1;"
        assert seen["path"].suffix == ".js"
        assert not seen["path"].exists()

    def test_scratch_file_removed_after_failure(self, fake_popen, memory_plan):
        seen = {}

        def capture(cmd, **kwargs):
            seen["path"] = Path(cmd[-1])

        fake_popen(stderr="ERROR - parse error", returncode=1, side_effect=capture)

        with pytest.raises(AdapterExecutionError):
            FileOnlyAdapter().run(memory_plan("file-only", executable="/bin/tool"))

        assert not seen["path"].exists()

    def test_scratch_file_removed_when_spawn_fails(self, mocker, memory_plan):
        seen = {}

        def explode(cmd, **kwargs):
            seen["path"] = Path(cmd[-1])
            raise OSError("exec format error")

        mocker.patch("minifold.core.process_executor.subprocess.Popen", side_effect=explode)

        with pytest.raises(AdapterExecutionError, match="Cannot start"):
            FileOnlyAdapter().run(memory_plan("file-only", executable="/bin/tool"))

        assert not seen["path"].exists()

    def test_tool_error_survives_cleanup_failure(self, fake_popen, memory_plan, mocker):
        fake_popen(stderr="ERROR - parse error", returncode=1)
        mocker.patch.object(Path, "unlink", side_effect=PermissionError("denied"))

        with pytest.raises(AdapterExecutionError) as exc_info:
            FileOnlyAdapter().run(memory_plan("file-only", executable="/bin/tool"))

        assert exc_info.value.detail == "ERROR - parse error"

    def test_concurrent_runs_use_distinct_scratch_files(self, fake_popen, memory_plan):
        paths = []
        fake_popen(stdout="min", side_effect=lambda cmd, **kwargs: paths.append(cmd[-1]))
        adapter = FileOnlyAdapter()

        adapter.run(memory_plan("file-only", content="a", executable="/bin/tool"))
        adapter.run(memory_plan("file-only", content="b", executable="/bin/tool"))

        assert len(set(paths)) == 2


@pytest.mark.unit
class TestJarAdapter:
    """Tests for JAR adapters."""

    def test_command_uses_java_and_jar(self, fake_popen, memory_plan):
        mock_popen = fake_popen(stdout="min")
        plan = memory_plan("fake-jar", java_path="/jdk/bin/java", executable="/opt/tool.jar")

        FakeJarAdapter().run(plan)

        assert mock_popen.call_args[0][0] == ["/jdk/bin/java", "-Xss1m", "-jar", "/opt/tool.jar"]

    def test_jar_from_environment(self, fake_popen, memory_plan, monkeypatch):
        mock_popen = fake_popen(stdout="min")
        monkeypatch.setenv("FAKE_JAR", "/env/tool.jar")

        FakeJarAdapter().run(memory_plan("fake-jar", java_path="/jdk/bin/java"))

        assert mock_popen.call_args[0][0][-1] == "/env/tool.jar"

    def test_missing_jar(self, fake_popen, memory_plan, monkeypatch):
        fake_popen()
        monkeypatch.delenv("FAKE_JAR", raising=False)

        with pytest.raises(AdapterExecutionError, match="Set FAKE_JAR"):
            FakeJarAdapter().run(memory_plan("fake-jar", java_path="/jdk/bin/java"))

    def test_missing_java(self, fake_popen, memory_plan, mocker):
        fake_popen()
        mocker.patch.object(ProcessExecutor, "find_java", return_value=None)

        with pytest.raises(AdapterExecutionError, match="Java not found"):
            FakeJarAdapter().run(memory_plan("fake-jar", executable="/opt/tool.jar"))
