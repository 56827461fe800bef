import os
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Sequence

from minifold.core.errors import AdapterExecutionError, AdapterExecutionWarning, MinifyError
from minifold.core.process_executor import ProcessExecutor
from minifold.core.resolver import ResolvedPlan
from minifold.utils.file_processor import FileProcessor
from minifold.utils.logger import get_logger


@dataclass
class CompressionResult:
    """Minified text produced by one adapter invocation."""

    output: str
    warnings: List[AdapterExecutionWarning] = field(default_factory=list)


# ============================================================================
# Compressor Adapter
# ============================================================================


class CompressorAdapter(ABC):
    """
    Runs one compressor against resolved settings.

    Subclasses pick an execution strategy (library call, native process or
    Java JAR) but all of them are driven through ``run()``.
    """

    name: str = ""
    # Option keys forwarded to the tool. Anything else is dropped.
    allowed_options: FrozenSet[str] = frozenset()

    def __init__(self, executor: Optional[ProcessExecutor] = None):
        """
        Initialize compressor adapter.

        Args:
            executor: ProcessExecutor used to spawn tools. Created per run if None.
        """
        self.executor = executor
        self.logger = get_logger()

    def run(self, plan: ResolvedPlan, content: Optional[str] = None, index: Optional[int] = None) -> CompressionResult:
        """
        Minify in-memory content or the inputs selected by ``index``.

        Args:
            plan: Resolved settings
            content: In-memory text. When given, file inputs are ignored.
            index: Position of the single input to minify. None means all inputs.

        Returns:
            CompressionResult

        Raises:
            AdapterExecutionError: The tool failed
            FileSystemError: An input or scratch file could not be read or written
        """
        inputs: Sequence[str] = () if content is not None else plan.inputs_for(index)
        try:
            return self.execute(plan, content, inputs)
        except MinifyError:
            raise
        except Exception as e:
            raise AdapterExecutionError(self.name, f"{type(e).__name__}: {e}") from e

    @abstractmethod
    def execute(self, plan: ResolvedPlan, content: Optional[str], inputs: Sequence[str]) -> CompressionResult:
        """Do the actual work for one invocation."""

    def filter_options(self, options: Mapping[str, Any]) -> Dict[str, Any]:
        """Keep only the options this compressor recognizes."""
        accepted = {key: value for key, value in options.items() if key in self.allowed_options}
        dropped = sorted(set(options) - set(accepted))
        if dropped:
            self.logger.debug(f"{self.name}: ignoring unsupported option(s) {', '.join(dropped)}")
        return accepted


# ============================================================================
# Library Adapter
# ============================================================================


class LibraryAdapter(CompressorAdapter):
    """Calls a Python minification library in-process."""

    def execute(self, plan: ResolvedPlan, content: Optional[str], inputs: Sequence[str]) -> CompressionResult:
        text = content if content is not None else FileProcessor.read_files(inputs)
        return CompressionResult(self.minify_text(text, self.filter_options(plan.options)))

    @abstractmethod
    def minify_text(self, text: str, options: Dict[str, Any]) -> str:
        """Minify a string with the library."""


# ============================================================================
# Process Adapter
# ============================================================================


class ProcessAdapter(CompressorAdapter):
    """Spawns a native executable and captures its standard output."""

    binary_name: str = ""
    common_paths: Sequence[str] = ()
    # Input files can be passed as arguments
    accepts_files: bool = True
    # In-memory content can be piped to standard input
    accepts_stdin: bool = True
    # Suffix of scratch files staged for tools that only read files
    extension: str = ".js"

    def execute(self, plan: ResolvedPlan, content: Optional[str], inputs: Sequence[str]) -> CompressionResult:
        executor = self.executor or ProcessExecutor(plan.buffer, plan.timeout)

        if content is None and self.accepts_files:
            return self._spawn(executor, plan, list(inputs), None)

        if content is None:
            content = FileProcessor.read_files(inputs)

        if self.accepts_stdin:
            return self._spawn(executor, plan, [], content)

        with FileProcessor.staged_content(content, self.extension) as staged:
            return self._spawn(executor, plan, [str(staged)], None)

    def command(self, plan: ResolvedPlan, executor: ProcessExecutor) -> List[str]:
        """Command prefix used to start the tool."""
        binary = plan.executable or executor.find_executable(self.binary_name, self.common_paths)
        if binary is None:
            raise AdapterExecutionError(
                self.name,
                f"{self.binary_name} not found. Install it and add it to PATH, "
                "or specify its path with the executable setting.",
            )
        return [binary]

    def build_args(self, plan: ResolvedPlan, files: List[str]) -> List[str]:
        """Arguments following the command prefix."""
        return self.option_args(self.filter_options(plan.options)) + files

    def option_args(self, options: Dict[str, Any]) -> List[str]:
        return FileProcessor.build_args(options)

    def _spawn(
        self, executor: ProcessExecutor, plan: ResolvedPlan, files: List[str], input_data: Optional[str]
    ) -> CompressionResult:
        cmd = self.command(plan, executor) + self.build_args(plan, files)
        result = executor.run(cmd, input_data=input_data)
        warnings = executor.check_result(result, self.name)
        for warning in warnings:
            self.logger.warning(str(warning))
        return CompressionResult(result.stdout or "", warnings)


# ============================================================================
# JAR Adapter
# ============================================================================


class JarAdapter(ProcessAdapter):
    """Runs a Java JAR through the Java runtime."""

    # Environment variable holding the JAR path
    jar_env: str = ""
    jvm_args: Sequence[str] = ()

    def command(self, plan: ResolvedPlan, executor: ProcessExecutor) -> List[str]:
        java = executor.find_java(plan.java_path)
        if java is None:
            raise AdapterExecutionError(
                self.name, "Java not found. Install a Java runtime, set JAVA_HOME, or use the java_path setting."
            )

        jar = plan.executable or os.environ.get(self.jar_env)
        if not jar:
            raise AdapterExecutionError(
                self.name, f"{self.name} JAR not found. Set {self.jar_env} or use the executable setting."
            )
        return [java, *self.jvm_args, "-jar", jar]
