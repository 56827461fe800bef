import os
import shutil
import subprocess  # nosec B404
import threading
from pathlib import Path
from typing import List, Optional, Sequence

from minifold.core.config import DEFAULT_BUFFER
from minifold.core.errors import AdapterExecutionError, AdapterExecutionWarning
from minifold.utils.logger import get_logger


# ============================================================================
# Process Executor
# ============================================================================


class ProcessExecutor:
    """Spawns compressor processes and collects their output."""

    def __init__(self, buffer: int = DEFAULT_BUFFER, timeout: Optional[float] = None):
        """
        Initialize process executor.

        Args:
            buffer: Buffer size hint for the pipes to the process
            timeout: Seconds before a running process is killed. None waits forever.
        """
        self.buffer = buffer
        self.timeout = timeout
        self.logger = get_logger()
        self._processes: List[subprocess.Popen] = []
        self._lock = threading.Lock()
        self._cancelled = False

    @staticmethod
    def find_executable(name: str, common_paths: Sequence[str] = ()) -> Optional[str]:
        """Find an executable in PATH or in common locations."""
        path = shutil.which(name)
        if path:
            return path

        for candidate in common_paths:
            if Path(candidate).exists():
                return candidate

        return None

    @staticmethod
    def find_java(java_path: Optional[str] = None) -> Optional[str]:
        """Find the Java runtime: explicit path, then JAVA_HOME, then PATH."""
        if java_path:
            return java_path

        java_home = os.environ.get("JAVA_HOME")
        if java_home:
            candidate = Path(java_home) / "bin" / ("java.exe" if os.name == "nt" else "java")
            if candidate.exists():
                return str(candidate)

        return shutil.which("java")

    def run(self, cmd: List[str], input_data: Optional[str] = None) -> subprocess.CompletedProcess:
        """
        Run a command to completion.

        Standard output and standard error are both drained before the
        result is returned. The process is killed if the timeout expires,
        if ``cancel()`` is called, or if the calling thread is interrupted.

        Args:
            cmd: Command and arguments
            input_data: Text written to the process's standard input

        Returns:
            CompletedProcess with text stdout and stderr
        """
        self.logger.debug(f"Running: {' '.join(cmd)}")
        with self._lock:
            if self._cancelled:
                raise AdapterExecutionError(Path(cmd[0]).name, "Execution cancelled")
            process = self._launch_process(cmd, input_data is not None)
            self._processes.append(process)
        try:
            stdout, stderr = self._communicate(process, cmd, input_data)
        finally:
            self._untrack(process)

        return subprocess.CompletedProcess(cmd, process.returncode, stdout, stderr)

    def cancel(self) -> None:
        """Kill every process currently started by this executor."""
        with self._lock:
            self._cancelled = True
            processes = list(self._processes)
        for process in processes:
            self.logger.debug(f"Killing process {process.pid}")
            process.kill()

    def _launch_process(self, cmd: List[str], with_stdin: bool) -> subprocess.Popen:
        try:
            return subprocess.Popen(  # nosec B603
                cmd,
                stdin=subprocess.PIPE if with_stdin else subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
                bufsize=self.buffer,
            )
        except OSError as e:
            raise AdapterExecutionError(Path(cmd[0]).name, f"Cannot start {cmd[0]}: {e}") from e

    def _communicate(self, process: subprocess.Popen, cmd: List[str], input_data: Optional[str]):
        try:
            return process.communicate(input=input_data, timeout=self.timeout)
        except subprocess.TimeoutExpired:
            process.kill()
            process.communicate()
            raise AdapterExecutionError(
                Path(cmd[0]).name, f"{cmd[0]} timed out after {self.timeout} seconds", process.returncode
            )
        except BaseException:
            process.kill()
            process.wait()
            raise

    def _untrack(self, process: subprocess.Popen) -> None:
        with self._lock:
            if process in self._processes:
                self._processes.remove(process)

    @staticmethod
    def check_result(result: subprocess.CompletedProcess, compressor: str) -> List[AdapterExecutionWarning]:
        """
        Decide whether a finished process succeeded.

        A non-zero exit is a failure, reported with the captured standard
        error when there is any. Standard error text from a process that
        exited zero is returned as warnings and does not fail the run.

        Args:
            result: Finished process
            compressor: Compressor name used in errors and warnings

        Returns:
            Warnings collected from standard error
        """
        stderr = result.stderr or ""
        if result.returncode != 0:
            detail = stderr if stderr.strip() else f"{result.args[0]} exited with status {result.returncode}"
            raise AdapterExecutionError(compressor, detail, result.returncode)

        if stderr.strip():
            return [AdapterExecutionWarning(compressor, stderr)]
        return []
