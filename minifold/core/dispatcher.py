import asyncio
import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple, Union

from minifold.compressors.base import CompressionResult, CompressorAdapter
from minifold.compressors.registry import CompressorRegistry, create_default_registry
from minifold.core.errors import AdapterExecutionWarning, BatchExecutionError, MinifyError
from minifold.core.process_executor import ProcessExecutor
from minifold.core.resolver import ResolvedPlan
from minifold.utils.file_processor import FileProcessor
from minifold.utils.logger import get_logger


# Upper bound on concurrent per-file items (and so on concurrent tool processes)
MAX_WORKERS = os.cpu_count() or 4


# ============================================================================
# Dispatch Report
# ============================================================================


@dataclass
class DispatchReport:
    """Outcome of executing one plan."""

    mode: str
    outputs: List[Optional[str]] = field(default_factory=list)
    files: List[Dict] = field(default_factory=list)
    warnings: List[AdapterExecutionWarning] = field(default_factory=list)
    # (input path, error) pairs in input order; a path may repeat
    errors: List[Tuple[str, Exception]] = field(default_factory=list)

    @property
    def result(self) -> Union[str, List[Optional[str]]]:
        """Minified text, or one text per input in per-file mode."""
        if self.mode == "per-file":
            return list(self.outputs)
        return self.outputs[0] if self.outputs else ""


# ============================================================================
# Dispatcher
# ============================================================================


class Dispatcher:
    """Executes a resolved plan with one compressor adapter."""

    def __init__(
        self,
        plan: ResolvedPlan,
        adapter: Optional[CompressorAdapter] = None,
        registry: Optional[CompressorRegistry] = None,
    ):
        """
        Initialize dispatcher.

        Args:
            plan: Resolved plan to execute
            adapter: Adapter to use. Looked up from the registry by name if None.
            registry: Registry used for the lookup. Defaults to the built-in compressors.
        """
        self.plan = plan
        self.executor = ProcessExecutor(plan.buffer, plan.timeout)
        if adapter is None:
            adapter = (registry or create_default_registry()).create(plan.compressor, self.executor)
        self.adapter = adapter
        self.logger = get_logger()

    def dispatch(self) -> DispatchReport:
        """
        Execute the plan.

        In-memory runs return the text without writing anything. A shared
        output gets one invocation over all inputs. Per-file outputs get one
        invocation per input; a failing item does not stop the others, and
        all failures are raised together at the end.

        Returns:
            DispatchReport

        Raises:
            BatchExecutionError: One or more per-file items failed
        """
        report = DispatchReport(mode=self.plan.mode)

        if self.plan.in_memory:
            result = self.adapter.run(self.plan, content=self.plan.content)
            report.outputs.append(result.output)
            report.warnings.extend(result.warnings)
            return report

        if not self.plan.inputs:
            self.logger.warning("No input files to minify.")
            return report

        if self.plan.concatenated:
            self._run_item(None, report)
            return report

        self._run_batch(report)
        if report.errors:
            raise BatchExecutionError(report.errors, report)
        return report

    async def dispatch_async(self) -> DispatchReport:
        """Execute the plan off the event loop, killing spawned tools if cancelled."""
        try:
            return await asyncio.to_thread(self.dispatch)
        except asyncio.CancelledError:
            self.cancel()
            raise

    def cancel(self) -> None:
        """Kill any compressor process still running for this plan."""
        self.executor.cancel()

    def _run_batch(self, report: DispatchReport) -> None:
        indexes = range(len(self.plan.inputs))
        report.outputs.extend([None] * len(indexes))

        if self.plan.sync or len(indexes) == 1:
            for index in indexes:
                self._run_batch_item(index, report)
            return

        # Each worker spawns at most one process at a time
        workers = min(len(indexes), MAX_WORKERS)
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="minifold") as pool:
            outcomes = list(pool.map(self._try_item, indexes))

        for index, outcome in zip(indexes, outcomes):
            self._record_outcome(index, outcome, report)

    def _run_batch_item(self, index: int, report: DispatchReport) -> None:
        self._record_outcome(index, self._try_item(index), report)

    def _try_item(self, index: int) -> Union[Dict, MinifyError]:
        try:
            return self._execute(index)
        except MinifyError as error:
            return error

    def _record_outcome(self, index: int, outcome: Union[Dict, MinifyError], report: DispatchReport) -> None:
        input_path = self.plan.inputs[index]
        if isinstance(outcome, MinifyError):
            self.logger.error(f"Error minifying {input_path}: {outcome}")
            report.errors.append((input_path, outcome))
            report.files.append(self._build_file_info(self.plan.inputs_for(index), None, 0, f"error: {outcome}"))
            return

        report.outputs[index] = outcome["content"]
        report.warnings.extend(outcome["warnings"])
        report.files.append(outcome["info"])

    def _run_item(self, index: Optional[int], report: DispatchReport) -> None:
        outcome = self._execute(index)
        report.outputs.append(outcome["content"])
        report.warnings.extend(outcome["warnings"])
        report.files.append(outcome["info"])

    def _execute(self, index: Optional[int]) -> Dict:
        inputs = self.plan.inputs_for(index)
        output_path = self.plan.output_for(index)

        result: CompressionResult = self.adapter.run(self.plan, index=index)
        FileProcessor.write_file(output_path, result.output)

        info = self._build_file_info(inputs, output_path, len(result.output.encode("utf-8")), "success")
        self.logger.debug(f"{', '.join(inputs)} -> {output_path}")
        return {"content": result.output, "warnings": result.warnings, "info": info}

    @staticmethod
    def _build_file_info(inputs: Sequence[str], output_path: Optional[str], minified_size: int, status: str) -> Dict:
        original_size = 0
        for path in inputs:
            try:
                original_size += os.path.getsize(path)
            except OSError:
                pass
        return {
            "inputs": list(inputs),
            "output": output_path,
            "original_size": original_size,
            "minified_size": minified_size,
            "status": status,
        }
