from typing import List, Optional, Tuple


# ============================================================================
# Error Taxonomy
# ============================================================================


class MinifyError(Exception):
    """Base class for every error raised by minifold."""


class SettingsError(MinifyError, ValueError):
    """A settings value is invalid."""


class MissingMandatoryField(SettingsError):
    """A required settings field is absent."""

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"{field} is mandatory.")


class UnknownCompressorError(SettingsError):
    """The requested compressor is not registered."""

    def __init__(self, compressor: str, available=()):
        self.compressor = compressor
        self.available = sorted(available)
        message = f"Unknown compressor: {compressor}"
        if self.available:
            message += f". Available compressors: {', '.join(self.available)}"
        super().__init__(message)


class AdapterExecutionError(MinifyError):
    """The underlying tool reported a failure."""

    def __init__(self, compressor: str, detail: str, returncode: Optional[int] = None):
        self.compressor = compressor
        self.detail = detail
        self.returncode = returncode
        super().__init__(detail)


class AdapterExecutionWarning(UserWarning):
    """Diagnostic text emitted by a tool that still reported success."""

    def __init__(self, compressor: str, detail: str):
        self.compressor = compressor
        self.detail = detail
        super().__init__(f"{compressor}: {detail}")


class FileSystemError(MinifyError, OSError):
    """Reading or writing an input, output or scratch file failed."""

    def __init__(self, path, message: str):
        self.path = str(path)
        super().__init__(f"{message}: {self.path}")

    def __str__(self) -> str:
        return self.args[0]


class BatchExecutionError(MinifyError):
    """One or more items of a per-file batch failed."""

    def __init__(self, errors: List[Tuple[str, Exception]], report=None):
        self.errors = errors
        self.report = report
        lines = [f"{len(errors)} file(s) failed to minify:"]
        lines.extend(f"  {path}: {error}" for path, error in errors)
        super().__init__("\n".join(lines))
