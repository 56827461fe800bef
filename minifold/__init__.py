"""
minifold - One interface over many JavaScript, CSS and HTML minifiers.
"""

__version__ = "0.1.0"

# Package-level exports for convenience
from minifold.api import minify, minify_async, run
from minifold.compressors.base import CompressionResult, CompressorAdapter, JarAdapter, LibraryAdapter, ProcessAdapter
from minifold.compressors.registry import CompressorRegistry, create_default_registry
from minifold.core.config import MinifySettings, SettingsValidator
from minifold.core.dispatcher import DispatchReport, Dispatcher
from minifold.core.errors import (
    AdapterExecutionError,
    AdapterExecutionWarning,
    BatchExecutionError,
    FileSystemError,
    MinifyError,
    MissingMandatoryField,
    SettingsError,
    UnknownCompressorError,
)
from minifold.core.paths import OutputPlanner, PathResolver, apply_public_folder
from minifold.core.process_executor import ProcessExecutor
from minifold.core.resolver import ResolvedPlan, SettingsResolver


__all__ = [
    "minify",
    "minify_async",
    "run",
    "MinifySettings",
    "SettingsValidator",
    "SettingsResolver",
    "ResolvedPlan",
    "PathResolver",
    "OutputPlanner",
    "apply_public_folder",
    "Dispatcher",
    "DispatchReport",
    "ProcessExecutor",
    "CompressorAdapter",
    "LibraryAdapter",
    "ProcessAdapter",
    "JarAdapter",
    "CompressionResult",
    "CompressorRegistry",
    "create_default_registry",
    "MinifyError",
    "SettingsError",
    "MissingMandatoryField",
    "UnknownCompressorError",
    "AdapterExecutionError",
    "AdapterExecutionWarning",
    "FileSystemError",
    "BatchExecutionError",
]
