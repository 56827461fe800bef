import asyncio
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, List, Mapping, Optional, Tuple, Union

from minifold.core.config import MinifySettings, SettingsValidator
from minifold.core.errors import UnknownCompressorError
from minifold.core.paths import OutputPlanner, PathResolver, apply_public_folder
from minifold.utils.logger import get_logger


# ============================================================================
# Resolved Plan
# ============================================================================


@dataclass(frozen=True)
class ResolvedPlan:
    """Validated, wildcard-expanded settings ready for execution."""

    compressor: str
    inputs: Tuple[str, ...] = ()
    output: Union[str, Tuple[str, ...], None] = None
    content: Optional[str] = None
    public_folder: Optional[str] = None
    replace_in_place: bool = False
    sync: bool = False
    options: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
    buffer: int = 0
    callback: Optional[Callable] = None
    type: Optional[str] = None
    executable: Optional[str] = None
    java_path: Optional[str] = None
    timeout: Optional[float] = None

    @property
    def in_memory(self) -> bool:
        return self.content is not None

    @property
    def concatenated(self) -> bool:
        """True when every input feeds one shared output file."""
        return isinstance(self.output, str)

    @property
    def mode(self) -> str:
        if self.in_memory:
            return "memory"
        if self.concatenated:
            return "concatenate"
        return "per-file"

    def inputs_for(self, index: Optional[int] = None) -> Tuple[str, ...]:
        """Inputs consumed by one adapter invocation (all of them when index is None)."""
        if index is None:
            return self.inputs
        return (self.inputs[index],)

    def output_for(self, index: Optional[int] = None) -> Optional[str]:
        """Output written by one adapter invocation."""
        if self.output is None or isinstance(self.output, str):
            return self.output
        if index is None:
            raise ValueError("A per-file plan needs an index to select its output")
        return self.output[index]

    def to_settings(self) -> MinifySettings:
        """Turn the plan back into settings, e.g. to resolve it again."""
        return MinifySettings(
            compressor=self.compressor,
            input=list(self.inputs) if not self.in_memory else None,
            output=self.output if isinstance(self.output, str) or self.output is None else list(self.output),
            content=self.content,
            public_folder=self.public_folder,
            replace_in_place=self.replace_in_place,
            sync=self.sync,
            options=dict(self.options),
            buffer=self.buffer,
            callback=self.callback,
            type=self.type,
            executable=self.executable,
            java_path=self.java_path,
            timeout=self.timeout,
        )


# ============================================================================
# Settings Resolver
# ============================================================================


class SettingsResolver:
    """Turns user settings into a ResolvedPlan."""

    def __init__(self, registry=None):
        """
        Initialize settings resolver.

        Args:
            registry: CompressorRegistry used to check the compressor name.
                      If None, any name is accepted.
        """
        self.registry = registry
        self.logger = get_logger()

    def resolve(self, settings: Union[MinifySettings, Mapping[str, Any]]) -> ResolvedPlan:
        """
        Validate and resolve settings.

        Reads the filesystem to expand wildcards but never writes to it, so
        resolving the same settings twice gives the same plan.

        Args:
            settings: MinifySettings or a mapping of settings

        Returns:
            ResolvedPlan
        """
        if not isinstance(settings, MinifySettings):
            settings = MinifySettings.from_dict(settings)

        SettingsValidator.validate(settings)
        self._check_compressor(settings.compressor)

        if settings.in_memory:
            self.logger.debug(f"Resolved in-memory run for {settings.compressor}")
            return self._build_plan(settings, inputs=(), output=None)

        path_resolver = PathResolver(settings.public_folder)
        resolved = path_resolver.resolve(settings.input)
        paths: List[str] = [resolved] if isinstance(resolved, str) else list(resolved)
        # Outputs are planned from prefixed inputs so in-place outputs sit next to them
        inputs = tuple(apply_public_folder(path, settings.public_folder) for path in paths)

        planner = OutputPlanner(settings.public_folder, settings.replace_in_place)
        output = planner.plan(inputs, settings.output)

        plan = self._build_plan(settings, inputs=inputs, output=output)
        self.logger.debug(f"Resolved {len(plan.inputs)} input(s) in {plan.mode} mode for {plan.compressor}")
        return plan

    async def resolve_async(self, settings: Union[MinifySettings, Mapping[str, Any]]) -> ResolvedPlan:
        """Resolve settings without blocking the event loop on filesystem reads."""
        return await asyncio.to_thread(self.resolve, settings)

    def _check_compressor(self, name: str) -> None:
        if self.registry is not None and name not in self.registry:
            raise UnknownCompressorError(name, self.registry.names())

    @staticmethod
    def _build_plan(settings: MinifySettings, inputs: Tuple[str, ...], output) -> ResolvedPlan:
        return ResolvedPlan(
            compressor=settings.compressor,
            inputs=inputs,
            output=output,
            content=settings.content,
            public_folder=settings.public_folder,
            replace_in_place=settings.replace_in_place,
            sync=settings.sync,
            options=MappingProxyType(dict(settings.options)),
            buffer=settings.buffer,
            callback=settings.callback,
            type=settings.type,
            executable=settings.executable,
            java_path=settings.java_path,
            timeout=settings.timeout,
        )
