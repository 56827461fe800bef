from typing import Dict, Iterable, List, Optional, Type

from minifold.compressors.base import CompressorAdapter
from minifold.compressors.gcc import ClosureCompilerAdapter
from minifold.compressors.library import CSSCompressorAdapter, MinifyHTMLAdapter, RCSSMinAdapter, RJSMinAdapter
from minifold.compressors.terser import TerserAdapter, UglifyJSAdapter
from minifold.compressors.yui import YUICompressorAdapter
from minifold.core.errors import UnknownCompressorError
from minifold.core.process_executor import ProcessExecutor


# ============================================================================
# Compressor Registry
# ============================================================================


class CompressorRegistry:
    """Maps compressor names to adapter classes."""

    def __init__(self):
        self._adapters: Dict[str, Type[CompressorAdapter]] = {}

    def register(self, adapter_cls: Type[CompressorAdapter], aliases: Iterable[str] = ()) -> None:
        """
        Register an adapter under its name and optional aliases.

        Args:
            adapter_cls: CompressorAdapter subclass with a ``name``
            aliases: Extra names resolving to the same adapter
        """
        if not adapter_cls.name:
            raise ValueError(f"{adapter_cls.__name__} has no name")
        for key in (adapter_cls.name, *aliases):
            self._adapters[key] = adapter_cls

    def get(self, name: str) -> Type[CompressorAdapter]:
        """Return the adapter class registered under ``name``."""
        try:
            return self._adapters[name]
        except KeyError:
            raise UnknownCompressorError(name, self.names()) from None

    def create(self, name: str, executor: Optional[ProcessExecutor] = None) -> CompressorAdapter:
        """Instantiate the adapter registered under ``name``."""
        return self.get(name)(executor=executor)

    def names(self) -> List[str]:
        return sorted(self._adapters)

    def __contains__(self, name: object) -> bool:
        return name in self._adapters


def create_default_registry() -> CompressorRegistry:
    """Build a registry holding every built-in compressor."""
    registry = CompressorRegistry()
    registry.register(RJSMinAdapter)
    registry.register(RCSSMinAdapter)
    registry.register(CSSCompressorAdapter)
    registry.register(MinifyHTMLAdapter, aliases=("html-minifier",))
    registry.register(TerserAdapter)
    registry.register(UglifyJSAdapter)
    registry.register(ClosureCompilerAdapter, aliases=("google-closure-compiler",))
    registry.register(YUICompressorAdapter)
    return registry
