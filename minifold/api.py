"""
Public entry points.

``minify()`` returns the minified text (or raises), or hands the outcome to
a ``callback(error, result)`` when one is given. ``minify_async()`` is the
awaitable variant. Both resolve settings first, then dispatch the plan.
"""

from typing import Any, Callable, List, Mapping, Optional, Union

from minifold.compressors.registry import CompressorRegistry, create_default_registry
from minifold.core.config import MinifySettings
from minifold.core.dispatcher import DispatchReport, Dispatcher
from minifold.core.errors import MinifyError, SettingsError
from minifold.core.resolver import SettingsResolver


SettingsLike = Union[MinifySettings, Mapping[str, Any]]
MinifyOutput = Union[str, List[Optional[str]]]

_default_registry: Optional[CompressorRegistry] = None


def default_registry() -> CompressorRegistry:
    """Registry of built-in compressors, created on first use."""
    global _default_registry
    if _default_registry is None:
        _default_registry = create_default_registry()
    return _default_registry


def _as_settings(settings: SettingsLike) -> MinifySettings:
    if isinstance(settings, MinifySettings):
        return settings
    return MinifySettings.from_dict(settings)


def run(settings: SettingsLike, registry: Optional[CompressorRegistry] = None) -> DispatchReport:
    """
    Resolve and execute settings, returning the full report.

    Args:
        settings: MinifySettings or mapping
        registry: Compressor registry. Defaults to the built-in compressors.

    Returns:
        DispatchReport
    """
    registry = registry or default_registry()
    plan = SettingsResolver(registry).resolve(_as_settings(settings))
    return Dispatcher(plan, registry=registry).dispatch()


def minify(
    settings: SettingsLike,
    callback: Optional[Callable[[Optional[Exception], Optional[MinifyOutput]], Any]] = None,
    registry: Optional[CompressorRegistry] = None,
) -> Optional[MinifyOutput]:
    """
    Minify according to settings.

    Args:
        settings: MinifySettings or mapping
        callback: Called once as ``callback(error, result)``. Falls back to
                  ``settings.callback``.
        registry: Compressor registry. Defaults to the built-in compressors.

    Returns:
        The minified text (one text per input in per-file mode), or None
        when a callback received the outcome
    """
    settings = _as_settings(settings)
    callback = callback or settings.callback

    try:
        report = run(settings, registry)
    except MinifyError as error:
        if callback is None:
            raise
        callback(error, None)
        return None

    if callback is None:
        return report.result
    callback(None, report.result)
    return None


async def minify_async(settings: SettingsLike, registry: Optional[CompressorRegistry] = None) -> MinifyOutput:
    """
    Awaitable variant of ``minify()``.

    Cancelling the awaiting task kills compressor processes still running.

    Args:
        settings: MinifySettings or mapping, without a callback
        registry: Compressor registry. Defaults to the built-in compressors.

    Returns:
        The minified text, or one text per input in per-file mode
    """
    settings = _as_settings(settings)
    if settings.callback is not None:
        raise SettingsError("callback cannot be combined with minify_async; await the result instead.")

    registry = registry or default_registry()
    plan = await SettingsResolver(registry).resolve_async(settings)
    report = await Dispatcher(plan, registry=registry).dispatch_async()
    return report.result
