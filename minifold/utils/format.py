# ============================================================================
# Utility Functions
# ============================================================================

import json
from typing import Any, Dict, Optional


def format_size(size_bytes: int) -> str:
    """Format bytes to human-readable size."""
    for unit in ["B", "KB", "MB", "GB", "TB"]:
        if size_bytes < 1024.0:
            return f"{size_bytes:.2f} {unit}"
        size_bytes /= 1024.0
    return f"{size_bytes:.2f} PB"


def format_reduction(original_size: int, minified_size: int) -> str:
    """Describe the size change between two sizes as a percentage."""
    if original_size <= 0:
        return "0.0% reduction"
    ratio = (original_size - minified_size) / original_size * 100
    if ratio < 0:
        return f"{-ratio:.1f}% increase"
    return f"{ratio:.1f}% reduction"


def parse_options(options_str: Optional[str]) -> Dict[str, Any]:
    """
    Parse a JSON object string of compressor options.

    Args:
        options_str: JSON text such as '{"compress": true}'. Empty means no options.

    Returns:
        Dictionary of options

    Raises:
        ValueError: If the text is not valid JSON or not a JSON object
    """
    if not options_str or not options_str.strip():
        return {}

    try:
        options = json.loads(options_str)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid options JSON: {e}")

    if not isinstance(options, dict):
        raise ValueError(f"Options must be a JSON object, got: {options_str}")

    return options
