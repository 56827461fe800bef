import glob
import os
from pathlib import PurePath
from typing import List, Optional, Sequence, Tuple, Union

from minifold.core.errors import SettingsError
from minifold.utils.file_processor import FileProcessor
from minifold.utils.logger import get_logger


WILDCARD = "*"
PLACEHOLDER = "$1"


def has_wildcard(path: str) -> bool:
    """Check whether a path contains the wildcard marker."""
    return WILDCARD in path


def apply_public_folder(path: str, public_folder: Optional[str]) -> str:
    """
    Prefix a path with the public folder unless it already starts with it.

    Absolute paths are returned unchanged. Applying the prefix twice gives
    the same result as applying it once.

    Args:
        path: Relative or absolute path
        public_folder: Folder prefix, or None for no prefixing

    Returns:
        Normalized path
    """
    if not public_folder:
        return path

    folder = os.path.normpath(public_folder)
    normalized = os.path.normpath(path)
    if os.path.isabs(normalized):
        return normalized

    folder_parts = PurePath(folder).parts
    if PurePath(normalized).parts[: len(folder_parts)] == folder_parts:
        return normalized
    return os.path.normpath(os.path.join(folder, normalized))


# ============================================================================
# Path Resolver
# ============================================================================


class PathResolver:
    """Expands wildcard input specifications into concrete file paths."""

    def __init__(self, public_folder: Optional[str] = None):
        """
        Initialize path resolver.

        Args:
            public_folder: Folder wildcard patterns are resolved in
        """
        self.public_folder = public_folder
        self.logger = get_logger()

    def resolve(self, spec: Union[str, Sequence[str]]) -> Union[str, List[str]]:
        """
        Resolve an input specification.

        A plain string without wildcard is returned unchanged. A wildcard
        string becomes the list of matching files. For a list, literal
        entries keep their order and the matches of every wildcard entry
        are appended after them; the wildcard entries themselves are dropped.

        Args:
            spec: Path, wildcard pattern, or list of either

        Returns:
            Unchanged path string or list of paths
        """
        if isinstance(spec, str):
            if not has_wildcard(spec):
                return spec
            return self.expand(spec)

        literals = [item for item in spec if not has_wildcard(item)]
        matches: List[str] = []
        for item in spec:
            if has_wildcard(item):
                matches.extend(self.expand(item))
        return literals + matches

    def expand(self, pattern: str) -> List[str]:
        """
        Expand a wildcard pattern against the filesystem.

        Matches are sorted so the result is stable for a given filesystem
        state. A pattern matching nothing yields an empty list.

        Args:
            pattern: Wildcard pattern, relative to the public folder if one is set

        Returns:
            Sorted list of matching file paths
        """
        if not has_wildcard(pattern):
            return []

        full_pattern = apply_public_folder(pattern, self.public_folder)
        matches = sorted(path for path in glob.glob(full_pattern, recursive=True) if os.path.isfile(path))
        if not matches:
            self.logger.warning(f"No files match {full_pattern}")
        else:
            self.logger.debug(f"{full_pattern} matched {len(matches)} file(s)")
        return matches


# ============================================================================
# Output Planner
# ============================================================================


class OutputPlanner:
    """Derives concrete output paths from an output template."""

    def __init__(self, public_folder: Optional[str] = None, replace_in_place: bool = False):
        """
        Initialize output planner.

        Args:
            public_folder: Folder prefix for derived outputs
            replace_in_place: Write each output next to its input
        """
        self.public_folder = public_folder
        self.replace_in_place = replace_in_place

    @staticmethod
    def has_placeholder(template: str) -> bool:
        return PLACEHOLDER in template

    def plan(self, inputs: Sequence[str], output: Union[str, Sequence[str]]) -> Union[str, Tuple[str, ...]]:
        """
        Plan the output path(s) for the given inputs.

        Args:
            inputs: Resolved input paths
            output: Output template, or an already planned list of outputs

        Returns:
            A single shared path (concatenation mode) or one path per input
        """
        if not isinstance(output, str):
            if len(output) != len(inputs):
                raise SettingsError(
                    f"output lists {len(output)} path(s) but input resolved to {len(inputs)} file(s)"
                )
            return tuple(self._prefix(path) for path in output)

        if not self.has_placeholder(output):
            return self._prefix(output)

        return tuple(self.derive(path, output) for path in inputs)

    def derive(self, input_path: str, template: str) -> str:
        """
        Substitute the base name of an input into the output template.

        In place, the input's directory is kept in front of the base name so
        a template like ``$1.min.js`` lands next to its input.

        Args:
            input_path: Input file path
            template: Output template containing the placeholder

        Returns:
            Output path
        """
        name = FileProcessor.base_name(input_path)
        if self.replace_in_place:
            name = os.path.join(os.path.dirname(input_path), name)
            return template.replace(PLACEHOLDER, name, 1)
        return self._prefix(template.replace(PLACEHOLDER, name, 1))

    def _prefix(self, path: str) -> str:
        if self.replace_in_place:
            return path
        return apply_public_folder(path, self.public_folder)
