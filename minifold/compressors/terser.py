from typing import Any, Dict, List

from minifold.compressors.base import ProcessAdapter
from minifold.core.resolver import ResolvedPlan
from minifold.utils.file_processor import FileProcessor


# ============================================================================
# Terser / UglifyJS
# ============================================================================


class TerserAdapter(ProcessAdapter):
    """Runs the terser command-line tool."""

    name = "terser"
    binary_name = "terser"
    allowed_options = frozenset(
        {"compress", "mangle", "ecma", "module", "toplevel", "keep_classnames", "keep_fnames", "comments", "safari10"}
    )

    def build_args(self, plan: ResolvedPlan, files: List[str]) -> List[str]:
        # Files go first: --compress and --mangle take an optional value
        return files + self.option_args(self.filter_options(plan.options))

    def option_args(self, options: Dict[str, Any]) -> List[str]:
        return FileProcessor.build_args({key.replace("_", "-"): value for key, value in options.items()})


class UglifyJSAdapter(TerserAdapter):
    """Runs the uglifyjs command-line tool from uglify-js."""

    name = "uglify-js"
    binary_name = "uglifyjs"
    allowed_options = frozenset({"compress", "mangle", "toplevel", "keep_fnames", "comments", "ie", "webkit", "v8"})
