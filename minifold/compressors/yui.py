from typing import List

from minifold.compressors.base import JarAdapter
from minifold.core.resolver import ResolvedPlan


# ============================================================================
# YUI Compressor
# ============================================================================


class YUICompressorAdapter(JarAdapter):
    """
    Runs the YUI Compressor JAR on JavaScript or CSS.

    Content always goes through standard input, so file inputs are read
    and concatenated first. The ``type`` setting picks js (default) or css.
    """

    name = "yui"
    jar_env = "YUI_COMPRESSOR_JAR"
    jvm_args = ("-Xss2048k",)
    accepts_files = False
    allowed_options = frozenset(
        {"charset", "line-break", "nomunge", "preserve-semi", "disable-optimizations", "verbose"}
    )

    def build_args(self, plan: ResolvedPlan, files: List[str]) -> List[str]:
        return ["--type", plan.type or "js"] + self.option_args(self.filter_options(plan.options)) + files
