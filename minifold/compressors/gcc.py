import re
from typing import Any, Dict, List

from minifold.compressors.base import JarAdapter
from minifold.utils.file_processor import FileProcessor


# Flags accepted by the Closure Compiler command line, in the camelCase form
# they are given in settings.
ALLOWED_FLAGS = frozenset(
    {
        "angularPass",
        "applyInputSourceMaps",
        "assumeFunctionWrapper",
        "checksOnly",
        "compilationLevel",
        "createSourceMap",
        "dartPass",
        "defines",
        "env",
        "externs",
        "exportLocalPropertyDefinitions",
        "generateExports",
        "languageIn",
        "languageOut",
        "newTypeInf",
        "outputWrapper",
        "polymerVersion",
        "preserveTypeAnnotations",
        "processCommonJsModules",
        "renamePrefixNamespace",
        "rewritePolyfills",
        "useTypesForOptimization",
        "warningLevel",
    }
)

# camelCase names whose command-line flag is not the plain snake_case form
_FLAG_NAMES = {
    "defines": "define",
}


def to_flag_name(option: str) -> str:
    """Convert a camelCase option name to the compiler's snake_case flag."""
    if option in _FLAG_NAMES:
        return _FLAG_NAMES[option]
    return re.sub(r"(?<!^)(?=[A-Z])", "_", option).lower()


# ============================================================================
# Google Closure Compiler
# ============================================================================


class ClosureCompilerAdapter(JarAdapter):
    """Runs the Google Closure Compiler JAR."""

    name = "gcc"
    jar_env = "CLOSURE_COMPILER_JAR"
    allowed_options = ALLOWED_FLAGS
    # The compiler is fed real files; in-memory content is staged first
    accepts_stdin = False

    def build_args(self, plan, files: List[str]) -> List[str]:
        args = self.option_args(self.filter_options(plan.options))
        for path in files:
            args.extend(["--js", path])
        return args

    def option_args(self, options: Dict[str, Any]) -> List[str]:
        flags: Dict[str, Any] = {}
        for key, value in options.items():
            if key == "defines" and isinstance(value, dict):
                value = [f"{name}={_define_value(item)}" for name, item in value.items()]
            flags[to_flag_name(key)] = value
        return FileProcessor.build_args(flags)


def _define_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return f"'{value}'"
    return str(value)
