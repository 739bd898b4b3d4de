"""One QuickJS interpreter loaded with one editor config script.

A ``SandboxContext`` is created, used and dropped on a single thread and is
never shared between evaluations.
"""

import quickjs

from ..core import Settings, ScriptEvaluationError, get_logger, get_settings
from ..monitoring import metrics_collector
from .injection import UtilityInjector
from .transformer import SourceTransformer

logger = get_logger(__name__)

# Function names a script may export. Only the first two are ever called.
CONTRACT_FUNCTIONS = ("getProperties", "check", "getPreview", "getCustomCaption")

_PRELUDE = """
var exports = {};
var module = { exports: exports };
"""


def build_wrapper_script(config_content: str) -> str:
    """
    Assemble the program evaluated for a script.

    Layout: module shims, missing helpers, the transformed script, then one
    line per contract function copying it onto ``exports``.
    """
    transformed = SourceTransformer().transform(config_content)
    injection = UtilityInjector().build_injection(transformed)
    epilogue = "".join(
        f"if (typeof {name} === 'function') exports.{name} = {name};\n"
        for name in CONTRACT_FUNCTIONS
    )
    return f"{_PRELUDE}\n{injection}\n{transformed}\n\n{epilogue}"


class SandboxContext:
    """A fresh interpreter with an editor config script loaded."""

    def __init__(self, config_content: str, settings: Settings | None = None) -> None:
        """
        Load a script.

        Args:
            config_content: Editor config script source
            settings: Runtime settings (defaults to environment settings)

        Raises:
            ScriptEvaluationError: If the script fails to parse or throws at top level
        """
        settings = settings or get_settings()
        self.wrapper_script = build_wrapper_script(config_content)

        self._context = quickjs.Context()
        self._context.set_max_stack_size(settings.script_max_stack_size)

        try:
            self._context.eval(self.wrapper_script)
        except quickjs.JSException as e:
            logger.warning("script_load_failed", error=str(e))
            raise ScriptEvaluationError(
                f"Failed to evaluate editor config: {e}", stage="load", original=e
            ) from e

        logger.debug("script_loaded", size=len(config_content))

    def eval(self, code: str) -> object:
        """Evaluate code in the loaded script's global scope."""
        return self._context.eval(code)

    def has(self, name: str) -> bool:
        """
        Probe whether the script exports a contract function.

        Never raises: a failed probe means the function is treated as absent.
        """
        if name not in CONTRACT_FUNCTIONS:
            logger.warning("unknown_contract_function", function=name)
            return False

        try:
            present = bool(self._context.eval(f"typeof exports.{name} === 'function'"))
        except Exception as e:
            logger.debug("contract_probe_failed", function=name, error=str(e))
            present = False

        metrics_collector.record_probe(name, present)
        return present

    def is_get_properties_available(self) -> bool:
        return self.has("getProperties")

    def is_check_available(self) -> bool:
        return self.has("check")
