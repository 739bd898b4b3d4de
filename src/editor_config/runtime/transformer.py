"""ES module syntax rewriting for the embedded interpreter.

Editor config scripts are written as ES modules, but they are evaluated as a
plain script. Import statements are dropped (the only imports scripts rely on
are the helpers supplied by the injector) and export keywords are stripped so
the declarations land in the global scope.

Known limitations: multi-line import lists, ``export { a as b }`` aliases,
nested braces inside ``export { ... }`` and import/export words inside string
or template literals are not handled.
"""

import re

from ..core import get_logger

logger = get_logger(__name__)

# Applied in order; order matters (named and namespace imports before default).
_REWRITES: tuple[tuple[str, re.Pattern[str], str], ...] = (
    ("import_named", re.compile(r"""import\s+\{[^}]*\}\s+from\s+['"][^'"]*['"]\s*;?"""), ""),
    ("import_namespace", re.compile(r"""import\s+\*\s+as\s+\w+\s+from\s+['"][^'"]*['"]\s*;?"""), ""),
    ("import_default", re.compile(r"""import\s+\w+\s+from\s+['"][^'"]*['"]\s*;?"""), ""),
    ("export_const", re.compile(r"export\s+const\s+"), "const "),
    ("export_function", re.compile(r"export\s+function\s+"), "function "),
    ("export_default", re.compile(r"export\s+default\s+"), "module.exports.default = "),
    ("export_named", re.compile(r"export\s*\{[^}]*\}"), ""),
)


class SourceTransformer:
    """Rewrites ES module statements into plain script syntax."""

    def transform(self, source: str) -> str:
        """
        Rewrite import/export statements.

        Args:
            source: Editor config script as written by the widget author

        Returns:
            Script text without module syntax
        """
        result = source
        rewritten: dict[str, int] = {}
        for name, pattern, replacement in _REWRITES:
            result, count = pattern.subn(replacement, result)
            if count:
                rewritten[name] = count

        if rewritten:
            logger.debug("module_syntax_rewritten", **rewritten)
        return result


def transform_es_modules(source: str) -> str:
    """Convenience function to rewrite module syntax."""
    return SourceTransformer().transform(source)
