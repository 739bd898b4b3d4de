"""Calls into a loaded script's contract functions.

Arguments travel as JSON text, are parsed inside the interpreter, and the
return value comes back as a ``JSON.stringify`` string decoded into models.
"""

from typing import Any

import quickjs
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from ..core import ScriptEvaluationError, SerializationError, get_logger, js_string_literal, safe_json_dumps
from ..models import PropertyGroup, ValidationError
from .sandbox import SandboxContext

logger = get_logger(__name__)

_PROPERTY_GROUPS = TypeAdapter(list[PropertyGroup])
_VALIDATION_ERRORS = TypeAdapter(list[ValidationError])

_GET_PROPERTIES_CALL = """
(function() {{
    var values = JSON.parse({values});
    var defaultProps = JSON.parse({props});
    if (typeof exports.getProperties === 'function') {{
        return JSON.stringify(exports.getProperties(values, defaultProps));
    }}
    return JSON.stringify(defaultProps);
}})()
"""

_CHECK_CALL = """
(function() {{
    var values = JSON.parse({values});
    if (typeof exports.check === 'function') {{
        var result = exports.check(values);
        return JSON.stringify(result || []);
    }}
    return "[]";
}})()
"""


def _encode(value: Any, what: str, stage: str) -> str:
    try:
        return js_string_literal(safe_json_dumps(value))
    except (TypeError, ValueError) as e:
        raise SerializationError(f"Failed to serialize {what}: {e}", stage=stage, original=e) from e


class Invoker:
    """Marshals calls to ``getProperties`` and ``check``."""

    def __init__(self, sandbox: SandboxContext) -> None:
        self._sandbox = sandbox

    def _call(self, function: str, script: str) -> str:
        try:
            result = self._sandbox.eval(script)
        except quickjs.JSException as e:
            logger.warning("contract_call_failed", function=function, error=str(e))
            raise ScriptEvaluationError(f"Failed to execute {function}: {e}", stage=function, original=e) from e

        if not isinstance(result, str):
            raise SerializationError(
                f"{function} did not return a JSON-serializable value", stage="deserialize_result"
            )
        return result

    def get_properties(self, values: Any, default_groups: list[PropertyGroup]) -> list[PropertyGroup]:
        """
        Run ``getProperties(values, defaultProperties)``.

        Returns the defaults unchanged when the script does not export it.

        Raises:
            SerializationError: If arguments or result cannot be marshaled
            ScriptEvaluationError: If the function throws
        """
        script = _GET_PROPERTIES_CALL.format(
            values=_encode(values, "values", "serialize_values"),
            props=_encode([group.to_script() for group in default_groups], "properties", "serialize_properties"),
        )
        result = self._call("getProperties", script)

        try:
            return _PROPERTY_GROUPS.validate_json(result)
        except PydanticValidationError as e:
            raise SerializationError(
                f"Failed to parse getProperties result: {e}", stage="deserialize_result", original=e
            ) from e

    def check(self, values: Any) -> list[ValidationError]:
        """
        Run ``check(values)``.

        A falsy return value, or a script without ``check``, yields no errors.

        Raises:
            SerializationError: If arguments or result cannot be marshaled
            ScriptEvaluationError: If the function throws
        """
        script = _CHECK_CALL.format(values=_encode(values, "values", "serialize_values"))
        result = self._call("check", script)

        try:
            return _VALIDATION_ERRORS.validate_json(result)
        except PydanticValidationError as e:
            raise SerializationError(
                f"Failed to parse check result: {e}", stage="deserialize_result", original=e
            ) from e
