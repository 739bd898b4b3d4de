"""Fast JSON encoding and decoding for the host/script boundary."""

from typing import Any
import json

import msgspec
import orjson

from .errors import SerializationError


class JSONParseError(SerializationError):
    """JSON parsing failed."""


def safe_json_dumps(obj: Any, **kwargs: Any) -> str:
    """
    Encode object to JSON string using fastest available library.

    Args:
        obj: Object to encode
        **kwargs: Additional arguments (indent, etc.)

    Returns:
        JSON string

    Raises:
        TypeError, ValueError: If the object is not JSON serializable
    """
    indent = kwargs.get("indent", 0)

    if indent == 0:
        try:
            return orjson.dumps(obj).decode("utf-8")
        except (TypeError, ValueError):
            # Fallback for edge cases (e.g., integers outside 64-bit range)
            pass

        try:
            return msgspec.json.encode(obj).decode("utf-8")
        except (TypeError, ValueError, OverflowError):
            pass

    # Pretty-printed output, or last resort for compact output
    return json.dumps(obj, indent=indent if indent > 0 else None, allow_nan=False)


def js_string_literal(text: str) -> str:
    """
    Quote text as a JavaScript string literal.

    A JSON string is a valid ES2019 string literal, so the encoder's escaping
    is all that is needed to splice arbitrary text into a script.
    """
    return orjson.dumps(text).decode("utf-8")


def load_json(data: str | bytes, name: str = "JSON") -> Any:
    """
    Decode a JSON document.

    Args:
        data: JSON text
        name: Name for error messages

    Returns:
        Decoded Python value

    Raises:
        JSONParseError: If the text is not valid JSON
    """
    if isinstance(data, str):
        data = data.encode("utf-8")
    try:
        return msgspec.json.decode(data)
    except msgspec.DecodeError as e:
        raise JSONParseError(f"Invalid {name}: {e}", stage="decode", original=e) from e
