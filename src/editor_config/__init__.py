"""
Editor Config Runtime
Evaluates widget editor config scripts to filter property schemas and
validate configuration values.
"""

from .core import (
    EditorConfigError,
    ThreadSpawnError,
    ScriptEvaluationError,
    SerializationError,
    ThreadPanicError,
    ScriptTimeoutError,
    Settings,
    get_settings,
    configure_logging,
)
from .models import (
    PropertyDescriptor,
    PropertyGroup,
    WidgetDefinition,
    ValidationError,
    EvaluationResult,
    PropertyVisibilityResult,
)
from .evaluator import (
    EditorConfigEvaluator,
    evaluate_editor_config,
    get_visible_property_keys,
    validate_editor_config_values,
    get_property_visibility_with_counts,
)

__version__ = "0.1.0"

__all__ = [
    # Operations
    "EditorConfigEvaluator",
    "evaluate_editor_config",
    "get_visible_property_keys",
    "validate_editor_config_values",
    "get_property_visibility_with_counts",
    # Models
    "PropertyDescriptor",
    "PropertyGroup",
    "WidgetDefinition",
    "ValidationError",
    "EvaluationResult",
    "PropertyVisibilityResult",
    # Errors
    "EditorConfigError",
    "ThreadSpawnError",
    "ScriptEvaluationError",
    "SerializationError",
    "ThreadPanicError",
    "ScriptTimeoutError",
    # Config
    "Settings",
    "get_settings",
    "configure_logging",
]
