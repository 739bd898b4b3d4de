"""Public operations: evaluate an editor config script against user values.

Every operation runs its whole pipeline (load, probe, call) inside exactly one
isolated worker thread with its own interpreter, so concurrent calls never
share script state.
"""

from collections.abc import Callable, Mapping
from typing import Any, TypeVar

from pydantic import ValidationError as PydanticValidationError
from returns.result import Failure

from .core import LogContext, SerializationError, Settings, get_logger, get_settings
from .models import (
    EvaluationResult,
    PropertyGroup,
    PropertyVisibilityResult,
    ValidationError,
    WidgetDefinition,
)
from .monitoring import metrics_collector
from .properties import count_groups, deep_clone_property_groups, extract_all_property_keys
from .runtime import Invoker, SandboxContext, run_isolated

logger = get_logger(__name__)

T = TypeVar("T")

WidgetDefinitionInput = WidgetDefinition | Mapping[str, Any]


def _coerce_definition(widget_definition: WidgetDefinitionInput) -> WidgetDefinition:
    if isinstance(widget_definition, WidgetDefinition):
        return widget_definition
    try:
        return WidgetDefinition.model_validate(widget_definition)
    except PydanticValidationError as e:
        raise SerializationError(
            f"Invalid widget definition: {e}", stage="deserialize_definition", original=e
        ) from e


class EditorConfigEvaluator:
    """Runs editor config scripts in isolated sandboxes."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()

    def _run(self, operation: str, work: Callable[[SandboxContext, Invoker], T], config_content: str) -> T:
        def isolated() -> T:
            with LogContext(operation=operation):
                sandbox = SandboxContext(config_content, self.settings)
                return work(sandbox, Invoker(sandbox))

        status = "success"

        def record(duration: float) -> None:
            metrics_collector.record_evaluation(operation, status, duration)

        with metrics_collector.measure_duration(record):
            result = run_isolated(isolated, self.settings)
            if isinstance(result, Failure):
                status = "error"
                error = result.failure()
                metrics_collector.record_error(type(error).__name__, error.stage)
                logger.warning(
                    "evaluation_failed",
                    operation=operation,
                    error_type=type(error).__name__,
                    stage=error.stage,
                    error=str(error),
                )
                raise error

        return result.unwrap()

    @staticmethod
    def _filtered_groups(
        sandbox: SandboxContext, invoker: Invoker, values: Any, definition: WidgetDefinition
    ) -> list[PropertyGroup] | None:
        """Result of getProperties on a copy of the defaults, or None without one."""
        if not sandbox.is_get_properties_available():
            return None
        defaults = deep_clone_property_groups(definition.property_groups)
        return invoker.get_properties(values, defaults)

    def evaluate(
        self, config_content: str, values: Any, widget_definition: WidgetDefinitionInput
    ) -> EvaluationResult:
        """
        Filter the property schema and validate values in one pass.

        Args:
            config_content: Editor config script source
            values: Current configuration values (JSON-compatible)
            widget_definition: Default property schema

        Returns:
            Filtered groups, their sorted distinct keys, and validation errors

        Raises:
            EditorConfigError: If any stage fails; no partial result is returned
        """
        def work(sandbox: SandboxContext, invoker: Invoker) -> EvaluationResult:
            definition = _coerce_definition(widget_definition)
            filtered = self._filtered_groups(sandbox, invoker, values, definition)
            if filtered is None:
                filtered = deep_clone_property_groups(definition.property_groups)
            errors = invoker.check(values) if sandbox.is_check_available() else []
            return EvaluationResult(
                filtered_groups=filtered,
                visible_keys=extract_all_property_keys(filtered),
                validation_errors=errors,
            )

        return self._run("evaluate", work, config_content)

    def get_visible_property_keys(
        self, config_content: str, values: Any, widget_definition: WidgetDefinitionInput
    ) -> list[str] | None:
        """
        Keys left visible by ``getProperties``.

        Returns None when the script has no ``getProperties``, and an empty
        list when it hides everything.
        """
        def work(sandbox: SandboxContext, invoker: Invoker) -> list[str] | None:
            definition = _coerce_definition(widget_definition)
            filtered = self._filtered_groups(sandbox, invoker, values, definition)
            return None if filtered is None else extract_all_property_keys(filtered)

        return self._run("visible_keys", work, config_content)

    def validate(self, config_content: str, values: Any) -> list[ValidationError]:
        """Errors reported by ``check``; empty when the script has none."""

        def work(sandbox: SandboxContext, invoker: Invoker) -> list[ValidationError]:
            return invoker.check(values) if sandbox.is_check_available() else []

        return self._run("validate", work, config_content)

    def get_property_visibility_with_counts(
        self, config_content: str, values: Any, widget_definition: WidgetDefinitionInput
    ) -> PropertyVisibilityResult:
        """
        Visible keys plus a visible property count per group path.

        Counts are taken over the unfiltered definition; without
        ``getProperties`` every property counts.
        """
        def work(sandbox: SandboxContext, invoker: Invoker) -> PropertyVisibilityResult:
            definition = _coerce_definition(widget_definition)
            filtered = self._filtered_groups(sandbox, invoker, values, definition)
            visible_keys = None if filtered is None else extract_all_property_keys(filtered)
            return PropertyVisibilityResult(
                visible_keys=visible_keys,
                group_counts=count_groups(definition.property_groups, visible_keys),
            )

        return self._run("visibility_counts", work, config_content)


def evaluate_editor_config(
    config_content: str, values: Any, widget_definition: WidgetDefinitionInput
) -> EvaluationResult:
    """Convenience function for ``EditorConfigEvaluator.evaluate``."""
    return EditorConfigEvaluator().evaluate(config_content, values, widget_definition)


def get_visible_property_keys(
    config_content: str, values: Any, widget_definition: WidgetDefinitionInput
) -> list[str] | None:
    """Convenience function for ``EditorConfigEvaluator.get_visible_property_keys``."""
    return EditorConfigEvaluator().get_visible_property_keys(config_content, values, widget_definition)


def validate_editor_config_values(config_content: str, values: Any) -> list[ValidationError]:
    """Convenience function for ``EditorConfigEvaluator.validate``."""
    return EditorConfigEvaluator().validate(config_content, values)


def get_property_visibility_with_counts(
    config_content: str, values: Any, widget_definition: WidgetDefinitionInput
) -> PropertyVisibilityResult:
    """Convenience function for ``EditorConfigEvaluator.get_property_visibility_with_counts``."""
    return EditorConfigEvaluator().get_property_visibility_with_counts(config_content, values, widget_definition)
