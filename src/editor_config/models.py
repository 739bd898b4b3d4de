"""Typed models for widget property trees and evaluation results."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# A single configurable property: any JSON value. Only objects with a string
# "key" take part in key extraction.
PropertyDescriptor = Any


class PropertyGroup(BaseModel):
    """A named, possibly nested collection of property descriptors."""

    model_config = ConfigDict(populate_by_name=True)

    key: str | None = None
    caption: str | None = None
    properties: list[PropertyDescriptor] | None = None
    nested_groups: list["PropertyGroup"] | None = Field(default=None, alias="propertyGroups")

    def to_script(self) -> dict[str, Any]:
        """Shape seen by editor config scripts (camelCase, nulls kept)."""
        return self.model_dump(mode="json", by_alias=True)


class WidgetDefinition(BaseModel):
    """Default, unfiltered property schema of a widget."""

    model_config = ConfigDict(populate_by_name=True)

    property_groups: list[PropertyGroup] = Field(default_factory=list, alias="propertyGroups")


class ValidationError(BaseModel):
    """A problem reported by a script's ``check`` function."""

    property: str | None = None
    message: str
    url: str | None = None


class EvaluationResult(BaseModel):
    """Outcome of a full evaluation."""

    filtered_groups: list[PropertyGroup] = Field(default_factory=list)
    visible_keys: list[str] = Field(default_factory=list)
    validation_errors: list[ValidationError] = Field(default_factory=list)


class PropertyVisibilityResult(BaseModel):
    """Visible keys plus per-group visible property counts."""

    visible_keys: list[str] | None = None
    group_counts: dict[str, int] = Field(default_factory=dict)
