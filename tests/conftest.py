"""Pytest configuration and fixtures."""

import os

import pytest

from editor_config import EditorConfigEvaluator, PropertyGroup, Settings, WidgetDefinition


# ============================================================================
# Pytest Hooks
# ============================================================================

def pytest_configure(config):
    """Configure pytest with environment variables."""
    os.environ["EDITOR_CONFIG_LOG_LEVEL"] = "DEBUG"
    os.environ["EDITOR_CONFIG_THREAD_NAME_PREFIX"] = "editor-config-test"


# ============================================================================
# Core Fixtures
# ============================================================================

@pytest.fixture
def settings():
    """Test settings."""
    return Settings()


@pytest.fixture
def evaluator(settings):
    """Evaluator bound to test settings."""
    return EditorConfigEvaluator(settings)


# ============================================================================
# Schema Fixtures
# ============================================================================

@pytest.fixture
def general_group():
    """Group with a plain and an advanced property."""
    return PropertyGroup(
        key="general",
        caption="General",
        properties=[
            {"key": "name", "caption": "Name", "type": "string"},
            {"key": "advanced", "caption": "Advanced", "type": "boolean"},
        ],
    )


@pytest.fixture
def widget_definition(general_group):
    """Two-level widget definition."""
    return WidgetDefinition(
        property_groups=[
            general_group,
            PropertyGroup(
                key="data",
                caption="Data",
                properties=[{"key": "datasource", "caption": "Data source"}],
                nested_groups=[
                    PropertyGroup(
                        key="paging",
                        caption="Paging",
                        properties=[
                            {"key": "pageSize", "caption": "Page size"},
                            {"key": "name", "caption": "Duplicate key"},
                        ],
                    ),
                ],
            ),
        ]
    )


@pytest.fixture
def widget_definition_json():
    """Widget definition as delivered by the widget XML reader."""
    return {
        "propertyGroups": [
            {
                "key": "general",
                "caption": "General",
                "properties": [{"key": "name"}, {"key": "advanced"}],
            }
        ]
    }
