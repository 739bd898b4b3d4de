"""Default implementations of the helper functions scripts expect.

Widget tooling ships ``hidePropertyIn`` and ``hidePropertiesIn``; scripts
import them, and the import is stripped by the transformer. Whichever helper
the script does not define itself is prepended here.
"""

import re

from ..core import get_logger

logger = get_logger(__name__)

HAS_HIDE_PROPERTY_IN = re.compile(r"\bhidePropertyIn\s*=")
HAS_HIDE_PROPERTIES_IN = re.compile(r"\bhidePropertiesIn\s*=")

HIDE_PROPERTY_IN_JS = """
var hidePropertyIn = function(propertyGroups, propertyName) {
    var hideInGroup = function(group) {
        var properties = (group && group.properties) || [];
        var filteredProperties = properties.filter(function(p) {
            return p && p.key !== propertyName;
        });
        var nestedGroups = (group && group.propertyGroups) || [];
        var filteredNestedGroups = nestedGroups.map(hideInGroup);
        return Object.assign({}, group, {
            properties: filteredProperties,
            propertyGroups: filteredNestedGroups
        });
    };
    return propertyGroups.map(hideInGroup);
};
"""

HIDE_PROPERTIES_IN_JS = """
var hidePropertiesIn = function(propertyGroups, propertyNames) {
    return propertyNames.reduce(function(groups, propName) {
        return hidePropertyIn(groups, propName);
    }, propertyGroups);
};
"""


class UtilityInjector:
    """Builds the helper prelude for a transformed script."""

    def build_injection(self, transformed_source: str) -> str:
        """
        Return the helper definitions missing from the script.

        A helper assigned anywhere in the script (``hidePropertyIn = ...``)
        is left to the author's definition.
        """
        parts = []
        skipped = []

        if HAS_HIDE_PROPERTY_IN.search(transformed_source):
            skipped.append("hidePropertyIn")
        else:
            parts.append(HIDE_PROPERTY_IN_JS)

        if HAS_HIDE_PROPERTIES_IN.search(transformed_source):
            skipped.append("hidePropertiesIn")
        else:
            parts.append(HIDE_PROPERTIES_IN_JS)

        if skipped:
            logger.debug("author_helpers_kept", helpers=skipped)
        return "".join(parts)


def build_utils_injection(transformed_source: str) -> str:
    """Convenience function to build the helper prelude."""
    return UtilityInjector().build_injection(transformed_source)
